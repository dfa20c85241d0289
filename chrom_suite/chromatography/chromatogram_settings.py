import copy

from ..resources.constants import CHROMATOGRAM_TYPES


class ChromatogramSettings:
    """Describes how a chromatogram was acquired.

    Besides the acquisition descriptors, the settings carry a free-form
    key-value store ("meta values") used to annotate a chromatogram.

    Attributes:
        native_id (str): Identifier of the chromatogram in its source file.
        comment (str): Free-text comment.
        chromatogram_type (str): One of `CHROMATOGRAM_TYPES`.
        precursor_mz (float): m/z of the precursor ion (0 when not set).
        product_mz (float): m/z of the product ion (0 when not set). This
            is the characteristic m/z of the chromatogram.
        meta_values (dict): Meta value store.
    """

    def __init__(
            self,
            native_id: str = "",
            comment: str = "",
            chromatogram_type: str = "mass_chromatogram",
            precursor_mz: float = 0.0,
            product_mz: float = 0.0,
            meta_values: dict | None = None
    ):
        if chromatogram_type not in CHROMATOGRAM_TYPES:
            raise ValueError(f"Unknown chromatogram type: {chromatogram_type}")
        self.native_id = native_id
        self.comment = comment
        self.chromatogram_type = chromatogram_type
        self.precursor_mz = float(precursor_mz)
        self.product_mz = float(product_mz)
        self.meta_values = dict(meta_values) if meta_values else {}

    def get_meta_value(self, key: str, default=None):
        """Return the meta value stored under `key`, or `default`."""
        return self.meta_values.get(key, default)

    def set_meta_value(self, key: str, value) -> None:
        self.meta_values[key] = value

    def meta_value_exists(self, key: str) -> bool:
        return key in self.meta_values

    def remove_meta_value(self, key: str) -> None:
        self.meta_values.pop(key, None)

    def copy(self) -> "ChromatogramSettings":
        return copy.deepcopy(self)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChromatogramSettings):
            return NotImplemented
        return (
            self.native_id == other.native_id
            and self.comment == other.comment
            and self.chromatogram_type == other.chromatogram_type
            and self.precursor_mz == other.precursor_mz
            and self.product_mz == other.product_mz
            and self.meta_values == other.meta_values
        )

    def __str__(self) -> str:
        lines = [
            f"native id: {self.native_id}",
            f"type: {self.chromatogram_type}",
            f"precursor m/z: {self.precursor_mz}",
            f"product m/z: {self.product_mz}",
        ]
        if self.comment:
            lines.append(f"comment: {self.comment}")
        for key, value in self.meta_values.items():
            lines.append(f"{key}: {value}")
        return "\n".join(lines)
