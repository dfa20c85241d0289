import copy
import logging

import numpy as np
import pandas as pd

from ..resources.constants import MERGE_RT_RESOLUTION, MERGED_CHROMATOGRAM_MZS
from .chromatogram_peak import ChromatogramPeak
from .chromatogram_settings import ChromatogramSettings
from .data_arrays import FloatDataArray, IntegerDataArray, StringDataArray
from .merging import sum_similar_union


class EmptyChromatogramError(ValueError):
    """Raised when an operation needs at least one peak but got none."""


class ChromatogramRanges:
    """Cached retention time and intensity ranges of a chromatogram.

    All bounds are `None` until `update` is called on a non-empty
    chromatogram.
    """

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self.rt_min = None
        self.rt_max = None
        self.intensity_min = None
        self.intensity_max = None

    def update(self, rts: np.ndarray, intensities: np.ndarray) -> None:
        """Recompute the ranges from the given peak arrays."""
        if len(rts) == 0:
            self.clear()
            return
        self.rt_min = float(np.min(rts))
        self.rt_max = float(np.max(rts))
        self.intensity_min = float(np.min(intensities))
        self.intensity_max = float(np.max(intensities))

    def is_empty(self) -> bool:
        return self.rt_min is None

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChromatogramRanges):
            return NotImplemented
        return (
            self.rt_min == other.rt_min
            and self.rt_max == other.rt_max
            and self.intensity_min == other.intensity_min
            and self.intensity_max == other.intensity_max
        )


class Chromatogram:
    """Represents a chromatogram: intensities ordered by retention time.

    The peaks are stored as two parallel NumPy arrays, `rts` (float64) and
    `intensities` (float32). Indexing the chromatogram returns a
    `ChromatogramPeak`. Three lists of auxiliary data arrays hold extra
    per-peak values; element `i` of each array describes peak `i`, and
    every reordering of the peaks is applied to these arrays as well.

    Assigning a chromatogram to another variable does not copy it; use
    `copy()` for an independent value.

    Attributes:
        rts (np.ndarray): Retention times (seconds).
        intensities (np.ndarray): Intensities.
        name (str): Name of the chromatogram. Not used for equality.
        settings (ChromatogramSettings): Acquisition settings and meta
            values.
        ranges (ChromatogramRanges): Cached data ranges, filled by
            `update_ranges`.
        float_data_arrays (list[FloatDataArray]): Float valued per-peak
            data.
        string_data_arrays (list[StringDataArray]): String valued per-peak
            data.
        integer_data_arrays (list[IntegerDataArray]): Integer valued
            per-peak data.
    """

    def __init__(
            self,
            peaks: list[ChromatogramPeak] | None = None,
            name: str = "",
            settings: ChromatogramSettings | None = None
    ):
        """Initialize a chromatogram.

        Args:
            peaks: Peaks to start with. They are stored in the given order.
            name: Name of the chromatogram.
            settings: Acquisition settings. Defaults to empty settings.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        peaks = peaks or []
        self.rts = np.array([p.rt for p in peaks], dtype=np.float64)
        self.intensities = np.array([p.intensity for p in peaks], dtype=np.float32)
        self.name = name
        self.settings = settings if settings is not None else ChromatogramSettings()
        self.ranges = ChromatogramRanges()
        self.float_data_arrays: list[FloatDataArray] = []
        self.string_data_arrays: list[StringDataArray] = []
        self.integer_data_arrays: list[IntegerDataArray] = []

    @classmethod
    def from_arrays(
            cls,
            rts,
            intensities,
            name: str = "",
            settings: ChromatogramSettings | None = None
    ) -> "Chromatogram":
        """Create a chromatogram from raw retention time and intensity data.

        Raises:
            ValueError: If both inputs do not have the same length.
        """
        rts = np.asarray(rts, dtype=np.float64)
        intensities = np.asarray(intensities, dtype=np.float32)
        if rts.shape != intensities.shape or rts.ndim != 1:
            raise ValueError(
                "Retention times and intensities must be 1D arrays of equal "
                f"length, got shapes {rts.shape} and {intensities.shape}"
            )
        chromatogram = cls(name=name, settings=settings)
        chromatogram.rts = rts.copy()
        chromatogram.intensities = intensities.copy()
        return chromatogram

    # Sequence protocol.

    def __len__(self) -> int:
        return len(self.rts)

    def __getitem__(self, index: int) -> ChromatogramPeak:
        return ChromatogramPeak(self.rts[index], self.intensities[index])

    def __setitem__(self, index: int, peak: ChromatogramPeak) -> None:
        self.rts[index] = peak.rt
        self.intensities[index] = peak.intensity

    def __iter__(self):
        for rt, intensity in zip(self.rts, self.intensities):
            yield ChromatogramPeak(rt, intensity)

    def append(self, peak: ChromatogramPeak) -> None:
        """Add a peak at the end, without restoring the sort order."""
        self.rts = np.append(self.rts, np.float64(peak.rt))
        self.intensities = np.append(self.intensities, np.float32(peak.intensity))

    def is_empty(self) -> bool:
        return len(self.rts) == 0

    # Value semantics.

    def copy(self) -> "Chromatogram":
        """Return a deep copy: peaks, data arrays, settings, ranges and name."""
        return copy.deepcopy(self)

    def __eq__(self, other) -> bool:
        # The name may differ between equal chromatograms.
        if not isinstance(other, Chromatogram):
            return NotImplemented
        return (
            np.array_equal(self.rts, other.rts)
            and np.array_equal(self.intensities, other.intensities)
            and self.ranges == other.ranges
            and self.settings == other.settings
            and self.float_data_arrays == other.float_data_arrays
            and self.string_data_arrays == other.string_data_arrays
            and self.integer_data_arrays == other.integer_data_arrays
        )

    __hash__ = None

    def __str__(self) -> str:
        lines = ["-- CHROMATOGRAM BEGIN --", str(self.settings)]
        lines.extend(str(peak) for peak in self)
        lines.append("-- CHROMATOGRAM END --")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Chromatogram(name={self.name!r}, peaks={len(self)}, mz={self.get_mz()})"

    def get_mz(self) -> float:
        """Return the characteristic m/z (the product m/z) of the chromatogram."""
        return self.settings.product_mz

    # Sorting.

    def has_data_arrays(self) -> bool:
        """Return whether any auxiliary data array is attached."""
        return bool(
            self.float_data_arrays
            or self.string_data_arrays
            or self.integer_data_arrays
        )

    def apply_permutation(self, order: np.ndarray) -> None:
        """Reorder the peaks and all auxiliary data arrays.

        Args:
            order: Permutation of the peak indices; `order[j]` is the old
                index of the peak that moves to position `j`.
        """
        self.rts = self.rts[order]
        self.intensities = self.intensities[order]
        if not self.has_data_arrays():
            return
        order_list = order.tolist()
        self.float_data_arrays = [
            array.permuted(order_list) for array in self.float_data_arrays
        ]
        self.string_data_arrays = [
            array.permuted(order_list) for array in self.string_data_arrays
        ]
        self.integer_data_arrays = [
            array.permuted(order_list) for array in self.integer_data_arrays
        ]

    def sort_by_intensity(self, reverse: bool = False) -> None:
        """Sort the peaks by intensity.

        The sort is stable: peaks with equal intensity keep their original
        relative order, also when `reverse` is set.

        Args:
            reverse: Sort from high to low intensity instead.
        """
        keys = -self.intensities if reverse else self.intensities
        self.apply_permutation(np.argsort(keys, kind="stable"))

    def sort_by_position(self) -> None:
        """Sort the peaks by ascending retention time (stable)."""
        self.apply_permutation(np.argsort(self.rts, kind="stable"))

    def is_sorted(self) -> bool:
        """Return whether the retention times are non-decreasing."""
        return bool(np.all(self.rts[:-1] <= self.rts[1:]))

    # Searching. All of these require the peaks to be sorted by position.

    def rt_begin(self, rt: float, begin: int = 0, end: int | None = None) -> int:
        """Return the index of the first peak with retention time >= `rt`.

        Args:
            rt: Retention time to search for.
            begin: First index of the searched sub-range.
            end: End (exclusive) of the searched sub-range. Defaults to the
                number of peaks.
        """
        end = len(self) if end is None else end
        return begin + int(np.searchsorted(self.rts[begin:end], rt, side="left"))

    def rt_end(self, rt: float, begin: int = 0, end: int | None = None) -> int:
        """Return the index of the first peak with retention time > `rt`.

        See `rt_begin` for the arguments.
        """
        end = len(self) if end is None else end
        return begin + int(np.searchsorted(self.rts[begin:end], rt, side="right"))

    def pos_begin(self, rt: float, begin: int = 0, end: int | None = None) -> int:
        """Alias of `rt_begin`."""
        return self.rt_begin(rt, begin, end)

    def pos_end(self, rt: float, begin: int = 0, end: int | None = None) -> int:
        """Alias of `rt_end`."""
        return self.rt_end(rt, begin, end)

    def get_peak_data(self, rt_low: float, rt_high: float) -> np.ndarray:
        """Return the peaks with `rt_low <= rt <= rt_high` as an array of
        shape (N, 2), retention times in column 0 and intensities in
        column 1.
        """
        start_idx = self.rt_begin(rt_low)
        end_idx = self.rt_end(rt_high)
        if start_idx >= end_idx:
            return np.empty((0, 2))

        return np.column_stack((
            self.rts[start_idx:end_idx],
            self.intensities[start_idx:end_idx].astype(np.float64)
        ))

    def find_nearest(self, rt: float) -> int:
        """Return the index of the peak closest to `rt`.

        When `rt` lies exactly halfway between two peaks, the later peak
        is returned.

        Raises:
            EmptyChromatogramError: If the chromatogram has no peaks.
        """
        if self.is_empty():
            raise EmptyChromatogramError(
                "There must be at least one peak to determine the nearest peak"
            )

        idx = self.rt_begin(rt)
        if idx == 0:
            return 0
        if idx == len(self):
            return len(self) - 1

        # Either the peak found or its predecessor is the closest.
        if abs(self.rts[idx - 1] - rt) < abs(self.rts[idx] - rt):
            return idx - 1
        return idx

    # Merging.

    def merge_peaks(
            self,
            other: "Chromatogram",
            add_meta: bool = False,
            rt_resolution: float = MERGE_RT_RESOLUTION
    ) -> None:
        """Merge the peaks of another chromatogram into this one.

        Both chromatograms must be sorted by retention time. The result is
        the union of both peak lists, where peaks whose retention times
        agree to the millisecond (see `sum_similar_union`) are combined
        into one peak with the summed intensity. Auxiliary data arrays are
        left untouched.

        Args:
            other: Chromatogram whose peaks are merged in. Not modified.
            add_meta: Append the m/z of `other` to the list stored in the
                `merged_chromatogram_mzs` meta value of this chromatogram.
            rt_resolution: See `sum_similar_union`.
        """
        if not (self.is_sorted() and other.is_sorted()):
            self.logger.warning(
                f"Merging unsorted chromatograms ('{self.name}', "
                f"'{other.name}'), the result will be incorrect"
            )

        self.rts, self.intensities = sum_similar_union(
            self.rts, self.intensities,
            other.rts, other.intensities,
            rt_resolution=rt_resolution
        )

        if add_meta:
            mzs = list(self.settings.get_meta_value(MERGED_CHROMATOGRAM_MZS, []))
            mzs.append(other.get_mz())
            self.settings.set_meta_value(MERGED_CHROMATOGRAM_MZS, mzs)

    # Ranges and clearing.

    def update_ranges(self) -> None:
        self.ranges.update(self.rts, self.intensities)

    def clear_ranges(self) -> None:
        self.ranges.clear()

    def clear(self, clear_meta_data: bool) -> None:
        """Remove all peaks.

        Args:
            clear_meta_data: Also reset the settings, the name, the range
                cache and all auxiliary data arrays.
        """
        self.rts = np.empty(0, dtype=np.float64)
        self.intensities = np.empty(0, dtype=np.float32)

        if clear_meta_data:
            self.clear_ranges()
            self.settings = ChromatogramSettings()
            self.name = ""
            self.float_data_arrays = []
            self.string_data_arrays = []
            self.integer_data_arrays = []

    # Conversion.

    def get_peaks(self) -> np.ndarray:
        """Return all peaks as an array of shape (N, 2) with retention
        times in column 0 and intensities in column 1."""
        return np.column_stack((self.rts, self.intensities.astype(np.float64)))

    def to_dataframe(self) -> pd.DataFrame:
        """Return the peaks as a data frame with `rt` and `intensity`
        columns, plus one column per auxiliary data array that has a value
        for every peak."""
        df = pd.DataFrame({"rt": self.rts, "intensity": self.intensities})
        for array in (
            self.float_data_arrays
            + self.string_data_arrays
            + self.integer_data_arrays
        ):
            if len(array) == len(self) and array.name not in df.columns:
                df[array.name] = list(array)

        return df


def sort_by_mz(chromatograms: list[Chromatogram]) -> list[Chromatogram]:
    """Return the chromatograms ordered by their product m/z."""
    return sorted(chromatograms, key=lambda chromatogram: chromatogram.get_mz())
