class DataArray(list):
    """A named list of per-peak values.

    Element `i` of a data array describes peak `i` of the chromatogram
    that owns it. An empty array means that the value is not tracked.

    Attributes:
        name (str): Name of the array, e.g. 'FWHM' or 'ion_mobility'.
    """

    def __init__(self, values=(), name: str = ""):
        super().__init__(values)
        self.name = name

    def __eq__(self, other) -> bool:
        if not isinstance(other, DataArray):
            return NotImplemented
        return self.name == other.name and list.__eq__(self, other)

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list.__repr__(self)}, name={self.name!r})"

    def permuted(self, order: list[int]) -> "DataArray":
        """Return a copy of the array reordered by a peak permutation.

        `order[j]` is the original index of the peak that ends up at
        position `j`. Indices beyond the end of this array are skipped, so
        an array shorter than the peak list keeps all of its own elements
        and is never read out of bounds. Elements past the end of the peak
        list stay where they are.
        """
        size = len(self)
        gathered = [self[i] for i in order if i < size]
        gathered.extend(self[len(order):])
        return self.__class__(gathered, name=self.name)


class FloatDataArray(DataArray):
    """Data array holding floating point values."""


class StringDataArray(DataArray):
    """Data array holding strings."""


class IntegerDataArray(DataArray):
    """Data array holding integers."""
