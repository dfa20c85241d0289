import numpy as np


class ChromatogramPeak:
    """Represents a single data point of a chromatogram.

    Attributes:
        rt (float): Retention time (seconds), stored as a 64-bit float.
        intensity (float): Intensity, stored with 32-bit precision.
    """

    def __init__(self, rt: float = 0.0, intensity: float = 0.0):
        """Initialize a chromatogram peak.

        Args:
            rt: Retention time in seconds.
            intensity: Intensity of the data point.
        """
        self.rt = float(np.float64(rt))
        self.intensity = float(np.float32(intensity))

    @property
    def position(self) -> float:
        """Alias of `rt`, the coordinate by which peaks are ordered."""
        return self.rt

    @position.setter
    def position(self, value: float) -> None:
        self.rt = float(np.float64(value))

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChromatogramPeak):
            return NotImplemented
        return self.rt == other.rt and self.intensity == other.intensity

    def __repr__(self) -> str:
        return f"ChromatogramPeak(rt={self.rt}, intensity={self.intensity})"

    def __str__(self) -> str:
        return f"RT: {self.rt} INT: {self.intensity}"
