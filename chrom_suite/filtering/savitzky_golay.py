import logging

import numpy as np
from scipy.signal import savgol_filter


class SavitzkyGolayFilter:
    """Smooths chromatographic traces with a Savitzky-Golay filter.

    For every data point a polynomial of degree `polynomial_order` is
    fitted by least squares to the `frame_length` points centred on it,
    and the intensity is replaced by the value of that polynomial. Points
    closer to the edges than half a frame are evaluated on the polynomial
    fitted to the first (or last) full frame. Negative smoothed
    intensities are set to zero.

    Attributes:
        polynomial_order (int): Degree of the fitted polynomial.
        frame_length (int): Number of data points per fit. Always odd.
    """

    def __init__(self, polynomial_order: int = 4, frame_length: int = 11):
        """Initialize the filter.

        Args:
            polynomial_order: Degree of the fitted polynomial.
            frame_length: Number of data points per fit. An even value is
                increased by one.

        Raises:
            ValueError: If the frame is not longer than the polynomial
                order, or if either value is not positive.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        polynomial_order = int(polynomial_order)
        frame_length = int(frame_length)
        if polynomial_order < 0 or frame_length < 1:
            raise ValueError(
                "Polynomial order and frame length must be positive, got "
                f"{polynomial_order} and {frame_length}"
            )
        if frame_length % 2 == 0:
            self.logger.warning(
                f"Frame length {frame_length} is even, using {frame_length + 1}"
            )
            frame_length += 1
        if polynomial_order >= frame_length:
            raise ValueError(
                f"Frame length ({frame_length}) must be larger than the "
                f"polynomial order ({polynomial_order})"
            )
        self.polynomial_order = polynomial_order
        self.frame_length = frame_length

    @classmethod
    def from_settings(cls, settings: dict) -> "SavitzkyGolayFilter":
        """Create a filter from a settings dictionary, as returned by
        `SettingsManager.collect_settings`."""
        return cls(
            polynomial_order=int(settings["savgol_polynomial_order"]),
            frame_length=int(settings["savgol_frame_length"])
        )

    def smooth(self, intensities: np.ndarray) -> np.ndarray:
        """Return a smoothed copy of an intensity trace.

        Traces with fewer points than one frame are returned unchanged.
        """
        intensities = np.asarray(intensities)
        if len(intensities) < self.frame_length:
            if len(intensities) > 0:
                self.logger.warning(
                    f"Trace with {len(intensities)} points is shorter than "
                    f"the frame length ({self.frame_length}), not smoothed"
                )
            return intensities.copy()

        smoothed = savgol_filter(
            intensities.astype(np.float64),
            window_length=self.frame_length,
            polyorder=self.polynomial_order,
            mode="interp"
        )
        # Intensities cannot be negative.
        smoothed[smoothed < 0] = 0.0

        return smoothed.astype(intensities.dtype, copy=False)

    def filter(self, chromatogram) -> None:
        """Smooth the intensities of a chromatogram in place."""
        chromatogram.intensities = self.smooth(chromatogram.intensities)

    def filter_experiment(self, chromatograms: list) -> None:
        """Smooth every chromatogram of a list in place."""
        for chromatogram in chromatograms:
            self.filter(chromatogram)
        self.logger.info(
            f"Smoothed {len(chromatograms)} chromatograms "
            f"(order {self.polynomial_order}, frame {self.frame_length})"
        )
