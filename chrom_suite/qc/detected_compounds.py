import logging

import numpy as np
import pandas as pd


class DetectedCompoundsResult:
    """Outcome of the detected compounds QC metric.

    Attributes:
        detected_compounds (int): Number of library compounds detected.
        rt_shift_mean (float): Mean absolute difference (seconds) between
            observed and expected retention times.
    """

    def __init__(self, detected_compounds: int = 0, rt_shift_mean: float = 0.0):
        self.detected_compounds = detected_compounds
        self.rt_shift_mean = rt_shift_mean

    def __eq__(self, other) -> bool:
        if not isinstance(other, DetectedCompoundsResult):
            return NotImplemented
        return (
            self.detected_compounds == other.detected_compounds
            and self.rt_shift_mean == other.rt_shift_mean
        )

    def __repr__(self) -> str:
        return (
            f"DetectedCompoundsResult(detected_compounds={self.detected_compounds}, "
            f"rt_shift_mean={self.rt_shift_mean})"
        )


class DetectedCompounds:
    """Metabolomics QC metric: how many target compounds were found in a run.

    The input is the table of features found by a targeted feature finder
    for one run, one row per feature. It must have the columns `rt`
    (observed retention time) and `expected_rt` (library retention time).
    An optional `compound` column identifies the library compound; when
    present, several features of the same compound (e.g. adducts) count
    once.
    """

    name = "Detected Compounds"
    requires = ("features",)

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def compute(self, features: pd.DataFrame) -> DetectedCompoundsResult:
        """Compute the number of detected compounds and the mean RT shift.

        Args:
            features: Data frame with `rt`, `expected_rt` and optionally
                `compound` columns.

        Returns:
            A `DetectedCompoundsResult`. Both values are zero when the table
            is empty.

        Raises:
            KeyError: If `rt` or `expected_rt` is missing.
        """
        missing = [col for col in ("rt", "expected_rt") if col not in features.columns]
        if missing:
            raise KeyError(f"Feature table lacks column(s): {', '.join(missing)}")

        if features.empty:
            return DetectedCompoundsResult()

        if "compound" in features.columns:
            detected = int(features["compound"].nunique())
        else:
            detected = len(features)

        shifts = np.abs(
            features["rt"].to_numpy(dtype=float)
            - features["expected_rt"].to_numpy(dtype=float)
        )
        rt_shift_mean = float(np.mean(shifts))

        self.logger.info(
            f"{detected} compounds detected, mean RT shift {rt_shift_mean:.3f} s"
        )
        return DetectedCompoundsResult(detected, rt_shift_mean)
