import pandas as pd

from ..chromatography.chromatogram import Chromatogram
from ..qc.detected_compounds import DetectedCompoundsResult


def build_chromatogram_table(chromatograms: list[Chromatogram]) -> pd.DataFrame:
    """Create a table in long format with the peaks of all chromatograms.

    Args:
        chromatograms: A list with instances of `Chromatogram`.

    Returns:
        A pandas dataframe with the columns `chromatogram`, `native_id`,
        `mz`, `rt` and `intensity`, one row per peak.
    """
    columns = ["chromatogram", "native_id", "mz", "rt", "intensity"]
    frames = []
    for chromatogram in chromatograms:
        if chromatogram.is_empty():
            continue
        frame = chromatogram.to_dataframe()[["rt", "intensity"]].copy()
        frame.insert(0, "mz", chromatogram.get_mz())
        frame.insert(0, "native_id", chromatogram.settings.native_id)
        frame.insert(0, "chromatogram", chromatogram.name)
        frames.append(frame)

    if not frames:
        return pd.DataFrame(columns=columns)

    return pd.concat(frames, ignore_index=True)[columns]


def build_qc_table(results: dict[str, DetectedCompoundsResult]) -> pd.DataFrame:
    """Create a table with one row of QC values per run.

    Args:
        results: Detected compound results, keyed by run name.

    Returns:
        A pandas dataframe with the columns `run`, `detected_compounds` and
        `rt_shift_mean`.
    """
    rows = [
        {
            "run": run,
            "detected_compounds": result.detected_compounds,
            "rt_shift_mean": result.rt_shift_mean
        }
        for run, result in results.items()
    ]

    return pd.DataFrame(rows, columns=["run", "detected_compounds", "rt_shift_mean"])
