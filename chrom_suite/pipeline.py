import logging

from .chromatography.chromatogram import Chromatogram
from .chromatography.merging import merge_chromatograms
from .filtering.savitzky_golay import SavitzkyGolayFilter


logger = logging.getLogger(__name__)


def process_chromatograms(
        chromatograms: list[Chromatogram],
        settings: dict,
        smooth: bool = True
) -> list[Chromatogram]:
    """Merge, smooth and summarize a set of chromatograms.

    Chromatograms sharing precursor and product m/z are merged into one
    (see `merge_chromatograms`), the merged traces are optionally smoothed
    with a Savitzky-Golay filter, and the range cache of every result is
    updated.

    Args:
        chromatograms: A list with instances of `Chromatogram`. Group heads
            are modified in place.
        settings: Settings dictionary, as returned by
            `SettingsManager.collect_settings`.
        smooth: Whether to apply the Savitzky-Golay filter.

    Returns:
        A list with the processed chromatograms.
    """
    logger.info(f"Processing {len(chromatograms)} chromatograms")
    merged = merge_chromatograms(
        chromatograms,
        add_meta=settings["merge_add_meta"],
        rt_resolution=settings["merge_rt_resolution"]
    )

    if smooth:
        sgolay = SavitzkyGolayFilter.from_settings(settings)
        sgolay.filter_experiment(merged)

    for chromatogram in merged:
        chromatogram.update_ranges()

    logger.info(f"Processing finished, {len(merged)} chromatograms remain")
    return merged
