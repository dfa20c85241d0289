import logging

import numpy as np

from ..resources.constants import MERGE_RT_RESOLUTION


logger = logging.getLogger(__name__)


def round_half_away(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, with halves rounded away from zero.

    `np.round` rounds halves to even, which would make e.g. 0.0005 s and
    0.0015 s fall on different sides of the merge grid than expected.
    """
    values = np.asarray(values, dtype=np.float64)
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def sum_similar_union(
        rts_a: np.ndarray,
        intensities_a: np.ndarray,
        rts_b: np.ndarray,
        intensities_b: np.ndarray,
        rt_resolution: float = MERGE_RT_RESOLUTION
) -> tuple[np.ndarray, np.ndarray]:
    """Merge two retention time sorted peak lists into their union.

    Works like a set union over sorted input, except that two retention
    times count as equal when they agree after scaling by `rt_resolution`
    and rounding (with the default of 1000 this means: equal to the
    millisecond). Equal peaks are emitted once, at the retention time of
    the first list, with the sum of both intensities.

    Both inputs must be sorted by retention time and must not contain
    duplicate retention times themselves. This is not validated; unsorted
    input gives an incorrect but well-formed result.

    Args:
        rts_a: Retention times of the first peak list.
        intensities_a: Intensities of the first peak list.
        rts_b: Retention times of the second peak list.
        intensities_b: Intensities of the second peak list.
        rt_resolution: Number of grid points per second used to decide
            whether two retention times are the same.

    Returns:
        A tuple `(rts, intensities)` with the merged peaks. The result holds
        at most `len(rts_a) + len(rts_b)` peaks.
    """
    rts_a = np.asarray(rts_a, dtype=np.float64)
    rts_b = np.asarray(rts_b, dtype=np.float64)
    intensities_a = np.asarray(intensities_a, dtype=np.float32)
    intensities_b = np.asarray(intensities_b, dtype=np.float32)

    # Rounded grid keys, computed once for both lists.
    keys_a = round_half_away(rts_a * rt_resolution).tolist()
    keys_b = round_half_away(rts_b * rt_resolution).tolist()

    n, m = len(keys_a), len(keys_b)
    out_rts = np.empty(n + m, dtype=np.float64)
    out_intensities = np.empty(n + m, dtype=np.float32)

    i = j = k = 0
    while i < n and j < m:
        if keys_a[i] < keys_b[j]:
            out_rts[k] = rts_a[i]
            out_intensities[k] = intensities_a[i]
            i += 1
        elif keys_b[j] < keys_a[i]:
            out_rts[k] = rts_b[j]
            out_intensities[k] = intensities_b[j]
            j += 1
        else:
            # Approximately equal: keep the first list's retention time.
            out_rts[k] = rts_a[i]
            out_intensities[k] = intensities_a[i] + intensities_b[j]
            i += 1
            j += 1
        k += 1

    # Copy whatever remains of the list that was not exhausted.
    rest_a = n - i
    out_rts[k:k + rest_a] = rts_a[i:]
    out_intensities[k:k + rest_a] = intensities_a[i:]
    k += rest_a
    rest_b = m - j
    out_rts[k:k + rest_b] = rts_b[j:]
    out_intensities[k:k + rest_b] = intensities_b[j:]
    k += rest_b

    return out_rts[:k].copy(), out_intensities[:k].copy()


def merge_chromatograms(
        chromatograms: list,
        add_meta: bool = True,
        rt_resolution: float = MERGE_RT_RESOLUTION
) -> list:
    """Merge chromatograms that share a precursor and product m/z.

    Chromatograms are grouped by `(precursor m/z, product m/z)`. Each group
    member is sorted by retention time and then merged into the first
    member of its group with `Chromatogram.merge_peaks`. The input
    chromatograms that act as group heads are modified in place.

    Args:
        chromatograms: A list with instances of `Chromatogram`.
        add_meta: Whether merged chromatograms should record the m/z of
            each chromatogram merged into them.
        rt_resolution: See `sum_similar_union`.

    Returns:
        A list with one merged chromatogram per group, in order of first
        appearance.
    """
    groups = {}
    for chromatogram in chromatograms:
        key = (chromatogram.settings.precursor_mz, chromatogram.settings.product_mz)
        groups.setdefault(key, []).append(chromatogram)

    merged = []
    for (precursor_mz, product_mz), members in groups.items():
        head = members[0]
        head.sort_by_position()
        for other in members[1:]:
            other.sort_by_position()
            head.merge_peaks(other, add_meta=add_meta, rt_resolution=rt_resolution)
        if len(members) > 1:
            logger.info(
                f"Merged {len(members)} chromatograms for "
                f"{precursor_mz} -> {product_mz} into {len(head)} peaks"
            )
        merged.append(head)

    return merged
