import numpy as np
import pandas as pd
import pytest

from chrom_suite.chromatography.chromatogram import (
    Chromatogram, EmptyChromatogramError, sort_by_mz
)
from chrom_suite.chromatography.chromatogram_peak import ChromatogramPeak
from chrom_suite.chromatography.chromatogram_settings import ChromatogramSettings
from chrom_suite.chromatography.data_arrays import (
    FloatDataArray, IntegerDataArray, StringDataArray
)


def test_construction_from_peaks():
    chromatogram = Chromatogram([ChromatogramPeak(2.0, 4.0), ChromatogramPeak(1.0, 3.0)])
    assert len(chromatogram) == 2
    assert chromatogram[0] == ChromatogramPeak(2.0, 4.0)
    assert chromatogram.rts.dtype == np.float64
    assert chromatogram.intensities.dtype == np.float32


def test_from_arrays_rejects_length_mismatch():
    with pytest.raises(ValueError):
        Chromatogram.from_arrays([1.0, 2.0], [1.0])


def test_append_and_setitem():
    chromatogram = Chromatogram()
    chromatogram.append(ChromatogramPeak(1.0, 2.0))
    chromatogram.append(ChromatogramPeak(2.0, 3.0))
    chromatogram[1] = ChromatogramPeak(2.5, 7.0)
    assert [p.rt for p in chromatogram] == [1.0, 2.5]
    assert [p.intensity for p in chromatogram] == [2.0, 7.0]


def test_sort_by_position_keeps_data_arrays_aligned(unsorted_chromatogram):
    unsorted_chromatogram.sort_by_position()

    assert unsorted_chromatogram.rts.tolist() == [10.0, 20.0, 30.0, 40.0, 50.0]
    assert unsorted_chromatogram.intensities.tolist() == [5.0, 5.0, 3.0, 2.0, 1.0]
    assert unsorted_chromatogram.float_data_arrays[0] == FloatDataArray(
        [0.1, 0.2, 0.3, 0.4, 0.5], name="fwhm"
    )
    assert unsorted_chromatogram.string_data_arrays[0] == ["a", "b", "c", "d", "e"]
    assert unsorted_chromatogram.integer_data_arrays[0] == [1, 2, 3, 4, 5]
    assert unsorted_chromatogram.is_sorted()


def test_sort_by_position_keeps_array_names(unsorted_chromatogram):
    unsorted_chromatogram.sort_by_position()
    assert unsorted_chromatogram.float_data_arrays[0].name == "fwhm"
    assert isinstance(unsorted_chromatogram.string_data_arrays[0], StringDataArray)


def test_sort_by_position_without_data_arrays():
    chromatogram = Chromatogram.from_arrays([3.0, 1.0, 2.0], [30.0, 10.0, 20.0])
    chromatogram.sort_by_position()
    assert chromatogram.rts.tolist() == [1.0, 2.0, 3.0]
    assert chromatogram.intensities.tolist() == [10.0, 20.0, 30.0]


def test_sort_by_position_is_idempotent(unsorted_chromatogram):
    unsorted_chromatogram.sort_by_position()
    once = unsorted_chromatogram.copy()
    unsorted_chromatogram.sort_by_position()
    assert unsorted_chromatogram == once


def test_sort_by_intensity_is_stable(unsorted_chromatogram):
    unsorted_chromatogram.sort_by_intensity()
    assert unsorted_chromatogram.intensities.tolist() == [1.0, 2.0, 3.0, 5.0, 5.0]
    # The two peaks with intensity 5 keep their original order.
    assert unsorted_chromatogram.rts.tolist() == [50.0, 40.0, 30.0, 10.0, 20.0]
    assert unsorted_chromatogram.integer_data_arrays[0] == [5, 4, 3, 1, 2]


def test_sort_by_intensity_reverse(unsorted_chromatogram):
    unsorted_chromatogram.sort_by_intensity(reverse=True)
    assert unsorted_chromatogram.intensities.tolist() == [5.0, 5.0, 3.0, 2.0, 1.0]
    assert unsorted_chromatogram.rts.tolist() == [10.0, 20.0, 30.0, 40.0, 50.0]
    assert unsorted_chromatogram.string_data_arrays[0] == ["a", "b", "c", "d", "e"]


def test_short_data_array_is_not_overrun():
    chromatogram = Chromatogram.from_arrays([3.0, 1.0, 2.0], [1.0, 2.0, 3.0])
    chromatogram.float_data_arrays.append(FloatDataArray([0.3, 0.1], name="partial"))
    chromatogram.sort_by_position()
    assert chromatogram.float_data_arrays[0] == FloatDataArray([0.1, 0.3], name="partial")


def test_is_sorted():
    assert Chromatogram().is_sorted()
    assert Chromatogram.from_arrays([1.0, 1.0, 2.0], [0, 0, 0]).is_sorted()
    assert not Chromatogram.from_arrays([2.0, 1.0], [0, 0]).is_sorted()


def test_find_nearest(three_peaks):
    assert three_peaks.find_nearest(0.0) == 0
    assert three_peaks.find_nearest(6.0) == 2
    assert three_peaks.find_nearest(2.9) == 1
    assert three_peaks.find_nearest(1.5) == 0
    assert three_peaks.find_nearest(5.0) == 2


def test_find_nearest_tie_prefers_later_peak(three_peaks):
    assert three_peaks.find_nearest(2.0) == 1
    assert three_peaks.find_nearest(4.0) == 2


def test_find_nearest_on_empty_chromatogram():
    with pytest.raises(EmptyChromatogramError):
        Chromatogram().find_nearest(1.0)


def test_rt_begin_and_end(three_peaks):
    assert three_peaks.rt_begin(3.0) == 1
    assert three_peaks.rt_end(3.0) == 2
    assert three_peaks.rt_begin(0.0) == 0
    assert three_peaks.rt_end(10.0) == 3
    assert three_peaks.pos_begin(3.5) == 2
    assert three_peaks.pos_end(2.0) == 1


def test_rt_begin_and_end_in_sub_range(three_peaks):
    assert three_peaks.rt_begin(0.0, begin=1, end=3) == 1
    assert three_peaks.rt_end(10.0, begin=0, end=2) == 2
    assert three_peaks.rt_begin(4.0, begin=1, end=2) == 2


def test_get_peak_data(three_peaks):
    data = three_peaks.get_peak_data(1.0, 3.0)
    assert data.shape == (2, 2)
    assert data[:, 0].tolist() == [1.0, 3.0]
    assert three_peaks.get_peak_data(3.5, 4.5).shape == (0, 2)


def test_copy_is_deep(unsorted_chromatogram):
    duplicate = unsorted_chromatogram.copy()
    assert duplicate == unsorted_chromatogram
    assert duplicate.name == "unsorted"

    duplicate.rts[0] = 99.0
    duplicate.float_data_arrays[0][0] = 99.0
    duplicate.settings.set_meta_value("key", 1)
    assert unsorted_chromatogram.rts[0] == 30.0
    assert unsorted_chromatogram.float_data_arrays[0][0] == 0.3
    assert not unsorted_chromatogram.settings.meta_value_exists("key")


def test_equality_ignores_name(unsorted_chromatogram):
    other = unsorted_chromatogram.copy()
    other.name = "something else"
    assert other == unsorted_chromatogram


def test_equality_compares_data_arrays_and_settings(unsorted_chromatogram):
    other = unsorted_chromatogram.copy()
    other.string_data_arrays[0].name = "other"
    assert other != unsorted_chromatogram

    other = unsorted_chromatogram.copy()
    other.settings.product_mz = 1.0
    assert other != unsorted_chromatogram


def test_equality_compares_ranges(three_peaks):
    other = three_peaks.copy()
    other.update_ranges()
    assert other != three_peaks


def test_update_and_clear_ranges(three_peaks):
    three_peaks.update_ranges()
    assert three_peaks.ranges.rt_min == 1.0
    assert three_peaks.ranges.rt_max == 5.0
    assert three_peaks.ranges.intensity_max == 50.0
    three_peaks.clear_ranges()
    assert three_peaks.ranges.is_empty()


def test_clear_keeps_meta_data(unsorted_chromatogram):
    unsorted_chromatogram.clear(False)
    assert len(unsorted_chromatogram) == 0
    assert unsorted_chromatogram.name == "unsorted"
    assert unsorted_chromatogram.settings.native_id == "SRM 1"
    assert len(unsorted_chromatogram.float_data_arrays) == 1


def test_clear_with_meta_data(unsorted_chromatogram):
    unsorted_chromatogram.update_ranges()
    unsorted_chromatogram.clear(True)
    assert len(unsorted_chromatogram) == 0
    assert unsorted_chromatogram.name == ""
    assert unsorted_chromatogram.settings == ChromatogramSettings()
    assert unsorted_chromatogram.ranges.is_empty()
    assert unsorted_chromatogram.float_data_arrays == []
    assert unsorted_chromatogram.string_data_arrays == []
    assert unsorted_chromatogram.integer_data_arrays == []
    assert unsorted_chromatogram == Chromatogram()


def test_get_mz_and_sort_by_mz():
    low = Chromatogram(settings=ChromatogramSettings(product_mz=100.0))
    high = Chromatogram(settings=ChromatogramSettings(product_mz=300.0))
    mid = Chromatogram(settings=ChromatogramSettings(product_mz=200.0))
    assert high.get_mz() == 300.0
    assert sort_by_mz([high, low, mid]) == [low, mid, high]


def test_to_dataframe_includes_full_length_arrays(unsorted_chromatogram):
    unsorted_chromatogram.float_data_arrays.append(FloatDataArray([1.0], name="short"))
    df = unsorted_chromatogram.to_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["rt", "intensity", "fwhm", "label", "scan"]
    assert df["label"].tolist() == ["c", "a", "e", "b", "d"]


def test_get_peaks(three_peaks):
    peaks = three_peaks.get_peaks()
    assert peaks.shape == (3, 2)
    assert peaks[2].tolist() == [5.0, 50.0]


def test_str_frames_settings_and_peaks(three_peaks):
    text = str(three_peaks)
    lines = text.splitlines()
    assert lines[0] == "-- CHROMATOGRAM BEGIN --"
    assert lines[-1] == "-- CHROMATOGRAM END --"
    assert "RT: 3.0 INT: 30.0" in lines


def test_unknown_chromatogram_type():
    with pytest.raises(ValueError):
        ChromatogramSettings(chromatogram_type="not_a_type")


def test_long_data_array_keeps_trailing_elements():
    chromatogram = Chromatogram.from_arrays([2.0, 1.0], [1.0, 2.0])
    chromatogram.float_data_arrays.append(FloatDataArray([0.2, 0.1, 0.9], name="fwhm"))
    chromatogram.sort_by_position()
    assert chromatogram.float_data_arrays[0] == FloatDataArray([0.1, 0.2, 0.9], name="fwhm")


def test_sort_after_clear_keeps_data_arrays(unsorted_chromatogram):
    unsorted_chromatogram.clear(False)
    unsorted_chromatogram.sort_by_intensity()
    unsorted_chromatogram.sort_by_position()
    assert unsorted_chromatogram.float_data_arrays[0] == FloatDataArray(
        [0.3, 0.1, 0.5, 0.2, 0.4], name="fwhm"
    )
    assert unsorted_chromatogram.string_data_arrays[0] == ["c", "a", "e", "b", "d"]


def test_sort_by_position_permutes_string_and_integer_arrays_without_float_arrays():
    chromatogram = Chromatogram.from_arrays([3.0, 1.0, 2.0], [30.0, 10.0, 20.0])
    chromatogram.string_data_arrays.append(StringDataArray(["c", "a", "b"], name="label"))
    chromatogram.integer_data_arrays.append(IntegerDataArray([3, 1, 2], name="scan"))
    chromatogram.sort_by_position()
    assert chromatogram.float_data_arrays == []
    assert chromatogram.string_data_arrays[0] == StringDataArray(["a", "b", "c"], name="label")
    assert chromatogram.integer_data_arrays[0] == IntegerDataArray([1, 2, 3], name="scan")


def test_pos_begin_and_end_match_rt_begin_and_end(three_peaks):
    for rt in (0.0, 1.0, 2.0, 3.0, 6.0):
        assert three_peaks.pos_begin(rt) == three_peaks.rt_begin(rt)
        assert three_peaks.pos_end(rt) == three_peaks.rt_end(rt)
