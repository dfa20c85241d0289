import matplotlib
matplotlib.use("Agg")

import pytest

from chrom_suite.chromatography.chromatogram import Chromatogram
from chrom_suite.chromatography.chromatogram_settings import ChromatogramSettings
from chrom_suite.chromatography.data_arrays import (
    FloatDataArray, IntegerDataArray, StringDataArray
)


@pytest.fixture
def unsorted_chromatogram():
    """Five peaks out of retention time order, with one array of each kind."""
    chromatogram = Chromatogram.from_arrays(
        rts=[30.0, 10.0, 50.0, 20.0, 40.0],
        intensities=[3.0, 5.0, 1.0, 5.0, 2.0],
        name="unsorted",
        settings=ChromatogramSettings(native_id="SRM 1", product_mz=445.12)
    )
    chromatogram.float_data_arrays.append(
        FloatDataArray([0.3, 0.1, 0.5, 0.2, 0.4], name="fwhm")
    )
    chromatogram.string_data_arrays.append(
        StringDataArray(["c", "a", "e", "b", "d"], name="label")
    )
    chromatogram.integer_data_arrays.append(
        IntegerDataArray([3, 1, 5, 2, 4], name="scan")
    )
    return chromatogram


@pytest.fixture
def three_peaks():
    return Chromatogram.from_arrays([1.0, 3.0, 5.0], [10.0, 30.0, 50.0])
