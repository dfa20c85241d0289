# Meta value key under which merged chromatograms record the m/z values
# of the chromatograms that were merged into them.
MERGED_CHROMATOGRAM_MZS = "merged_chromatogram_mzs"

# Chromatogram types, following the PSI-MS controlled vocabulary names.
CHROMATOGRAM_TYPES = (
    "mass_chromatogram",
    "total_ion_current_chromatogram",
    "selected_ion_current_chromatogram",
    "basepeak_chromatogram",
    "selected_ion_monitoring_chromatogram",
    "selected_reaction_monitoring_chromatogram",
    "electromagnetic_radiation_chromatogram",
    "absorption_chromatogram",
    "emission_chromatogram",
)

# Retention time resolution used when merging chromatograms: peaks whose
# retention times (s) agree after multiplying by this factor and rounding
# are treated as the same data point.
MERGE_RT_RESOLUTION = 1000.0
