import os
import sys

import pandas as pd


def resource_path(relative_path: str) -> str:
    """Get absolute path to a packaged resource, works for source checkouts,
    installed packages and PyInstaller bundles.

    Args:
        relative_path: Path relative to the `chrom_suite` package directory.
    """
    if hasattr(sys, '_MEIPASS'):
        return os.path.join(sys._MEIPASS, "chrom_suite", relative_path)

    package_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(package_dir, relative_path)


def write_to_excel(
        out_path: str,
        data_dict: dict[str, pd.DataFrame] = None
) -> None:
    """Writes dataframes to an Excel file, and sets the widths of
    the columns for readability.

    Args:
        out_path: Path to which the data should be written.
        data_dict: A dictionary containing dataframes to be written to
            the Excel file. Each dataframe will be written to a separate
            sheet, named after the corresponding key.
    """
    with pd.ExcelWriter(out_path, engine="xlsxwriter") as writer:
        center_format = writer.book.add_format({'align': 'center'})
        for name, data in (data_dict or {}).items():
            if data is None:
                continue
            data.to_excel(writer, sheet_name=name, index=False)
            worksheet = writer.sheets[name]
            # Auto-adjust column widths.
            for i, col in enumerate(data.columns):
                if data.empty:
                    max_len = len(str(col)) + 2
                else:
                    max_len = max(
                        data[col].astype(str).map(len).max(),
                        len(str(col))  # Include header length
                    ) + 2  # Add some padding
                worksheet.set_column(i, i, max_len, center_format)
