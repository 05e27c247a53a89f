"""Record exports"""

from .spreadsheet import (
    export_date_range,
    filter_for_export,
    export_filename,
    export_xlsx,
    export_csv,
)

__all__ = [
    "export_date_range",
    "filter_for_export",
    "export_filename",
    "export_xlsx",
    "export_csv",
]
