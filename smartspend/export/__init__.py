"""Export package."""

from smartspend.export.csv_export import (
    CSV_HEADER,
    UTF8_BOM,
    export_filename,
    records_to_csv,
    records_to_csv_bytes,
)

__all__ = [
    "CSV_HEADER",
    "UTF8_BOM",
    "export_filename",
    "records_to_csv",
    "records_to_csv_bytes",
]
