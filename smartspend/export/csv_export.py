"""
CSV Export

Local export of the record store, readable by Excel: UTF-8 with a
byte-order mark, Spanish header, text fields quoted with internal quotes
doubled, totals left unquoted.
"""

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from smartspend.models.receipt import ReceiptRecord


CSV_HEADER = ("Fecha", "Comercio", "Categoría", "Total", "Descripción")
UTF8_BOM = "\ufeff"


class _PlainDecimal(Decimal):
    """A Decimal that prints without an exponent, e.g. 1E+20 as 100000000000000000000."""

    def __str__(self) -> str:
        return format(self, "f")


def records_to_csv(records: Sequence[ReceiptRecord]) -> str:
    """
    Render records as CSV text, BOM included.

    A missing description is exported as an empty quoted field.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")

    # QUOTE_NONNUMERIC leaves the Decimal total bare and quotes the rest
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for record in records:
        writer.writerow([
            record.date,
            record.merchant,
            record.category,
            _PlainDecimal(record.total),
            record.description or "",
        ])

    return UTF8_BOM + buffer.getvalue()


def records_to_csv_bytes(records: Sequence[ReceiptRecord]) -> bytes:
    return records_to_csv(records).encode("utf-8")


def export_filename(
    today: Optional[date] = None,
    prefix: str = "smartspend_export",
) -> str:
    """e.g. smartspend_export_2024-01-31.csv"""
    return f"{prefix}_{(today or date.today()).isoformat()}.csv"
