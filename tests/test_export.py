"""Tests for CSV export."""

import csv
import io
from datetime import date

import pytest

from smartspend.export import (
    CSV_HEADER,
    UTF8_BOM,
    export_filename,
    records_to_csv,
    records_to_csv_bytes,
)


class TestCsvExport:
    """Excel-friendly CSV output."""

    def test_starts_with_bom_and_header(self):
        text = records_to_csv(())
        assert text.startswith(UTF8_BOM)
        assert text == UTF8_BOM + "Fecha,Comercio,Categoría,Total,Descripción\n"

    def test_double_quote_is_doubled(self, make_record):
        text = records_to_csv((make_record(merchant='O"Brien'),))
        assert '"O""Brien"' in text

    def test_row_layout(self, make_record):
        record = make_record("Jumbo", "2024-01-15", "25.50", "Comida", "Pan, leche")
        lines = records_to_csv((record,)).splitlines()
        assert lines[1] == '"2024-01-15","Jumbo","Comida",25.50,"Pan, leche"'

    def test_missing_description_is_empty(self, make_record):
        lines = records_to_csv((make_record(total="3"),)).splitlines()
        assert lines[1].endswith(',3,""')

    def test_large_and_small_totals_have_no_exponent(self, make_record):
        lines = records_to_csv((
            make_record(total="1E+20"),
            make_record(total="1E-7"),
        )).splitlines()
        assert lines[1] == '"2024-01-01","Jumbo","Comida",100000000000000000000,""'
        assert lines[2] == '"2024-01-01","Jumbo","Comida",0.0000001,""'

    def test_one_row_per_record_in_store_order(self, sample_records):
        text = records_to_csv(sample_records).lstrip(UTF8_BOM)
        rows = list(csv.reader(io.StringIO(text)))

        assert tuple(rows[0]) == CSV_HEADER
        assert [row[1] for row in rows[1:]] == ["Jumbo", "Uber", "Lider"]

    def test_bytes_are_utf8_with_bom(self, make_record):
        payload = records_to_csv_bytes((make_record(category="Categoría"),))
        assert payload.startswith(b"\xef\xbb\xbf")
        assert "Categoría".encode("utf-8") in payload


class TestExportFilename:
    """Download file naming."""

    def test_default_prefix(self):
        assert export_filename(date(2024, 1, 31)) == "smartspend_export_2024-01-31.csv"

    def test_custom_prefix(self):
        assert export_filename(date(2024, 1, 31), prefix="gastos") == "gastos_2024-01-31.csv"

    def test_defaults_to_today(self):
        assert export_filename() == f"smartspend_export_{date.today().isoformat()}.csv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
