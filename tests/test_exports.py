import io
from datetime import date, datetime

import pandas as pd
import pytest
from openpyxl import load_workbook

from core.exceptions import ExportError, ValidationError
from exports import export_csv, export_date_range, export_filename, export_xlsx, filter_for_export

NOW = datetime(2026, 3, 15, 9, 0)

RECORDS = [
    {"id": "1", "name": "홍길동", "신청일": "2026-03-01", "status": "접수", "alerts": []},
    {"id": "2", "name": "김철수", "신청일": "2026-03-15 17:45", "status": "부재"},
    {"id": "3", "name": "이영희", "신청일": "2026-02-27", "status": "접수"},
    {"id": "4", "name": "박민수", "신청일": ""},
]


def test_export_ranges():
    start, end = export_date_range("currentMonth", now=NOW)
    assert (start.date(), end.date()) == (date(2026, 3, 1), date(2026, 3, 31))

    start, end = export_date_range("lastMonth", now=NOW)
    assert (start.date(), end.date()) == (date(2026, 2, 1), date(2026, 2, 28))

    start, end = export_date_range("3months", now=NOW)
    assert (start.date(), end.date()) == (date(2025, 12, 15), date(2026, 3, 15))

    start, _ = export_date_range("all", now=NOW)
    assert start == datetime(2020, 1, 1)


def test_export_range_rejects_other_presets():
    with pytest.raises(ValidationError):
        export_date_range("6months", now=NOW)


def test_filter_drops_internal_fields_and_undated_rows():
    start, end = export_date_range("currentMonth", now=NOW)
    rows = filter_for_export(RECORDS, "신청일", start, end)

    assert [row["name"] for row in rows] == ["홍길동", "김철수"]
    assert all("id" not in row and "alerts" not in row for row in rows)


def test_export_xlsx():
    start, end = export_date_range("currentMonth", now=NOW)
    content = export_xlsx(RECORDS, "신청일", start, end)

    sheet = load_workbook(io.BytesIO(content)).worksheets[0]
    values = list(sheet.values)
    assert sheet.title == "Data"
    assert values[0] == ("name", "신청일", "status")
    assert values[1][0] == "홍길동"
    assert len(values) == 3


def test_export_csv_has_bom():
    start, end = export_date_range("currentMonth", now=NOW)
    content = export_csv(RECORDS, "신청일", start, end)

    assert content.startswith(b"\xef\xbb\xbf")
    df = pd.read_csv(io.BytesIO(content), encoding="utf-8-sig")
    assert list(df["name"]) == ["홍길동", "김철수"]


def test_empty_export_raises():
    start, end = export_date_range("lastMonth", now=datetime(2020, 1, 10))
    with pytest.raises(ExportError):
        export_csv(RECORDS, "신청일", start, end)


def test_export_filename():
    start, end = export_date_range("currentMonth", now=NOW)
    assert export_filename("customers", start, end, "xlsx") == "customers_2026-03-01_2026-03-31.xlsx"
