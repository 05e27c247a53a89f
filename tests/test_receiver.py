import asyncio
import io
import re
import zipfile
from pathlib import Path

import pytest
from openpyxl import Workbook

from core.exceptions import FileParseError, FileReadError, UnsupportedFileError
from estimates import EstimateReceiver
from estimates.parsers import CSVParser, ExcelParser


@pytest.mark.asyncio
async def test_parse_workbook_from_disk(estimate_workbook):
    path = estimate_workbook(total=1000000)

    estimate = await EstimateReceiver().parse_file(path)

    assert estimate.customer_name == "홍길동"
    assert estimate.customer_phone == "01098765432"
    assert estimate.address == "서울시 강남구 테헤란로 1"
    assert [item.loc for item in estimate.items] == ["거실", "안방"]
    assert [item.price for item in estimate.items] == [450000, 380000]
    assert estimate.total_sum == 1000000


@pytest.mark.asyncio
async def test_parse_is_repeatable(estimate_workbook):
    path = estimate_workbook()
    receiver = EstimateReceiver()

    first = await receiver.parse_file(path)
    second = await receiver.parse_file(path)

    assert first == second
    assert first.total_sum == 830000


@pytest.mark.asyncio
async def test_parse_upload_bytes(estimate_workbook):
    path = estimate_workbook(file_name="upload.xlsx")

    estimate = await EstimateReceiver().parse_upload(path.read_bytes(), "김철수_010-2222-3333.xlsx")

    assert estimate.customer_name == "김철수"
    assert estimate.customer_phone == "01098765432"


@pytest.mark.asyncio
async def test_date_cells_do_not_become_totals(tmp_path: Path):
    from datetime import datetime

    workbook = Workbook()
    sheet = workbook.active
    sheet["B1"] = "합계"
    sheet["D1"] = 15000
    sheet["E1"] = datetime(2026, 1, 1)
    path = tmp_path / "dated.xlsx"
    workbook.save(path)

    estimate = await EstimateReceiver().parse_file(path)

    assert estimate.total_sum == 15000


@pytest.mark.asyncio
async def test_only_first_sheet_is_read(tmp_path: Path):
    workbook = Workbook()
    workbook.active["A1"] = "메모"
    other = workbook.create_sheet("두번째")
    other["B1"] = "합계"
    other["C1"] = 990000
    path = tmp_path / "two_sheets.xlsx"
    workbook.save(path)

    estimate = await EstimateReceiver().parse_file(path)

    assert estimate.total_sum == 0


@pytest.mark.asyncio
async def test_csv_estimate(tmp_path: Path):
    lines = [
        "순번,설치위치,품명,모델" + "," * 15,
        "1,거실,창호,A" + "," * 14 + "25000",
        ",합계,,,,60000" + "," * 13,
    ]
    path = tmp_path / "이영희_01033334444.csv"
    path.write_text("\n".join(lines), encoding="utf-8")

    estimate = await EstimateReceiver().parse_file(path)

    assert [item.price for item in estimate.items] == [25000]
    assert estimate.total_sum == 60000
    assert estimate.customer_phone == "01033334444"


@pytest.mark.asyncio
async def test_unsupported_extension():
    with pytest.raises(UnsupportedFileError):
        await EstimateReceiver().parse_upload(b"hello", "estimate.pdf")


@pytest.mark.asyncio
async def test_corrupt_workbook_raises_parse_error():
    with pytest.raises(FileParseError) as exc_info:
        await EstimateReceiver().parse_upload(b"not a workbook", "broken.xlsx")

    assert exc_info.value.__cause__ is not None
    assert exc_info.value.file_path == "broken.xlsx"


@pytest.mark.asyncio
async def test_missing_file_raises_read_error(tmp_path: Path):
    with pytest.raises(FileReadError):
        await EstimateReceiver().parse_file(tmp_path / "missing.xlsx")


def test_supports():
    receiver = EstimateReceiver()
    assert receiver.supports("견적.XLSX")
    assert receiver.supports("견적.csv")
    assert not receiver.supports("견적.pdf")


def test_parser_map_follows_supported_extensions():
    receiver = EstimateReceiver()
    expected = set(ExcelParser().supported_extensions) | set(CSVParser().supported_extensions)
    assert set(receiver.parsers) == expected
    assert isinstance(receiver.parsers[".xls"], ExcelParser)


def _with_stale_dimension(path: Path) -> bytes:
    """Rewrite the sheet's <dimension> tag to A1 the way some exporters leave it"""
    source = zipfile.ZipFile(path)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            content = source.read(info.filename)
            if info.filename == "xl/worksheets/sheet1.xml":
                content = re.sub(rb'<dimension ref="[^"]*"', b'<dimension ref="A1"', content)
            target.writestr(info, content)
    source.close()
    return buffer.getvalue()


@pytest.mark.asyncio
async def test_stale_dimension_tag_does_not_truncate_sheet(tmp_path: Path):
    workbook = Workbook()
    sheet = workbook.active
    sheet["A1"] = "현장주소"
    sheet["C1"] = "서울시 강남구"
    sheet["A2"] = "합계"
    sheet["E2"] = 1500000
    path = tmp_path / "stale.xlsx"
    workbook.save(path)

    data = _with_stale_dimension(path)
    assert b'<dimension ref="A1"' in zipfile.ZipFile(io.BytesIO(data)).read("xl/worksheets/sheet1.xml")

    estimate = await EstimateReceiver().parse_upload(data, "stale.xlsx")

    assert estimate.address == "서울시 강남구"
    assert estimate.total_sum == 1500000


@pytest.mark.asyncio
async def test_table_offset_from_a1_is_read_from_used_range(tmp_path: Path):
    workbook = Workbook()
    sheet = workbook.active
    # Same layout as a normal estimate, shifted one row down and one column right
    sheet.cell(row=2, column=2, value="순번")
    sheet.cell(row=2, column=3, value="설치위치")
    sheet.cell(row=3, column=2, value=1)
    sheet.cell(row=3, column=3, value="거실")
    sheet.cell(row=3, column=4, value="창호")
    sheet.cell(row=3, column=5, value="A-100")
    sheet.cell(row=3, column=20, value=450000)
    path = tmp_path / "offset.xlsx"
    workbook.save(path)

    estimate = await EstimateReceiver().parse_file(path)

    assert [item.loc for item in estimate.items] == ["거실"]
    assert [item.model for item in estimate.items] == ["A-100"]
    assert [item.price for item in estimate.items] == [450000]


def test_trim_to_used_range():
    rows = [
        ["", "", ""],
        ["", "a", ""],
        ["", "", "b"],
    ]
    assert ExcelParser().trim_to_used_range(rows) == [["a", ""], ["", "b"]]
    assert ExcelParser().trim_to_used_range([["", ""]]) == []


@pytest.mark.asyncio
async def test_parse_upload_runs_off_the_event_loop(estimate_workbook, monkeypatch):
    path = estimate_workbook()
    calls = []
    real_to_thread = asyncio.to_thread

    async def tracking_to_thread(func, *args, **kwargs):
        calls.append(getattr(func, "__name__", ""))
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", tracking_to_thread)

    estimate = await EstimateReceiver().parse_upload(path.read_bytes(), path.name)

    assert "parse_bytes" in calls
    assert estimate.total_sum == 830000
