"""Heuristic estimate extraction from a spreadsheet grid

Quote workbooks follow no fixed schema. Values are located by keyword
search over the cell text and read at a fixed offset from the matching
cell; the item table is read with fixed column positions.
"""

import logging
import math
import re
from typing import Any, List, Optional, Sequence, Tuple

from core.models import ExtractedEstimate, LineItem, SheetScan
from utils.formatting import digits_only

logger = logging.getLogger(__name__)

TOTAL_KEYWORDS = ("금액총계", "금액 총계", "계", "부가세", "공급가", "합계", "영업합계", "최종")
PHONE_KEYWORDS = ("연락처", "전화번호", "H.P", "HP")
ADDRESS_KEYWORDS = ("현장주소", "현장 주소")
SEQUENCE_HEADER = "순번"
ETC_KEYWORDS = ("기타", "잡비")
SKIP_LOCATIONS = ("설치위치", "비고")
REMARK = "비고"

# Item table layout of the quote template
LOC_COL = 1
PROD_COL = 2
MODEL_COL = 3
PRICE_COL = 18

# Price probing
PRICE_MIN_CANDIDATE = 1000  # digit runs must exceed this to count as money
TOTAL_MIN_CANDIDATE = 10000
TOTAL_PROBE_WIDTH = 10
ADDRESS_OFFSETS = (2, 1)
PHONE_OFFSETS = (4, 3, 2, 1)
PHONE_MIN_DIGITS = 9

_DIGIT_RUN = re.compile(r"[0-9]+")
_WHITESPACE = re.compile(r"\s")


def _is_blank(value: Any) -> bool:
    """Falsy cell: None, empty string, zero, False or NaN"""
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def cell_text(value: Any) -> str:
    """Render a cell the way it reads on screen; blank cells become ''"""
    if _is_blank(value):
        return ""
    if isinstance(value, bool):
        return "true"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _cell(row: Sequence[Any], col: int) -> Any:
    if 0 <= col < len(row):
        return row[col]
    return None


def _first_filled(row: Sequence[Any], cols: Sequence[int]) -> Any:
    """First non-blank cell among cols, else ''"""
    for col in cols:
        value = _cell(row, col)
        if not _is_blank(value):
            return value
    return ""


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(k in text for k in keywords)


def extract_price(value: Any) -> int:
    """
    Pull a money amount out of an arbitrary cell value

    Numbers are floored. Strings lose commas and whitespace; dotted dates
    such as "2026.02.26" yield 0; otherwise the largest digit run above
    1000 wins. Never negative.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return max(0, math.floor(value))
    if _is_blank(value):
        return 0

    text = _WHITESPACE.sub("", str(value).replace(",", ""))
    if "." in text and len(text) > 8 and len(text.split(".")) > 2:
        return 0

    candidates = [int(run) for run in _DIGIT_RUN.findall(text)]
    candidates = [n for n in candidates if n > PRICE_MIN_CANDIDATE]
    return max(candidates, default=0)


def parse_filename(file_name: str) -> Tuple[str, str]:
    """
    Fallback customer name and phone from "<name>_<phone>.xlsx"

    Returns:
        (name, phone) where phone holds digits only
    """
    stem = (file_name or "").split(".")[0]
    parts = stem.split("_")
    name = parts[0].strip() if parts else ""
    phone = digits_only(parts[1]) if len(parts) > 1 else ""
    return name, phone


def scan_sheet(rows: Sequence[Sequence[Any]]) -> SheetScan:
    """Single row-major pass collecting address, phone, table start and total"""
    address = ""
    sheet_phone = ""
    start_row: Optional[int] = None
    excel_total_sum = 0

    for r, row in enumerate(rows):
        row = row or []
        for c in range(len(row)):
            text = cell_text(row[c]).strip()
            if not text:
                continue

            if _contains_any(text, TOTAL_KEYWORDS):
                for offset in range(TOTAL_PROBE_WIDTH + 1):
                    price = extract_price(_cell(row, c + offset))
                    if price > TOTAL_MIN_CANDIDATE and price > excel_total_sum:
                        excel_total_sum = price

            if not address and _contains_any(text, ADDRESS_KEYWORDS):
                cols = [c + offset for offset in ADDRESS_OFFSETS]
                address = cell_text(_first_filled(row, cols)).strip()

            if not sheet_phone and _contains_any(text, PHONE_KEYWORDS):
                cols = [c + offset for offset in PHONE_OFFSETS]
                phone = digits_only(cell_text(_first_filled(row, cols)).strip())
                if len(phone) >= PHONE_MIN_DIGITS:
                    sheet_phone = phone

            if start_row is None and SEQUENCE_HEADER in text:
                start_row = r + 1

    return SheetScan(
        address=address,
        sheet_phone=sheet_phone,
        start_row=start_row,
        excel_total_sum=excel_total_sum
    )


def extract_items(rows: Sequence[Sequence[Any]], start_row: Optional[int]) -> Tuple[List[LineItem], int]:
    """
    Read the item table that starts at start_row

    Stops at the first location cell holding a total keyword. After each
    item, a following row with the same first-column value is skipped, and
    then a following remark row is skipped; both skips can fire.

    Returns:
        (items, sum of item prices)
    """
    items: List[LineItem] = []
    items_sum = 0
    if start_row is None:
        return items, items_sum

    i = start_row
    while i < len(rows):
        row = rows[i] or []
        loc = cell_text(_cell(row, LOC_COL)).strip()

        if not loc or loc in SKIP_LOCATIONS:
            i += 1
            continue
        if _contains_any(loc, TOTAL_KEYWORDS):
            break

        price = extract_price(_first_filled(row, (PRICE_COL, PRICE_COL + 1, PRICE_COL - 1)))
        items_sum += price
        items.append(LineItem(
            no=len(items) + 1,
            loc=loc,
            prod=cell_text(_cell(row, PROD_COL)).strip(),
            model=cell_text(_cell(row, MODEL_COL)).strip(),
            price=price,
            is_etc=_contains_any(loc, ETC_KEYWORDS)
        ))

        # Continuation rows of a merged group share the first column
        if i + 1 < len(rows):
            following = rows[i + 1] or []
            if cell_text(_cell(following, 0)).strip() == cell_text(_cell(row, 0)).strip():
                i += 1
        if i + 1 < len(rows):
            following = rows[i + 1] or []
            if cell_text(_cell(following, 1)).strip() == REMARK:
                i += 1

        i += 1

    return items, items_sum


def resolve_total(excel_total_sum: int, items_sum: int) -> int:
    """Declared sheet total wins over the item sum when one was found"""
    return excel_total_sum if excel_total_sum > TOTAL_MIN_CANDIDATE else items_sum


def extract_estimate(rows: Sequence[Sequence[Any]], file_name: str = "") -> ExtractedEstimate:
    """
    Build an estimate from the first sheet's rows

    The customer name always comes from the file name; the phone number
    from the sheet when found there, else from the file name.
    """
    name, file_phone = parse_filename(file_name)
    scan = scan_sheet(rows)
    items, items_sum = extract_items(rows, scan.start_row)
    final_total = resolve_total(scan.excel_total_sum, items_sum)

    if not scan.address:
        logger.debug("No site address found in %s", file_name)
    if scan.start_row is None:
        logger.debug("No item table found in %s", file_name)

    logger.info(
        "Extracted %d items from %s (total %s)",
        len(items), file_name or "<unnamed>", final_total,
        extra={"file_name": file_name, "items": len(items), "total": final_total}
    )

    return ExtractedEstimate(
        customer_name=name,
        customer_phone=scan.sheet_phone or file_phone,
        address=scan.address,
        items=items,
        total_material=final_total,
        total_etc=0,
        total_sum=final_total
    )
