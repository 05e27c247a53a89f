"""Date-filtered CSV/XLSX exports of stored records"""

import io
import logging
from datetime import datetime, time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from config import settings
from core.enums import DateFilter
from core.exceptions import ExportError, ValidationError
from dashboard.aggregator import parse_record_date

logger = logging.getLogger(__name__)

INTERNAL_FIELDS = ("id", "_creationTime", "updatedAt", "contractId", "alerts")
SHEET_NAME = "Data"
EMPTY_EXPORT_MESSAGE = "선택한 기간에 해당하는 데이터가 없습니다."


def export_date_range(
    filter_type: Union[DateFilter, str] = DateFilter.CURRENT_MONTH,
    now: Optional[datetime] = None
) -> Tuple[datetime, datetime]:
    """Quick-pick ranges of the export dialog; ranges end today or at month end"""
    now = now or datetime.now()
    try:
        filter_type = DateFilter(filter_type)
    except ValueError as e:
        raise ValidationError(f"Unknown export range: {filter_type}", "filter") from e

    today = now.date()
    if filter_type == DateFilter.CURRENT_MONTH:
        start = today.replace(day=1)
        end = (pd.Timestamp(today) + pd.offsets.MonthEnd(0)).date()
    elif filter_type == DateFilter.LAST_MONTH:
        previous = (pd.Timestamp(today) - pd.DateOffset(months=1)).date()
        start = previous.replace(day=1)
        end = (pd.Timestamp(previous) + pd.offsets.MonthEnd(0)).date()
    elif filter_type == DateFilter.THREE_MONTHS:
        start = (pd.Timestamp(today) - pd.DateOffset(months=3)).date()
        end = today
    elif filter_type == DateFilter.ALL:
        start = parse_record_date(settings.ALL_TIME_START).date()
        end = today
    else:
        raise ValidationError(f"Unsupported export range: {filter_type.value}", "filter")

    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def filter_for_export(
    records: Iterable[Mapping[str, Any]],
    date_field: str,
    start: datetime,
    end: datetime
) -> List[Dict[str, Any]]:
    """Rows whose date_field falls in whole days [start, end], minus internal fields"""
    start = datetime.combine(start.date(), time.min)
    end = datetime.combine(end.date(), time.max)

    rows = []
    for record in records:
        moment = parse_record_date(record.get(date_field))
        if moment is None or not (start <= moment <= end):
            continue
        rows.append({k: v for k, v in record.items() if k not in INTERNAL_FIELDS})
    return rows


def export_filename(prefix: str, start: datetime, end: datetime, ext: str) -> str:
    return f"{prefix}_{start:%Y-%m-%d}_{end:%Y-%m-%d}.{ext}"


def _frame(records, date_field, start, end) -> pd.DataFrame:
    rows = filter_for_export(records, date_field, start, end)
    if not rows:
        raise ExportError(EMPTY_EXPORT_MESSAGE)
    logger.info("Exporting %d rows (%s..%s)", len(rows), start.date(), end.date(), extra={"rows": len(rows)})
    return pd.DataFrame(rows)


def export_xlsx(records: Iterable[Mapping[str, Any]], date_field: str, start: datetime, end: datetime) -> bytes:
    """Write the filtered rows to a single-sheet workbook"""
    df = _frame(records, date_field, start, end)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
    return buffer.getvalue()


def export_csv(records: Iterable[Mapping[str, Any]], date_field: str, start: datetime, end: datetime) -> bytes:
    """Write the filtered rows as UTF-8 CSV with a BOM so spreadsheet apps read Korean text"""
    df = _frame(records, date_field, start, end)
    return df.to_csv(index=False).encode("utf-8-sig")
