"""Dashboard aggregation: date-range filtering and status counts"""

import logging
from collections import Counter
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from config import settings
from core.enums import CUSTOMER_STATUSES, CustomerStatus, DateFilter, PartnerStatus
from core.exceptions import ValidationError
from core.models import DashboardSummary, PartnerStats

logger = logging.getLogger(__name__)

DATE_FIELDS = ("신청일", "신청일시", "Timestamp", "등록일")
TOTAL_KEY = "전체"

DateLike = Union[str, date, datetime, None]


def parse_record_date(value: Any) -> Optional[datetime]:
    """Parse a stored date value; None when absent or unparseable"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        ts = pd.to_datetime(str(value).strip(), errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


def _month_start(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def _month_end(moment: datetime) -> datetime:
    end = pd.Timestamp(moment) + pd.offsets.MonthEnd(0)
    return datetime.combine(end.date(), time.max)


def _months_before(moment: datetime, months: int) -> datetime:
    return (pd.Timestamp(moment) - pd.DateOffset(months=months)).to_pydatetime()


def _as_datetime(value: DateLike, field: str) -> datetime:
    parsed = parse_record_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid date: {value!r}", field)
    return parsed


def date_range(
    filter_type: Union[DateFilter, str] = None,
    now: Optional[datetime] = None,
    custom_start: DateLike = None,
    custom_end: DateLike = None
) -> Tuple[datetime, datetime]:
    """
    Resolve a date filter preset to an inclusive [start, end] interval

    Rolling presets run from N months ago to the end of the current month.
    Custom ranges cover whole days.
    """
    try:
        filter_type = DateFilter(filter_type or settings.DEFAULT_DATE_FILTER)
    except ValueError as e:
        raise ValidationError(f"Unknown date filter: {filter_type}", "filter") from e

    now = now or datetime.now()
    end = _month_end(now)

    if filter_type == DateFilter.CURRENT_MONTH:
        start = _month_start(now)
    elif filter_type == DateFilter.LAST_MONTH:
        previous = _months_before(now, 1)
        start, end = _month_start(previous), _month_end(previous)
    elif filter_type == DateFilter.THREE_MONTHS:
        start = _months_before(now, 3)
    elif filter_type == DateFilter.SIX_MONTHS:
        start = _months_before(now, 6)
    elif filter_type == DateFilter.ONE_YEAR:
        start = _months_before(now, 12)
    elif filter_type == DateFilter.ALL:
        start = _as_datetime(settings.ALL_TIME_START, "ALL_TIME_START")
    else:
        if not custom_start or not custom_end:
            raise ValidationError("Custom range needs both start and end dates", "custom")
        start = _as_datetime(custom_start, "start")
        end = _as_datetime(custom_end, "end")
        if end.time() == time.min:
            end = datetime.combine(end.date(), time.max)

    if end < start:
        raise ValidationError("End date is before start date", "end")
    return start, end


def record_dates(record: Mapping[str, Any]) -> List[datetime]:
    """All parseable dates among the record's date fields"""
    dates = []
    for field in DATE_FIELDS:
        parsed = parse_record_date(record.get(field))
        if parsed is not None:
            dates.append(parsed)
    return dates


def in_date_range(record: Mapping[str, Any], start: datetime, end: datetime) -> bool:
    """True when any date field falls inside [start, end]; undated records never match"""
    return any(start <= d <= end for d in record_dates(record))


def filter_by_date(records: Iterable[Mapping[str, Any]], start: datetime, end: datetime) -> List[Mapping[str, Any]]:
    return [r for r in records if in_date_range(r, start, end)]


def count_statuses(
    records: Iterable[Mapping[str, Any]],
    field: str = "status",
    default: str = CustomerStatus.RECEIVED.value,
    known: Sequence[str] = CUSTOMER_STATUSES
) -> Dict[str, int]:
    """Frequency of each status; unset status counts as the default"""
    records = list(records)
    counter = Counter((r.get(field) or default) for r in records)

    stats = {TOTAL_KEY: len(records)}
    for status in known:
        stats[status] = counter.pop(status, 0)
    stats.update(counter)
    return stats


def partner_stats(partners: Iterable[Mapping[str, Any]]) -> PartnerStats:
    partners = list(partners)
    pending = sum(1 for p in partners if p.get("status") == PartnerStatus.PENDING.value)
    return PartnerStats(total=len(partners), pending=pending, approved=len(partners) - pending)


def _creation_day(row: Mapping[str, Any]) -> str:
    created = parse_record_date(row.get("inserted_at") or row.get("created_time"))
    return created.strftime("%Y-%m-%d") if created else ""


def customer_record(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a stored customer row to the dashboard record shape"""
    return {
        "no": row.get("no") or "",
        "name": row.get("name") or "",
        "contact": row.get("contact") or "",
        "status": row.get("status") or CustomerStatus.RECEIVED.value,
        "신청일": row.get("created_at") or _creation_day(row),
        "Timestamp": row.get("inserted_at") or "",
        "등록일": _creation_day(row),
    }


def partner_record(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a stored partner row to the dashboard record shape"""
    created = row.get("created_at") or row.get("inserted_at") or ""
    return {
        "uid": row.get("uid") or "",
        "name": row.get("name") or "",
        "status": row.get("status") or PartnerStatus.PENDING.value,
        "신청일시": created,
        "Timestamp": created,
    }


def summarize(
    customers: Iterable[Mapping[str, Any]],
    partners: Iterable[Mapping[str, Any]],
    start: datetime,
    end: datetime
) -> DashboardSummary:
    """Filter both record sets to [start, end] and tabulate them"""
    customers_in_range = filter_by_date(customers, start, end)
    partners_in_range = filter_by_date(partners, start, end)

    logger.debug(
        "Dashboard %s..%s: %d customers, %d partners",
        start.date(), end.date(), len(customers_in_range), len(partners_in_range)
    )

    return DashboardSummary(
        start=start,
        end=end,
        customer_count=len(customers_in_range),
        partner_count=len(partners_in_range),
        customer_stats=count_statuses(customers_in_range),
        partner_stats=partner_stats(partners_in_range)
    )
