"""Dashboard aggregation"""

from .aggregator import (
    DATE_FIELDS,
    date_range,
    filter_by_date,
    in_date_range,
    count_statuses,
    partner_stats,
    summarize,
)

__all__ = [
    "DATE_FIELDS",
    "date_range",
    "filter_by_date",
    "in_date_range",
    "count_statuses",
    "partner_stats",
    "summarize",
]
