"""Display formatting helpers"""

import math
import re

_NON_DIGIT = re.compile(r"[^0-9]")


def digits_only(value) -> str:
    """Strip everything except ASCII digits"""
    if value is None:
        return ""
    return _NON_DIGIT.sub("", str(value))


def format_phone_number(value: str) -> str:
    """Group a phone number as 3-4-4 digits (010-1234-5678)"""
    if not value:
        return value
    raw = digits_only(value)
    if len(raw) < 4:
        return raw
    if len(raw) <= 7:
        return f"{raw[:3]}-{raw[3:]}"
    if len(raw) <= 11:
        return f"{raw[:3]}-{raw[3:7]}-{raw[7:11]}"
    return raw


def format_krw(value) -> str:
    """Format an amount in won, e.g. 1,234,000원"""
    try:
        amount = math.floor(value or 0)
    except (TypeError, ValueError, OverflowError):
        amount = 0
    return f"{amount:,}원"
