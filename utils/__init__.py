"""Utility modules"""

from .encoding import detect_encoding
from .formatting import digits_only, format_phone_number, format_krw
from .links import public_estimate_url, partner_landing_url

__all__ = [
    "detect_encoding",
    "digits_only",
    "format_phone_number",
    "format_krw",
    "public_estimate_url",
    "partner_landing_url",
]
