"""Shareable link builders"""

from typing import Optional
from urllib.parse import quote, urlencode

from config import settings


def public_estimate_url(
    customer_name: str,
    customer_phone: str,
    status_type: str,
    base_url: Optional[str] = None
) -> str:
    """
    Build the customer-facing estimate link

    The public estimate page looks the estimate up by name, phone and
    status type, so all three travel in the query string.
    """
    base = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
    query = urlencode(
        {"n": customer_name, "p": customer_phone, "t": status_type},
        quote_via=quote
    )
    return f"{base}/estimate?{query}"


def partner_landing_url(
    partner_id: str,
    link: Optional[str] = None,
    base_url: Optional[str] = None
) -> str:
    """Build a partner's promotional landing link for a product"""
    base = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
    path = link if link and link.startswith("/") else settings.DEFAULT_LANDING_PATH
    return f"{base}{path}?{urlencode({'p': partner_id}, quote_via=quote)}"
