"""Supabase client management"""

import logging
from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from core.exceptions import DatabaseError
from config import settings

logger = logging.getLogger(__name__)


def create_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """
    Create a Supabase client

    Args:
        url: Project URL, defaults to SUPABASE_URL
        key: API key, defaults to the service role key, then the anon key

    Raises:
        DatabaseError: If Supabase is not configured or the client fails
    """
    url = url or settings.SUPABASE_URL
    key = key or settings.SUPABASE_SERVICE_ROLE_KEY or settings.SUPABASE_ANON_KEY
    if not url or not key:
        raise DatabaseError(
            "Supabase not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
        )

    try:
        client = create_client(url, key)
    except Exception as e:
        raise DatabaseError(f"Failed to initialize Supabase client: {e}") from e

    logger.info("Supabase client initialized for %s", url)
    return client


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Process-wide Supabase client"""
    return create_supabase_client()
