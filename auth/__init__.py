"""Authentication module"""

from .models import AdminSession, PartnerSession, LoginRequest, UserRole
from .service import (
    AuthService,
    ADMIN_COOKIE,
    PARTNER_COOKIE,
    cookie_name,
    dump_session_cookie,
    read_session_cookie,
)

__all__ = [
    "AdminSession",
    "PartnerSession",
    "LoginRequest",
    "UserRole",
    "AuthService",
    "ADMIN_COOKIE",
    "PARTNER_COOKIE",
    "cookie_name",
    "dump_session_cookie",
    "read_session_cookie",
]
