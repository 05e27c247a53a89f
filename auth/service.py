"""Authentication service"""

import json
import logging
import secrets
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.enums import PartnerStatus
from core.exceptions import AuthError, InvalidCredentialsError, PartnerNotApprovedError
from db.repositories import AdminRepository, PartnerRepository
from .models import AdminSession, PartnerSession, UserRole

logger = logging.getLogger(__name__)

ADMIN_COOKIE = "admin_session"
PARTNER_COOKIE = "partner_session"

Session = Union[AdminSession, PartnerSession]


class AuthService:
    """Credential check against the admins and partners tables"""

    def __init__(self, admins: AdminRepository, partners: PartnerRepository):
        self.admins = admins
        self.partners = partners

    def login(self, uid: str, password: str, is_admin: bool = False) -> Session:
        """
        Authenticate an administrator or a partner

        Raises:
            AuthError: Missing id or password (400)
            InvalidCredentialsError: Unknown id or wrong password (401)
            PartnerNotApprovedError: Partner not yet approved (403)
        """
        if not uid or not password:
            raise AuthError("아이디와 비밀번호를 입력해주세요.", status_code=400)

        repo = self.admins if is_admin else self.partners
        user = repo.get_by_uid(uid)
        if not user or not self._password_matches(user.get("password"), password):
            logger.info("Failed %s login for %s", "admin" if is_admin else "partner", uid)
            raise InvalidCredentialsError()

        if is_admin:
            return AdminSession(id=user["uid"], name=user.get("name") or "관리자")

        if user.get("status") != PartnerStatus.APPROVED.value:
            raise PartnerNotApprovedError()

        return PartnerSession(
            id=user["uid"],
            name=user.get("name") or "",
            ceo_name=user.get("ceo_name"),
            contact=user.get("contact")
        )

    @staticmethod
    def _password_matches(stored, given: str) -> bool:
        if stored is None:
            return False
        return secrets.compare_digest(str(stored).encode("utf-8"), str(given).encode("utf-8"))


def cookie_name(session: Session) -> str:
    return ADMIN_COOKIE if session.role == UserRole.ADMIN else PARTNER_COOKIE


def dump_session_cookie(session: Session) -> str:
    """Session as the JSON string stored in the cookie; ASCII-escaped for the header"""
    return json.dumps(session.model_dump(mode="json"))


def read_session_cookie(value: Optional[str], role: UserRole) -> Optional[Session]:
    """Parse a session cookie; None when missing or malformed"""
    if not value:
        return None
    model = AdminSession if role == UserRole.ADMIN else PartnerSession
    try:
        session = model.model_validate(json.loads(value))
    except (ValueError, PydanticValidationError):
        return None
    return session if session.role == role else None
