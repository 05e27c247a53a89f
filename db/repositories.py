"""Table repositories over the Supabase client

The Supabase Python client is synchronous; callers on an event loop run
these methods in a worker thread.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from core.enums import PartnerStatus
from core.exceptions import DatabaseError, DuplicateError, NotFoundError
from core.models import EstimateRecord

logger = logging.getLogger(__name__)


class TableRepository:
    """Base repository bound to one table"""

    table_name: str = ""

    def __init__(self, client):
        self.client = client

    def _table(self):
        return self.client.table(self.table_name)

    def _execute(self, query, action: str) -> List[Dict[str, Any]]:
        """Run a query builder and return its rows"""
        try:
            response = query.execute()
        except Exception as e:
            raise DatabaseError(f"Failed to {action} {self.table_name}: {e}") from e

        err = getattr(response, "error", None)
        if err:
            raise DatabaseError(f"Supabase {action} error on {self.table_name}: {err}")
        return getattr(response, "data", None) or []

    def list(self, order_by: str = "created_at") -> List[Dict[str, Any]]:
        """All rows, newest first"""
        query = self._table().select("*").order(order_by, desc=True)
        return self._execute(query, "list")

    def _get_by(self, column: str, value: Any) -> Optional[Dict[str, Any]]:
        rows = self._execute(self._table().select("*").eq(column, value).limit(1), "read")
        return rows[0] if rows else None


class EstimateRepository(TableRepository):
    """Saved estimates"""

    table_name = "estimates"

    def save(self, record: EstimateRecord) -> Dict[str, Any]:
        """Insert an estimate and return the stored row"""
        data = record.model_dump(exclude={"id"})
        data["created_at"] = data.get("created_at") or int(time.time() * 1000)
        rows = self._execute(self._table().insert(data), "insert into")
        if not rows:
            raise DatabaseError("Supabase insert returned no rows for estimates")
        logger.info("Saved estimate %s for %s", rows[0].get("id"), record.customer_name)
        return rows[0]

    def get_public(self, customer_name: str, customer_phone: str, status_type: str) -> Optional[Dict[str, Any]]:
        """Newest estimate matching name, phone and status type"""
        query = (
            self._table()
            .select("*")
            .eq("customer_name", customer_name)
            .eq("customer_phone", customer_phone)
            .eq("status_type", status_type)
            .order("created_at", desc=True)
            .limit(1)
        )
        rows = self._execute(query, "read")
        return rows[0] if rows else None

    def get(self, estimate_id: str) -> Dict[str, Any]:
        row = self._get_by("id", estimate_id)
        if row is None:
            raise NotFoundError(f"Estimate {estimate_id} not found")
        return row

    def update_remark(self, estimate_id: str, remark: str) -> Dict[str, Any]:
        rows = self._execute(
            self._table().update({"remark": remark}).eq("id", estimate_id),
            "update"
        )
        if not rows:
            raise NotFoundError(f"Estimate {estimate_id} not found")
        return rows[0]


class CustomerRepository(TableRepository):
    """Customer intake records"""

    table_name = "customers"


class PartnerRepository(TableRepository):
    """Reseller partners"""

    table_name = "partners"

    def get_by_uid(self, uid: str) -> Optional[Dict[str, Any]]:
        return self._get_by("uid", uid)

    def create(self, uid: str, name: str, password: str, **fields) -> Dict[str, Any]:
        """Register a partner; new partners wait for approval unless a status is given"""
        if self.get_by_uid(uid):
            raise DuplicateError("이미 존재하는 아이디입니다.")

        data = {"uid": uid, "name": name, "password": password, **fields}
        data["status"] = fields.get("status") or PartnerStatus.PENDING.value
        rows = self._execute(self._table().insert(data), "insert into")
        return rows[0] if rows else data

    def update_by_uid(self, uid: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Patch a partner; unknown uids are ignored"""
        if not self.get_by_uid(uid):
            return None
        rows = self._execute(self._table().update(updates).eq("uid", uid), "update")
        return rows[0] if rows else None

    def delete_by_uid(self, uid: str) -> bool:
        if not self.get_by_uid(uid):
            return False
        self._execute(self._table().delete().eq("uid", uid), "delete from")
        return True


class AdminRepository(TableRepository):
    """Head-office administrators"""

    table_name = "admins"

    INITIAL_ADMIN = {"uid": "admin", "password": "admin1234", "name": "최고관리자"}

    def get_by_uid(self, uid: str) -> Optional[Dict[str, Any]]:
        return self._get_by("uid", uid)

    def create_initial_admin(self) -> bool:
        """Seed the default administrator when it does not exist yet"""
        if self.get_by_uid(self.INITIAL_ADMIN["uid"]):
            return False
        self._execute(self._table().insert(dict(self.INITIAL_ADMIN)), "insert into")
        logger.warning("Created initial admin account '%s'; change its password", self.INITIAL_ADMIN["uid"])
        return True
