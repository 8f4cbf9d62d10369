from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import StaffStatus
from .model import Staff


class StaffRepository(Protocol):
    """Repository interface for Staff. Every lookup is scoped to a store."""

    def get_in_store(self, staff_id: int, store_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def find_in_store(self, store_id: int, *, email: Optional[str] = None, user_account_id: Optional[int] = None) -> Optional[Staff]:
        """First staff member of the store matching the email or the linked user account."""

        raise NotImplementedError

    def list_in_store(
        self,
        store_id: int,
        *,
        status: Optional[StaffStatus] = None,
        role: Optional[str] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
        staff_ids: Optional[Iterable[int]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[Sequence[Staff], int]:
        """Ordered by role then name. Returns ``(page, total matching)``."""

        raise NotImplementedError

    def list_employee_ids(self, store_id: int, prefix: str) -> Sequence[str]:
        raise NotImplementedError

    def employee_id_exists(self, store_id: int, employee_id: str, *, exclude_staff_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def email_exists(self, email: str, *, exclude_staff_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def create(self, *, store_id: int, fields: dict, created_by: int) -> int:
        """``fields`` maps Staff attribute names to values."""

        raise NotImplementedError

    def update(self, staff_id: int, *, fields: dict, updated_by: int) -> bool:
        raise NotImplementedError

    def set_status(self, staff_id: int, *, status: StaffStatus, updated_by: int) -> bool:
        raise NotImplementedError

    def link_user_account(self, staff_id: int, user_id: int) -> bool:
        raise NotImplementedError
