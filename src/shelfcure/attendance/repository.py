from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> int:
        """Insert or replace the (staff, date) row. Returns its id."""

        raise NotImplementedError

    def list_for_store(
        self,
        store_id: int,
        *,
        start: date,
        end: date,
        status: Optional[AttendanceStatus] = None,
        staff_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Rows with ``start <= work_date <= end``, newest first."""

        raise NotImplementedError

    def count_for_store(self, store_id: int, *, start: date, end: date) -> int:
        raise NotImplementedError
