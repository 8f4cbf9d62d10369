from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ConfigStatus
from .model import SalaryConfig, StaffSalary


class SalaryConfigRepository(Protocol):
    def get_for_staff(self, staff_id: int) -> Optional[SalaryConfig]:
        raise NotImplementedError

    def list_for_store(self, store_id: int, *, status: Optional[ConfigStatus] = None) -> Sequence[SalaryConfig]:
        raise NotImplementedError

    def save(self, config: SalaryConfig, *, actor_id: int) -> int:
        """Insert, or replace the staff member's existing config. Returns its id."""

        raise NotImplementedError


class StaffSalaryRepository(Protocol):
    def get_in_store(self, salary_id: int, store_id: int) -> Optional[StaffSalary]:
        raise NotImplementedError

    def exists_for_period(self, staff_id: int, *, month: int, year: int) -> bool:
        raise NotImplementedError

    def list_for_store_period(self, store_id: int, *, month: int, year: int) -> Sequence[StaffSalary]:
        raise NotImplementedError

    def list_for_owner_period(self, store_owner_id: int, *, month: int, year: int) -> Sequence[StaffSalary]:
        raise NotImplementedError

    def create(self, salary: StaffSalary) -> int:
        raise NotImplementedError

    def update_workflow(self, salary: StaffSalary) -> bool:
        """Persist payment/approval fields, notes and the payslip flag."""

        raise NotImplementedError
