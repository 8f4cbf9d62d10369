from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceRecord
from ..model import SalaryConfig, StaffSalary


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def build(
        self,
        *,
        config: SalaryConfig,
        attendance: Iterable[AttendanceRecord],
        month: int,
        year: int,
        store_owner_id: int,
    ) -> StaffSalary:
        """Payroll record (unsaved, ``salary_id == 0``) for one staff member and month."""

        raise NotImplementedError

    @abstractmethod
    def expected(self, config: SalaryConfig) -> StaffSalary:
        """Payroll record for a month with full attendance and no overtime."""

        raise NotImplementedError
