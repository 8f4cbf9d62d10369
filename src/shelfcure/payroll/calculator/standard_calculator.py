from __future__ import annotations

from typing import Iterable

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import days_in_month
from ...core.constants import STANDARD_WORKING_DAYS
from ...core.enums import AttendanceStatus
from ..model import (
    AbsentDeduction,
    AttendanceData,
    OvertimePay,
    SalaryAllowances,
    SalaryConfig,
    SalaryDeductions,
    StaffSalary,
    rd,
)
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: full base salary, config allowances and overtime, minus statutory
    deductions and ``base / 26`` per absent day.
    """

    def __init__(self, *, standard_working_days: int = STANDARD_WORKING_DAYS):
        self._standard_working_days = standard_working_days

    def attendance_data(self, records: Iterable[AttendanceRecord], *, month: int, year: int, config: SalaryConfig) -> AttendanceData:
        worked = absent = half = leave = late = 0
        overtime = 0.0
        for r in records:
            if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY):
                worked += 1
            if r.status == AttendanceStatus.HALF_DAY:
                half += 1
            elif r.status == AttendanceStatus.ABSENT:
                absent += 1
            elif r.status == AttendanceStatus.LATE:
                late += 1
            elif r.status in (AttendanceStatus.SICK_LEAVE, AttendanceStatus.CASUAL_LEAVE):
                leave += 1
            overtime += float(r.overtime_hours or 0)

        if config.overtime.max_hours_per_month:
            overtime = min(overtime, float(config.overtime.max_hours_per_month))

        return AttendanceData(
            total_working_days=days_in_month(year, month),
            days_worked=worked - half * 0.5,
            days_absent=absent,
            half_days=half,
            leave_days=leave,
            late_marks=late,
            overtime_hours=rd(overtime),
        )

    def _allowances(self, config: SalaryConfig, overtime_hours: float) -> SalaryAllowances:
        base = config.base_salary
        rules = config.allowances
        values = {key: rd(rule.value_for(base)) for key, rule in rules.items()}

        overtime = OvertimePay()
        if config.overtime.enabled and overtime_hours > 0:
            rate = config.hourly_rate * config.overtime.rate
            overtime = OvertimePay(hours=overtime_hours, rate=rd(rate), amount=rd(overtime_hours * rate))

        return SalaryAllowances(
            hra=values.get("hra", 0.0),
            da=values.get("da", 0.0),
            medical=values.get("medical", 0.0),
            transport=values.get("transport", 0.0),
            performance=values.get("performance", 0.0),
            overtime=overtime,
        )

    def _deductions(self, config: SalaryConfig, days_absent: float) -> SalaryDeductions:
        base = config.base_salary
        rules = config.deductions
        per_day = base / self._standard_working_days

        return SalaryDeductions(
            pf=rd(base * rules.pf_percentage / 100) if rules.pf_enabled else 0.0,
            esi=rd(base * rules.esi_percentage / 100) if rules.esi_enabled else 0.0,
            tds=rd(base * rules.tds_percentage / 100) if rules.tds_enabled else 0.0,
            professional_tax=rd(rules.professional_tax_amount) if rules.professional_tax_enabled else 0.0,
            absent=AbsentDeduction(days=days_absent, per_day_rate=rd(per_day), amount=rd(per_day * days_absent)),
        )

    def build(
        self,
        *,
        config: SalaryConfig,
        attendance: Iterable[AttendanceRecord],
        month: int,
        year: int,
        store_owner_id: int,
    ) -> StaffSalary:
        data = self.attendance_data(attendance, month=month, year=year, config=config)
        allowances = self._allowances(config, data.overtime_hours)
        deductions = self._deductions(config, data.days_absent)

        return StaffSalary(
            salary_id=0,
            staff_id=config.staff_id,
            store_id=config.store_id,
            store_owner_id=store_owner_id,
            month=month,
            year=year,
            base_salary=rd(config.base_salary),
            allowances=allowances,
            deductions=deductions,
            attendance_data=data,
        ).with_totals()

    def expected(self, config: SalaryConfig) -> StaffSalary:
        allowances = self._allowances(config, 0.0)
        deductions = self._deductions(config, 0)
        return StaffSalary(
            salary_id=0,
            staff_id=config.staff_id,
            store_id=config.store_id,
            store_owner_id=0,
            month=0,
            year=0,
            base_salary=rd(config.base_salary),
            allowances=allowances,
            deductions=deductions,
        ).with_totals()
