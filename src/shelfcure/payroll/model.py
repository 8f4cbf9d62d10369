from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Optional

from ..core.constants import DAYS_PER_MONTH_FOR_DAILY_RATE
from ..core.enums import ApprovalStatus, ConfigStatus, PaymentMethod, PaymentStatus, SalaryType

ALLOWANCE_KEYS = ("hra", "da", "transport", "medical", "performance")


def rd(value: float) -> float:
    """Money rounding (2 decimals)."""

    return round(float(value or 0), 2)


@dataclass(frozen=True)
class AllowanceRule:
    enabled: bool = False
    type: str = "fixed"  # fixed | percentage
    amount: float = 0.0
    percentage: float = 0.0

    def value_for(self, base_salary: float) -> float:
        if not self.enabled:
            return 0.0
        if self.type == "percentage":
            return base_salary * self.percentage / 100
        return float(self.amount)


@dataclass(frozen=True)
class StandardHours:
    daily: float = 8
    weekly: float = 48
    monthly: float = 208


@dataclass(frozen=True)
class OvertimeRule:
    enabled: bool = True
    rate: float = 1.5
    max_hours_per_day: float = 4
    max_hours_per_month: float = 60


@dataclass(frozen=True)
class DeductionRules:
    pf_enabled: bool = False
    pf_percentage: float = 12.0  # of base salary
    esi_enabled: bool = False
    esi_percentage: float = 0.75  # of base salary
    tds_enabled: bool = False
    tds_percentage: float = 0.0  # of base salary
    professional_tax_enabled: bool = False
    professional_tax_amount: float = 200.0


def default_allowance_rules() -> dict[str, AllowanceRule]:
    return {key: AllowanceRule() for key in ALLOWANCE_KEYS}


@dataclass(frozen=True)
class SalaryConfig:
    """Domain entity: per staff member salary policy."""

    config_id: int
    staff_id: int
    store_id: int
    base_salary: float
    salary_type: SalaryType = SalaryType.MONTHLY
    currency: str = "INR"
    standard_hours: StandardHours = field(default_factory=StandardHours)
    overtime: OvertimeRule = field(default_factory=OvertimeRule)
    allowances: dict[str, AllowanceRule] = field(default_factory=default_allowance_rules)
    deductions: DeductionRules = field(default_factory=DeductionRules)
    status: ConfigStatus = ConfigStatus.ACTIVE
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None

    @property
    def hourly_rate(self) -> float:
        if self.salary_type == SalaryType.HOURLY:
            return self.base_salary
        if self.salary_type == SalaryType.DAILY:
            return self.base_salary / self.standard_hours.daily
        return self.base_salary / self.standard_hours.monthly

    @property
    def daily_rate(self) -> float:
        if self.salary_type == SalaryType.DAILY:
            return self.base_salary
        if self.salary_type == SalaryType.HOURLY:
            return self.base_salary * self.standard_hours.daily
        return self.base_salary / DAYS_PER_MONTH_FOR_DAILY_RATE


# JSON column / API shapes (camelCase, as the front-end sends them).


def allowances_to_json(rules: dict[str, AllowanceRule]) -> dict:
    return {
        key: {"enabled": r.enabled, "type": r.type, "amount": r.amount, "percentage": r.percentage}
        for key, r in rules.items()
    }


def allowances_from_json(data: Optional[dict]) -> dict[str, AllowanceRule]:
    rules = default_allowance_rules()
    for key, raw in (data or {}).items():
        if key not in rules or not isinstance(raw, dict):
            continue
        rules[key] = AllowanceRule(
            enabled=bool(raw.get("enabled", False)),
            type="percentage" if raw.get("type") == "percentage" else "fixed",
            amount=float(raw.get("amount") or 0),
            percentage=float(raw.get("percentage") or 0),
        )
    return rules


def standard_hours_to_json(h: StandardHours) -> dict:
    return {"daily": h.daily, "weekly": h.weekly, "monthly": h.monthly}


def standard_hours_from_json(data: Optional[dict]) -> StandardHours:
    d = data or {}
    base = StandardHours()
    return StandardHours(
        daily=float(d.get("daily", base.daily)),
        weekly=float(d.get("weekly", base.weekly)),
        monthly=float(d.get("monthly", base.monthly)),
    )


def overtime_to_json(o: OvertimeRule) -> dict:
    return {
        "enabled": o.enabled,
        "rate": o.rate,
        "maxHoursPerDay": o.max_hours_per_day,
        "maxHoursPerMonth": o.max_hours_per_month,
    }


def overtime_from_json(data: Optional[dict]) -> OvertimeRule:
    d = data or {}
    base = OvertimeRule()
    return OvertimeRule(
        enabled=bool(d.get("enabled", base.enabled)),
        rate=float(d.get("rate", base.rate)),
        max_hours_per_day=float(d.get("maxHoursPerDay", base.max_hours_per_day)),
        max_hours_per_month=float(d.get("maxHoursPerMonth", base.max_hours_per_month)),
    )


def deductions_to_json(d: DeductionRules) -> dict:
    return {
        "pf": {"enabled": d.pf_enabled, "employeeContribution": d.pf_percentage},
        "esi": {"enabled": d.esi_enabled, "employeeContribution": d.esi_percentage},
        "tds": {"enabled": d.tds_enabled, "percentage": d.tds_percentage},
        "professionalTax": {"enabled": d.professional_tax_enabled, "amount": d.professional_tax_amount},
    }


def deductions_from_json(data: Optional[dict]) -> DeductionRules:
    d = data or {}
    base = DeductionRules()
    pf = d.get("pf") or {}
    esi = d.get("esi") or {}
    tds = d.get("tds") or {}
    pt = d.get("professionalTax") or {}
    return DeductionRules(
        pf_enabled=bool(pf.get("enabled", base.pf_enabled)),
        pf_percentage=float(pf.get("employeeContribution", base.pf_percentage)),
        esi_enabled=bool(esi.get("enabled", base.esi_enabled)),
        esi_percentage=float(esi.get("employeeContribution", base.esi_percentage)),
        tds_enabled=bool(tds.get("enabled", base.tds_enabled)),
        tds_percentage=float(tds.get("percentage", base.tds_percentage)),
        professional_tax_enabled=bool(pt.get("enabled", base.professional_tax_enabled)),
        professional_tax_amount=float(pt.get("amount", base.professional_tax_amount)),
    )


@dataclass(frozen=True)
class OvertimePay:
    hours: float = 0.0
    rate: float = 0.0
    amount: float = 0.0


@dataclass(frozen=True)
class AbsentDeduction:
    days: float = 0.0
    per_day_rate: float = 0.0
    amount: float = 0.0


@dataclass(frozen=True)
class SalaryAllowances:
    hra: float = 0.0
    da: float = 0.0
    medical: float = 0.0
    transport: float = 0.0
    performance: float = 0.0
    bonus: float = 0.0
    incentive: float = 0.0
    overtime: OvertimePay = field(default_factory=OvertimePay)
    other: tuple[tuple[str, float], ...] = ()

    @property
    def total(self) -> float:
        fixed = self.hra + self.da + self.medical + self.transport + self.performance + self.bonus + self.incentive
        return rd(fixed + self.overtime.amount + sum(a for _, a in self.other))


@dataclass(frozen=True)
class SalaryDeductions:
    pf: float = 0.0
    esi: float = 0.0
    tds: float = 0.0
    professional_tax: float = 0.0
    advance: float = 0.0
    loan: float = 0.0
    fine: float = 0.0
    absent: AbsentDeduction = field(default_factory=AbsentDeduction)
    other: tuple[tuple[str, float], ...] = ()

    @property
    def total(self) -> float:
        fixed = self.pf + self.esi + self.tds + self.professional_tax + self.advance + self.loan + self.fine
        return rd(fixed + self.absent.amount + sum(a for _, a in self.other))


@dataclass(frozen=True)
class AttendanceData:
    total_working_days: int = 0
    days_worked: float = 0.0
    days_absent: int = 0
    half_days: int = 0
    leave_days: int = 0
    late_marks: int = 0
    overtime_hours: float = 0.0


@dataclass(frozen=True)
class StaffSalary:
    """Domain entity: monthly payroll record (payslip) of one staff member."""

    salary_id: int
    staff_id: int
    store_id: int
    store_owner_id: int
    month: int
    year: int
    base_salary: float
    allowances: SalaryAllowances = field(default_factory=SalaryAllowances)
    deductions: SalaryDeductions = field(default_factory=SalaryDeductions)
    attendance_data: AttendanceData = field(default_factory=AttendanceData)
    total_allowances: float = 0.0
    total_deductions: float = 0.0
    gross_salary: float = 0.0
    net_salary: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[datetime] = None
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    payment_reference: Optional[str] = None
    approval_status: ApprovalStatus = ApprovalStatus.DRAFT
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    payslip_generated: bool = False
    created_by: Optional[int] = None
    updated_by: Optional[int] = None

    def with_totals(self) -> "StaffSalary":
        """Copy with derived totals recomputed from the components."""

        total_allowances = self.allowances.total
        total_deductions = self.deductions.total
        gross = rd(self.base_salary + total_allowances)
        return replace(
            self,
            total_allowances=total_allowances,
            total_deductions=total_deductions,
            gross_salary=gross,
            net_salary=rd(gross - total_deductions),
        )


def allowance_breakdown_to_json(a: SalaryAllowances) -> dict:
    return {
        "hra": a.hra,
        "da": a.da,
        "medical": a.medical,
        "transport": a.transport,
        "performance": a.performance,
        "bonus": a.bonus,
        "incentive": a.incentive,
        "overtime": {"hours": a.overtime.hours, "rate": a.overtime.rate, "amount": a.overtime.amount},
        "other": [{"name": n, "amount": v} for n, v in a.other],
    }


def allowance_breakdown_from_json(data: Optional[dict]) -> SalaryAllowances:
    d = data or {}
    ot = d.get("overtime") or {}
    return SalaryAllowances(
        hra=float(d.get("hra") or 0),
        da=float(d.get("da") or 0),
        medical=float(d.get("medical") or 0),
        transport=float(d.get("transport") or 0),
        performance=float(d.get("performance") or 0),
        bonus=float(d.get("bonus") or 0),
        incentive=float(d.get("incentive") or 0),
        overtime=OvertimePay(
            hours=float(ot.get("hours") or 0),
            rate=float(ot.get("rate") or 0),
            amount=float(ot.get("amount") or 0),
        ),
        other=_other_from_json(d.get("other")),
    )


def deduction_breakdown_to_json(d: SalaryDeductions) -> dict:
    return {
        "pf": d.pf,
        "esi": d.esi,
        "tds": d.tds,
        "professionalTax": d.professional_tax,
        "advance": d.advance,
        "loan": d.loan,
        "fine": d.fine,
        "absentDeduction": {"days": d.absent.days, "perDayRate": d.absent.per_day_rate, "amount": d.absent.amount},
        "other": [{"name": n, "amount": v} for n, v in d.other],
    }


def deduction_breakdown_from_json(data: Optional[dict]) -> SalaryDeductions:
    d = data or {}
    ab = d.get("absentDeduction") or {}
    return SalaryDeductions(
        pf=float(d.get("pf") or 0),
        esi=float(d.get("esi") or 0),
        tds=float(d.get("tds") or 0),
        professional_tax=float(d.get("professionalTax") or 0),
        advance=float(d.get("advance") or 0),
        loan=float(d.get("loan") or 0),
        fine=float(d.get("fine") or 0),
        absent=AbsentDeduction(
            days=float(ab.get("days") or 0),
            per_day_rate=float(ab.get("perDayRate") or 0),
            amount=float(ab.get("amount") or 0),
        ),
        other=_other_from_json(d.get("other")),
    )


def attendance_data_to_json(a: AttendanceData) -> dict:
    return {
        "totalWorkingDays": a.total_working_days,
        "daysWorked": a.days_worked,
        "daysAbsent": a.days_absent,
        "halfDays": a.half_days,
        "leaveDays": a.leave_days,
        "lateMarks": a.late_marks,
        "overtimeHours": a.overtime_hours,
    }


def attendance_data_from_json(data: Optional[dict]) -> AttendanceData:
    d = data or {}
    return AttendanceData(
        total_working_days=int(d.get("totalWorkingDays") or 0),
        days_worked=float(d.get("daysWorked") or 0),
        days_absent=int(d.get("daysAbsent") or 0),
        half_days=int(d.get("halfDays") or 0),
        leave_days=int(d.get("leaveDays") or 0),
        late_marks=int(d.get("lateMarks") or 0),
        overtime_hours=float(d.get("overtimeHours") or 0),
    )


def _other_from_json(items: Any) -> tuple[tuple[str, float], ...]:
    out = []
    for item in items or []:
        if isinstance(item, dict):
            out.append((str(item.get("name") or "other"), float(item.get("amount") or 0)))
    return tuple(out)
