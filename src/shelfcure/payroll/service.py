from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local, parse_month, salary_period
from ..common.validators import require_choice, require_int
from ..core.enums import ApprovalStatus, ConfigStatus, PaymentMethod, PaymentStatus, StaffStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from ..stores.model import Store
from ..stores.repository import StoreRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .defaults import default_for_role
from .model import SalaryConfig, StaffSalary, rd
from .payload import parse_salary_config
from .repository import SalaryConfigRepository, StaffSalaryRepository

logger = logging.getLogger(__name__)

STATUS_ACTIONS = ("approved", "rejected", "paid", "on_hold", "cancelled")


@dataclass(frozen=True)
class PayrollRow:
    salary: StaffSalary
    staff: Optional[Staff]


@dataclass(frozen=True)
class Payslip:
    salary: StaffSalary
    staff: Optional[Staff]
    store: Store
    period: str
    generated_at: datetime


def _sum(values: Iterable[float]) -> float:
    return rd(sum(values))


class PayrollService:
    """Use case: store managers run the monthly payroll of their store; owners read summaries."""

    def __init__(
        self,
        salaries: StaffSalaryRepository,
        configs: SalaryConfigRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        stores: StoreRepository,
        *,
        calculator: PayrollCalculator | None = None,
    ):
        self._salaries = salaries
        self._configs = configs
        self._staff = staff
        self._attendance = attendance
        self._stores = stores
        self._calculator = calculator or StandardPayrollCalculator()

    def _period(self, month: Optional[str], now: datetime | None) -> tuple[int, int]:
        year, month_no = parse_month(month, today=(now or now_local()).date())
        return month_no, year

    def _active_staff(self, store_id: int, staff_ids: Optional[Iterable[int]] = None) -> Sequence[Staff]:
        members, _ = self._staff.list_in_store(store_id, status=StaffStatus.ACTIVE, staff_ids=staff_ids)
        return members

    def _with_staff(self, store_id: int, salaries: Sequence[StaffSalary]) -> list[PayrollRow]:
        ids = {s.staff_id for s in salaries}
        members = {m.staff_id: m for m in self._staff.list_in_store(store_id, staff_ids=ids)[0]} if ids else {}
        rows = [PayrollRow(salary=s, staff=members.get(s.staff_id)) for s in salaries]
        return sorted(rows, key=lambda r: r.staff.name.lower() if r.staff else "")

    def list_payroll(self, store_id: int, *, month: Optional[str] = None, now: datetime | None = None) -> tuple[int, int, list[PayrollRow]]:
        month_no, year = self._period(month, now)
        salaries = self._salaries.list_for_store_period(store_id, month=month_no, year=year)
        return month_no, year, self._with_staff(store_id, salaries)

    def stats(self, store_id: int, *, month: Optional[str] = None, now: datetime | None = None) -> tuple[int, int, dict]:
        month_no, year = self._period(month, now)
        salaries = self._salaries.list_for_store_period(store_id, month=month_no, year=year)
        active = self._active_staff(store_id)

        processed = len(salaries)
        stats = {
            "totalPayroll": _sum(s.net_salary for s in salaries),
            "totalGross": _sum(s.gross_salary for s in salaries),
            "totalDeductions": _sum(s.total_deductions for s in salaries),
            "processedCount": processed,
            "paidCount": sum(1 for s in salaries if s.payment_status == PaymentStatus.PAID),
            "pendingCount": sum(1 for s in salaries if s.payment_status == PaymentStatus.PENDING),
            "avgSalary": rd(sum(s.net_salary for s in salaries) / processed) if processed else 0,
            "totalStaff": len(active),
            "notProcessed": max(0, len(active) - processed),
        }

        if processed == 0 and active:
            active_ids = {m.staff_id for m in active}
            configs = [
                c for c in self._configs.list_for_store(store_id, status=ConfigStatus.ACTIVE) if c.staff_id in active_ids
            ]
            expected = [self._calculator.expected(c).net_salary for c in configs]
            stats.update(
                {
                    "expectedTotalPayroll": round(sum(expected)),
                    "expectedAvgSalary": round(sum(expected) / len(expected)) if expected else 0,
                    "staffWithConfigs": len(configs),
                    "isExpected": True,
                }
            )
        return month_no, year, stats

    def process(self, store: Store, actor_id: int, data: dict, *, now: datetime | None = None) -> dict:
        """Build payroll records for the month; each staff member succeeds or fails on its own."""

        month_no, year = self._period(data.get("month"), now)
        start, end = month_bounds(year, month_no)
        if self._attendance.count_for_store(store.store_id, start=start, end=end) == 0:
            raise ValidationError(
                f"No attendance records found for {salary_period(month_no, year)}. "
                "Please mark attendance before processing payroll."
            )

        raw_ids = data.get("staffIds") or None
        if raw_ids is not None and not isinstance(raw_ids, list):
            raise ValidationError("staffIds must be a list")
        staff_ids = [require_int(i, "staffIds") for i in raw_ids] if raw_ids else None

        successful: list[dict] = []
        errors: list[dict] = []
        for member in self._active_staff(store.store_id, staff_ids):
            entry = {"staffId": member.staff_id, "staffName": member.name}
            try:
                salary_id, salary = self._process_one(store, member, actor_id, month=month_no, year=year, start=start, end=end)
                successful.append({**entry, "payrollId": salary_id, "netSalary": salary.net_salary})
            except DomainError as e:
                errors.append({**entry, "error": str(e)})
            except Exception as e:
                logger.exception("Error processing payroll for %s", member.name)
                errors.append({**entry, "error": str(e)})

        logger.info(
            "Payroll %s/%s for store %s: %s successful, %s errors",
            month_no, year, store.store_id, len(successful), len(errors),
        )
        return {"successful": successful, "errors": errors, "month": month_no, "year": year}

    def _process_one(
        self,
        store: Store,
        member: Staff,
        actor_id: int,
        *,
        month: int,
        year: int,
        start: date,
        end: date,
    ) -> tuple[int, StaffSalary]:
        if self._salaries.exists_for_period(member.staff_id, month=month, year=year):
            raise ValidationError("Payroll already processed for this month")
        config = self._configs.get_for_staff(member.staff_id)
        if not config or config.status != ConfigStatus.ACTIVE:
            raise ValidationError("Salary configuration not found")

        records = self._attendance.list_for_store(store.store_id, start=start, end=end, staff_id=member.staff_id)
        salary = self._calculator.build(
            config=config,
            attendance=records,
            month=month,
            year=year,
            store_owner_id=store.owner_id,
        )
        salary = replace(salary, created_by=actor_id, updated_by=actor_id)
        return self._salaries.create(salary), salary

    def salary_configs(self, store_id: int) -> list[tuple[Staff, Optional[SalaryConfig]]]:
        """Active staff sorted by name, each with its config (or None)."""

        by_staff = {c.staff_id: c for c in self._configs.list_for_store(store_id)}
        members = sorted(self._active_staff(store_id), key=lambda m: m.name.lower())
        return [(m, by_staff.get(m.staff_id)) for m in members]

    def save_salary_config(self, store_id: int, actor_id: int, data: dict, *, now: datetime | None = None) -> tuple[Staff, SalaryConfig, bool]:
        if data.get("staffId") in (None, ""):
            raise ValidationError("staffId is required")
        member = self._staff.get_in_store(require_int(data["staffId"], "staffId"), store_id)
        if not member:
            raise NotFoundError("Staff member not found in this store")

        body = data.get("salaryConfig", data)
        if not isinstance(body, dict):
            raise ValidationError("salaryConfig must be an object")

        current = self._configs.get_for_staff(member.staff_id)
        config = parse_salary_config(
            body,
            staff_id=member.staff_id,
            store_id=store_id,
            current=current,
            today=(now or now_local()).date(),
        )
        self._configs.save(config, actor_id=actor_id)
        logger.info("Salary config %s for staff %s", "updated" if current else "created", member.staff_id)
        return member, self._configs.get_for_staff(member.staff_id), current is None

    def init_default_configs(self, store_id: int, actor_id: int, *, now: datetime | None = None) -> dict:
        today = (now or now_local()).date()
        configured = {c.staff_id for c in self._configs.list_for_store(store_id)}

        successful: list[dict] = []
        errors: list[dict] = []
        for member in self._active_staff(store_id):
            if member.staff_id in configured:
                continue
            defaults = default_for_role(member.role)
            try:
                config_id = self._configs.save(
                    SalaryConfig(
                        config_id=0,
                        staff_id=member.staff_id,
                        store_id=store_id,
                        base_salary=defaults.base_salary,
                        allowances=defaults.allowance_rules(),
                        effective_from=today,
                    ),
                    actor_id=actor_id,
                )
                successful.append(
                    {
                        "staffId": member.staff_id,
                        "staffName": member.name,
                        "role": member.role.value,
                        "baseSalary": defaults.base_salary,
                        "configId": config_id,
                    }
                )
            except Exception as e:
                logger.exception("Error creating salary config for %s", member.name)
                errors.append({"staffId": member.staff_id, "staffName": member.name, "error": str(e)})
        return {"successful": successful, "errors": errors}

    def _get(self, store_id: int, salary_id) -> StaffSalary:
        salary = self._salaries.get_in_store(require_int(salary_id, "id"), store_id)
        if not salary:
            raise NotFoundError("Payroll record not found")
        return salary

    def update_status(self, store_id: int, salary_id, actor_id: int, data: dict, *, now: datetime | None = None) -> PayrollRow:
        """Approval/payment workflow of one payroll record."""

        now = now or now_local()
        salary = self._get(store_id, salary_id)
        action = (data.get("status") or "").strip()
        if action not in STATUS_ACTIONS:
            raise ValidationError(f"Status must be one of: {', '.join(STATUS_ACTIONS)}")
        notes = (data.get("notes") or "").strip() or None
        is_paid = salary.payment_status == PaymentStatus.PAID

        if action == "approved":
            salary = replace(salary, approval_status=ApprovalStatus.APPROVED, approved_by=actor_id, approved_at=now)
        elif action == "rejected":
            if is_paid:
                raise ValidationError("A paid payroll record cannot be rejected")
            reason = (data.get("rejectionReason") or notes or "").strip()
            if not reason:
                raise ValidationError("Rejection reason is required")
            salary = replace(salary, approval_status=ApprovalStatus.REJECTED, rejection_reason=reason)
        elif action == "paid":
            if salary.approval_status == ApprovalStatus.REJECTED or salary.payment_status == PaymentStatus.CANCELLED:
                raise ValidationError("A rejected or cancelled payroll record cannot be paid")
            if not data.get("paymentMethod"):
                raise ValidationError("Payment method is required")
            salary = replace(
                salary,
                payment_status=PaymentStatus.PAID,
                payment_date=now,
                payment_method=require_choice(data["paymentMethod"], PaymentMethod, "Payment method"),
                payment_reference=(data.get("paymentReference") or "").strip() or None,
                approval_status=ApprovalStatus.APPROVED,
                approved_by=actor_id,
                approved_at=now,
            )
        elif action == "on_hold":
            if is_paid:
                raise ValidationError("A paid payroll record cannot be put on hold")
            salary = replace(salary, payment_status=PaymentStatus.ON_HOLD)
        else:
            if is_paid:
                raise ValidationError("A paid payroll record cannot be cancelled")
            salary = replace(salary, payment_status=PaymentStatus.CANCELLED)

        if notes:
            salary = replace(salary, notes=notes)
        salary = replace(salary, updated_by=actor_id)
        self._salaries.update_workflow(salary)
        logger.info("Payroll %s of store %s marked %s", salary.salary_id, store_id, action)

        updated = self._get(store_id, salary.salary_id)
        return PayrollRow(salary=updated, staff=self._staff.get_in_store(updated.staff_id, store_id))

    def payslip(self, store: Store, salary_id, actor_id: int, *, now: datetime | None = None) -> Payslip:
        salary = self._get(store.store_id, salary_id)
        self._salaries.update_workflow(replace(salary, payslip_generated=True, updated_by=actor_id))
        return Payslip(
            salary=replace(salary, payslip_generated=True),
            staff=self._staff.get_in_store(salary.staff_id, store.store_id),
            store=store,
            period=salary_period(salary.month, salary.year),
            generated_at=now or now_local(),
        )

    def owner_summary(self, owner_id: int, *, month: Optional[str] = None, now: datetime | None = None) -> dict:
        month_no, year = self._period(month, now)
        salaries = self._salaries.list_for_owner_period(owner_id, month=month_no, year=year)

        def totals(rows: Sequence[StaffSalary]) -> dict:
            paid = [s for s in rows if s.payment_status == PaymentStatus.PAID]
            pending = [s for s in rows if s.payment_status == PaymentStatus.PENDING]
            return {
                "totalStaff": len(rows),
                "totalGrossSalary": _sum(s.gross_salary for s in rows),
                "totalNetSalary": _sum(s.net_salary for s in rows),
                "totalAllowances": _sum(s.total_allowances for s in rows),
                "totalDeductions": _sum(s.total_deductions for s in rows),
                "paidSalaries": len(paid),
                "pendingSalaries": len(pending),
                "totalPaidAmount": _sum(s.net_salary for s in paid),
                "totalPendingAmount": _sum(s.net_salary for s in pending),
            }

        by_store: dict[int, list[StaffSalary]] = defaultdict(list)
        for s in salaries:
            by_store[s.store_id].append(s)
        stores = {st.store_id: st for st in self._stores.list_by_ids(list(by_store))} if by_store else {}

        store_wise = []
        for store_id, rows in sorted(by_store.items()):
            store = stores.get(store_id)
            t = totals(rows)
            store_wise.append(
                {
                    "storeId": store_id,
                    "storeName": store.name if store else None,
                    "storeCode": store.code if store else None,
                    "totalStaff": t["totalStaff"],
                    "totalGrossSalary": t["totalGrossSalary"],
                    "totalNetSalary": t["totalNetSalary"],
                    "paidAmount": t["totalPaidAmount"],
                    "pendingAmount": t["totalPendingAmount"],
                }
            )
        return {"month": month_no, "year": year, "summary": totals(salaries), "storeWise": store_wise}
