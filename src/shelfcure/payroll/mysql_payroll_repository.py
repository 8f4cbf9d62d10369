from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ApprovalStatus, ConfigStatus, PaymentMethod, PaymentStatus, SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import (
    SalaryConfig,
    StaffSalary,
    allowance_breakdown_from_json,
    allowance_breakdown_to_json,
    allowances_from_json,
    allowances_to_json,
    attendance_data_from_json,
    attendance_data_to_json,
    deduction_breakdown_from_json,
    deduction_breakdown_to_json,
    deductions_from_json,
    deductions_to_json,
    overtime_from_json,
    overtime_to_json,
    standard_hours_from_json,
    standard_hours_to_json,
)
from .repository import SalaryConfigRepository, StaffSalaryRepository

_CONFIG_COLUMNS = """
    config_id, staff_id, store_id, base_salary, salary_type, currency, working_hours, overtime,
    allowances, deductions, status, effective_from, effective_to
"""

_SALARY_COLUMNS = """
    salary_id, staff_id, store_id, store_owner_id, month, year, base_salary, allowances, deductions,
    attendance_data, total_allowances, total_deductions, gross_salary, net_salary, payment_status,
    payment_date, payment_method, payment_reference, approval_status, approved_by, approved_at,
    rejection_reason, notes, payslip_generated, created_by, updated_by
"""


def _row_to_config(r: dict) -> SalaryConfig:
    return SalaryConfig(
        config_id=int(r["config_id"]),
        staff_id=int(r["staff_id"]),
        store_id=int(r["store_id"]),
        base_salary=float(r["base_salary"]),
        salary_type=SalaryType(r.get("salary_type") or "monthly"),
        currency=r.get("currency") or "INR",
        standard_hours=standard_hours_from_json(load_json(r.get("working_hours"), {})),
        overtime=overtime_from_json(load_json(r.get("overtime"), {})),
        allowances=allowances_from_json(load_json(r.get("allowances"), {})),
        deductions=deductions_from_json(load_json(r.get("deductions"), {})),
        status=ConfigStatus(r.get("status") or "active"),
        effective_from=as_date(r.get("effective_from")),
        effective_to=as_date(r.get("effective_to")),
    )


def _row_to_salary(r: dict) -> StaffSalary:
    return StaffSalary(
        salary_id=int(r["salary_id"]),
        staff_id=int(r["staff_id"]),
        store_id=int(r["store_id"]),
        store_owner_id=int(r["store_owner_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        base_salary=float(r["base_salary"]),
        allowances=allowance_breakdown_from_json(load_json(r.get("allowances"), {})),
        deductions=deduction_breakdown_from_json(load_json(r.get("deductions"), {})),
        attendance_data=attendance_data_from_json(load_json(r.get("attendance_data"), {})),
        total_allowances=float(r.get("total_allowances") or 0),
        total_deductions=float(r.get("total_deductions") or 0),
        gross_salary=float(r.get("gross_salary") or 0),
        net_salary=float(r.get("net_salary") or 0),
        payment_status=PaymentStatus(r.get("payment_status") or "pending"),
        payment_date=r.get("payment_date"),
        payment_method=PaymentMethod(r.get("payment_method") or "bank_transfer"),
        payment_reference=r.get("payment_reference"),
        approval_status=ApprovalStatus(r.get("approval_status") or "draft"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        notes=r.get("notes"),
        payslip_generated=bool(r.get("payslip_generated")),
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
    )


class MySQLSalaryConfigRepository(SalaryConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_staff(self, staff_id: int) -> Optional[SalaryConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CONFIG_COLUMNS} FROM staff_salary_configs WHERE staff_id=%s", (int(staff_id),))
            r = fetchone(cur)
            return _row_to_config(r) if r else None

    def list_for_store(self, store_id: int, *, status: Optional[ConfigStatus] = None) -> Sequence[SalaryConfig]:
        sql = f"SELECT {_CONFIG_COLUMNS} FROM staff_salary_configs WHERE store_id=%s"
        params: list = [int(store_id)]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY staff_id", tuple(params))
            return [_row_to_config(r) for r in fetchall(cur)]

    def save(self, config: SalaryConfig, *, actor_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff_salary_configs
                    (staff_id, store_id, base_salary, salary_type, currency, working_hours, overtime,
                     allowances, deductions, status, effective_from, effective_to, created_by, updated_by)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    config_id=LAST_INSERT_ID(config_id),
                    base_salary=VALUES(base_salary),
                    salary_type=VALUES(salary_type),
                    currency=VALUES(currency),
                    working_hours=VALUES(working_hours),
                    overtime=VALUES(overtime),
                    allowances=VALUES(allowances),
                    deductions=VALUES(deductions),
                    status=VALUES(status),
                    effective_from=VALUES(effective_from),
                    effective_to=VALUES(effective_to),
                    updated_by=VALUES(updated_by)
                """,
                (
                    config.staff_id,
                    config.store_id,
                    config.base_salary,
                    config.salary_type.value,
                    config.currency,
                    dump_json(standard_hours_to_json(config.standard_hours)),
                    dump_json(overtime_to_json(config.overtime)),
                    dump_json(allowances_to_json(config.allowances)),
                    dump_json(deductions_to_json(config.deductions)),
                    config.status.value,
                    config.effective_from,
                    config.effective_to,
                    int(actor_id),
                    int(actor_id),
                ),
            )
            return int(cur.lastrowid)


class MySQLStaffSalaryRepository(StaffSalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_in_store(self, salary_id: int, store_id: int) -> Optional[StaffSalary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SALARY_COLUMNS} FROM staff_salaries WHERE salary_id=%s AND store_id=%s",
                (int(salary_id), int(store_id)),
            )
            r = fetchone(cur)
            return _row_to_salary(r) if r else None

    def exists_for_period(self, staff_id: int, *, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM staff_salaries WHERE staff_id=%s AND month=%s AND year=%s LIMIT 1",
                (int(staff_id), int(month), int(year)),
            )
            return fetchone(cur) is not None

    def list_for_store_period(self, store_id: int, *, month: int, year: int) -> Sequence[StaffSalary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SALARY_COLUMNS}
                FROM staff_salaries
                WHERE store_id=%s AND month=%s AND year=%s
                ORDER BY salary_id
                """,
                (int(store_id), int(month), int(year)),
            )
            return [_row_to_salary(r) for r in fetchall(cur)]

    def list_for_owner_period(self, store_owner_id: int, *, month: int, year: int) -> Sequence[StaffSalary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SALARY_COLUMNS}
                FROM staff_salaries
                WHERE store_owner_id=%s AND month=%s AND year=%s
                ORDER BY store_id, salary_id
                """,
                (int(store_owner_id), int(month), int(year)),
            )
            return [_row_to_salary(r) for r in fetchall(cur)]

    def create(self, salary: StaffSalary) -> int:
        s = salary.with_totals()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff_salaries
                    (staff_id, store_id, store_owner_id, month, year, base_salary, allowances, deductions,
                     attendance_data, total_allowances, total_deductions, gross_salary, net_salary,
                     payment_status, payment_method, approval_status, notes, created_by)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    s.staff_id,
                    s.store_id,
                    s.store_owner_id,
                    s.month,
                    s.year,
                    s.base_salary,
                    dump_json(allowance_breakdown_to_json(s.allowances)),
                    dump_json(deduction_breakdown_to_json(s.deductions)),
                    dump_json(attendance_data_to_json(s.attendance_data)),
                    s.total_allowances,
                    s.total_deductions,
                    s.gross_salary,
                    s.net_salary,
                    s.payment_status.value,
                    s.payment_method.value,
                    s.approval_status.value,
                    s.notes,
                    s.created_by,
                ),
            )
            return int(cur.lastrowid)

    def update_workflow(self, salary: StaffSalary) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff_salaries
                SET payment_status=%s, payment_date=%s, payment_method=%s, payment_reference=%s,
                    approval_status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s,
                    notes=%s, payslip_generated=%s, updated_by=%s
                WHERE salary_id=%s
                """,
                (
                    salary.payment_status.value,
                    salary.payment_date,
                    salary.payment_method.value,
                    salary.payment_reference,
                    salary.approval_status.value,
                    salary.approved_by,
                    salary.approved_at,
                    salary.rejection_reason,
                    salary.notes,
                    1 if salary.payslip_generated else 0,
                    salary.updated_by,
                    salary.salary_id,
                ),
            )
            return cur.rowcount > 0
