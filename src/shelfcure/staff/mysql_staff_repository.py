from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Department, StaffRole, StaffStatus, WorkingHours
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, dump_json, fetchall, fetchone, load_json, placeholders
from .model import Staff
from .repository import StaffRepository

_COLUMNS = """
    staff_id, store_id, name, email, phone, employee_id, role, department, date_of_joining, salary,
    working_hours, status, has_system_access, user_account_id, address, date_of_birth,
    emergency_contact, permissions, performance_rating, created_by, updated_by, created_at
"""

_WRITABLE = {
    "name",
    "email",
    "phone",
    "employee_id",
    "role",
    "department",
    "date_of_joining",
    "salary",
    "working_hours",
    "status",
    "has_system_access",
    "address",
    "date_of_birth",
    "emergency_contact",
    "permissions",
    "performance_rating",
}
_JSON_FIELDS = {"address", "emergency_contact", "permissions"}

# store managers first, then alphabetical
_ORDER_BY = "ORDER BY (role = 'store_manager') DESC, role, name"


def _row_to_staff(r: dict) -> Staff:
    return Staff(
        staff_id=int(r["staff_id"]),
        store_id=int(r["store_id"]),
        name=r["name"],
        email=r["email"],
        phone=r["phone"],
        employee_id=r["employee_id"],
        role=StaffRole(r["role"]),
        department=Department(r["department"]),
        date_of_joining=as_date(r["date_of_joining"]),
        salary=float(r.get("salary") or 0),
        working_hours=WorkingHours(r["working_hours"]),
        status=StaffStatus(r["status"]),
        has_system_access=bool(r.get("has_system_access")),
        user_account_id=r.get("user_account_id"),
        address=load_json(r.get("address")),
        date_of_birth=as_date(r.get("date_of_birth")),
        emergency_contact=load_json(r.get("emergency_contact")),
        permissions=tuple(load_json(r.get("permissions"), []) or []),
        performance_rating=int(r.get("performance_rating") or 3),
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
        created_at=r.get("created_at"),
    )


def _db_value(key: str, value):
    if key in _JSON_FIELDS:
        return dump_json(list(value) if isinstance(value, tuple) else value)
    if hasattr(value, "value"):
        return value.value
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def _column_values(fields: dict) -> tuple[list[str], list]:
    cols = [k for k in fields if k in _WRITABLE]
    return cols, [_db_value(k, fields[k]) for k in cols]


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_in_store(self, staff_id: int, store_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM staff WHERE staff_id=%s AND store_id=%s",
                (int(staff_id), int(store_id)),
            )
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

    def find_in_store(self, store_id: int, *, email: Optional[str] = None, user_account_id: Optional[int] = None) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM staff
                WHERE store_id=%s AND (user_account_id=%s OR email=%s)
                ORDER BY staff_id
                LIMIT 1
                """,
                (int(store_id), user_account_id, (email or "").lower() or None),
            )
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

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
        where = ["store_id=%s"]
        params: list = [int(store_id)]
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        if role:
            where.append("role=%s")
            params.append(role)
        if department:
            where.append("department=%s")
            params.append(department)
        if search:
            like = f"%{search}%"
            where.append("(name LIKE %s OR employee_id LIKE %s OR email LIKE %s OR phone LIKE %s OR role LIKE %s)")
            params.extend([like] * 5)
        if staff_ids is not None:
            ids = [int(s) for s in staff_ids]
            if not ids:
                return [], 0
            where.append(f"staff_id IN ({placeholders(len(ids))})")
            params.extend(ids)
        where_sql = " AND ".join(where)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM staff WHERE {where_sql}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)

            sql = f"SELECT {_COLUMNS} FROM staff WHERE {where_sql} {_ORDER_BY}"
            if limit is not None:
                sql += " LIMIT %s OFFSET %s"
                params.extend([int(limit), int(offset)])
            cur.execute(sql, tuple(params))
            return [_row_to_staff(r) for r in fetchall(cur)], total

    def list_employee_ids(self, store_id: int, prefix: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM staff WHERE store_id=%s AND employee_id LIKE %s",
                (int(store_id), f"{prefix}%"),
            )
            return [r["employee_id"] for r in fetchall(cur)]

    def employee_id_exists(self, store_id: int, employee_id: str, *, exclude_staff_id: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found FROM staff
                WHERE store_id=%s AND employee_id=%s AND staff_id <> %s
                LIMIT 1
                """,
                (int(store_id), employee_id, int(exclude_staff_id or 0)),
            )
            return fetchone(cur) is not None

    def email_exists(self, email: str, *, exclude_staff_id: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM staff WHERE email=%s AND staff_id <> %s LIMIT 1",
                (email.lower(), int(exclude_staff_id or 0)),
            )
            return fetchone(cur) is not None

    def create(self, *, store_id: int, fields: dict, created_by: int) -> int:
        cols, values = _column_values(fields)
        cols += ["store_id", "created_by"]
        values += [int(store_id), int(created_by)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO staff ({', '.join(cols)}) VALUES ({placeholders(len(cols))})",
                tuple(values),
            )
            return int(cur.lastrowid)

    def update(self, staff_id: int, *, fields: dict, updated_by: int) -> bool:
        cols, values = _column_values(fields)
        cols.append("updated_by")
        values.append(int(updated_by))
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE staff SET {assignments} WHERE staff_id=%s", (*values, int(staff_id)))
            return cur.rowcount > 0

    def set_status(self, staff_id: int, *, status: StaffStatus, updated_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE staff SET status=%s, updated_by=%s WHERE staff_id=%s",
                (status.value, int(updated_by), int(staff_id)),
            )
            return cur.rowcount > 0

    def link_user_account(self, staff_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE staff SET user_account_id=%s WHERE staff_id=%s", (int(user_id), int(staff_id)))
            return cur.rowcount > 0
