from __future__ import annotations

import json
import re
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateError
from .connection import DatabaseConnection

_DUP_KEY_RE = re.compile(r"Duplicate entry '(?P<value>.*)' for key '(?:[\w]+\.)?(?P<key>[\w]+)'")

# unique index name -> (field, message)
DUPLICATE_MESSAGES: dict[str, tuple[str, str]] = {
    "uq_staff_store_employee": (
        "employeeId",
        "Employee ID already exists. Please use a different Employee ID or leave it empty for auto-generation.",
    ),
    "uq_staff_email": ("email", "A staff member with this email address already exists in the system."),
    "uq_users_email": ("email", "User already exists with this email"),
    "uq_stores_code": ("code", "Store code already exists"),
    "uq_stores_license": ("licenseNumber", "A store with this license number already exists"),
    "uq_attendance_staff_date": ("date", "Attendance already marked for this staff member on this date"),
    "uq_salary_staff_period": ("month", "Payroll already processed for this month"),
    "uq_salary_config_staff": ("staff", "Salary configuration already exists for this staff member"),
}


def duplicate_error_from(exc: mysql.connector.IntegrityError) -> Optional[DuplicateError]:
    if exc.errno != errorcode.ER_DUP_ENTRY:
        return None
    m = _DUP_KEY_RE.search(str(exc.msg or exc))
    key = m.group("key") if m else ""
    value = m.group("value") if m else None
    field, message = DUPLICATE_MESSAGES.get(key, (key or "value", f"{key or 'value'} already exists"))
    return DuplicateError(message, field=field, value=value)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        dup = duplicate_error_from(e)
        if dup is not None:
            raise dup from e
        raise
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON column; the connector hands them back as str or bytes."""

    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if value == "":
        return default
    return json.loads(value)


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, default=_json_default)


def _json_default(value: Any):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def as_date(value: Any) -> Optional[date]:
    """Normalize DATE/DATETIME values coming back from the connector."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def placeholders(n: int) -> str:
    return ",".join(["%s"] * n)
