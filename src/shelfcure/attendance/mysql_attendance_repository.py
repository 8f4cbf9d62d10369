from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, CheckMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, staff_id, store_id, work_date, status, check_in_time, check_in_method,
    check_out_time, check_out_method, scheduled_hours, actual_hours, overtime_hours, notes,
    created_by, updated_by
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        store_id=int(r["store_id"]),
        work_date=as_date(r["work_date"]),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        check_in_method=CheckMethod(r.get("check_in_method") or "manual"),
        check_out_method=CheckMethod(r.get("check_out_method") or "manual"),
        scheduled_hours=float(r.get("scheduled_hours") or 0),
        actual_hours=float(r.get("actual_hours") or 0),
        overtime_hours=float(r.get("overtime_hours") or 0),
        notes=r.get("notes"),
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM staff_attendance WHERE staff_id=%s AND work_date=%s",
                (int(staff_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def save(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO staff_attendance
                    (staff_id, store_id, work_date, month, year, status, check_in_time, check_in_method,
                     check_out_time, check_out_method, scheduled_hours, actual_hours, overtime_hours,
                     notes, created_by, updated_by)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    status=VALUES(status),
                    check_in_time=VALUES(check_in_time),
                    check_in_method=VALUES(check_in_method),
                    check_out_time=VALUES(check_out_time),
                    check_out_method=VALUES(check_out_method),
                    scheduled_hours=VALUES(scheduled_hours),
                    actual_hours=VALUES(actual_hours),
                    overtime_hours=VALUES(overtime_hours),
                    notes=VALUES(notes),
                    updated_by=VALUES(updated_by)
                """,
                (
                    record.staff_id,
                    record.store_id,
                    record.work_date,
                    record.month,
                    record.year,
                    record.status.value,
                    record.check_in_time,
                    record.check_in_method.value,
                    record.check_out_time,
                    record.check_out_method.value,
                    record.scheduled_hours,
                    record.actual_hours,
                    record.overtime_hours,
                    record.notes,
                    record.created_by,
                    record.updated_by,
                ),
            )
            return int(cur.lastrowid)

    def list_for_store(
        self,
        store_id: int,
        *,
        start: date,
        end: date,
        status: Optional[AttendanceStatus] = None,
        staff_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["store_id=%s", "work_date BETWEEN %s AND %s"]
        params: list = [int(store_id), start, end]
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        if staff_id is not None:
            where.append("staff_id=%s")
            params.append(int(staff_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM staff_attendance
                WHERE {' AND '.join(where)}
                ORDER BY work_date DESC, staff_id
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_for_store(self, store_id: int, *, start: date, end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM staff_attendance WHERE store_id=%s AND work_date BETWEEN %s AND %s",
                (int(store_id), start, end),
            )
            return int((fetchone(cur) or {}).get("total") or 0)
