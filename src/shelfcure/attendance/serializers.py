from __future__ import annotations

from typing import Optional

from ..staff.model import Staff
from ..staff.serializers import staff_brief
from .model import AttendanceRecord, MonthlySummary


def _iso(value):
    return value.isoformat() if value else None


def attendance_to_dict(record: AttendanceRecord, staff: Optional[Staff] = None) -> dict:
    return {
        "id": record.attendance_id,
        "staff": staff_brief(staff) if staff else record.staff_id,
        "store": record.store_id,
        "date": record.work_date.isoformat(),
        "month": record.month,
        "year": record.year,
        "status": record.status.value,
        "checkIn": {"time": _iso(record.check_in_time), "method": record.check_in_method.value},
        "checkOut": {"time": _iso(record.check_out_time), "method": record.check_out_method.value},
        "scheduledHours": record.scheduled_hours,
        "actualHours": record.actual_hours,
        "overtimeHours": record.overtime_hours,
        "notes": record.notes or "",
    }


def summary_to_dict(summary: MonthlySummary) -> dict:
    return {
        "totalDays": summary.total_days,
        "present": summary.present,
        "absent": summary.absent,
        "halfDay": summary.half_day,
        "late": summary.late,
        "leave": summary.leave,
        "holiday": summary.holiday,
        "totalHours": summary.total_hours,
        "overtimeHours": summary.overtime_hours,
        "attendancePercentage": summary.attendance_percentage,
    }
