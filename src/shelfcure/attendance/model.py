from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_SCHEDULED_HOURS
from ..core.enums import AttendanceStatus, CheckMethod
from ..core.exceptions import ValidationError

WORKED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY)
LEAVE_STATUSES = (AttendanceStatus.SICK_LEAVE, AttendanceStatus.CASUAL_LEAVE)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one staff member's attendance for one date."""

    attendance_id: int
    staff_id: int
    store_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    check_in_method: CheckMethod = CheckMethod.MANUAL
    check_out_method: CheckMethod = CheckMethod.MANUAL
    scheduled_hours: float = DEFAULT_SCHEDULED_HOURS
    actual_hours: float = 0.0
    overtime_hours: float = 0.0
    notes: Optional[str] = None
    created_by: Optional[int] = None
    updated_by: Optional[int] = None

    @property
    def month(self) -> int:
        return self.work_date.month

    @property
    def year(self) -> int:
        return self.work_date.year


def working_hours(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    scheduled_hours: float = DEFAULT_SCHEDULED_HOURS,
) -> tuple[float, float]:
    """``(actual, overtime)`` hours for a day; zeros until both times are known."""

    if not check_in or not check_out:
        return 0.0, 0.0
    if check_out < check_in:
        raise ValidationError("Check-out time cannot be before check-in time")
    actual = round((check_out - check_in).total_seconds() / 3600, 2)
    overtime = round(actual - scheduled_hours, 2) if actual > scheduled_hours else 0.0
    return actual, overtime


@dataclass(frozen=True)
class MonthlySummary:
    """Per staff member totals over a month."""

    total_days: int = 0
    present: int = 0
    absent: int = 0
    half_day: int = 0
    late: int = 0
    leave: int = 0
    holiday: int = 0
    total_hours: float = 0.0
    overtime_hours: float = 0.0

    @property
    def attendance_percentage(self) -> float:
        if not self.total_days:
            return 0.0
        return round(self.present / self.total_days * 100, 2)


def summarize(records) -> MonthlySummary:
    counts = {s: 0 for s in AttendanceStatus}
    total_hours = 0.0
    overtime = 0.0
    n = 0
    for r in records:
        n += 1
        counts[r.status] += 1
        total_hours += float(r.actual_hours or 0)
        overtime += float(r.overtime_hours or 0)
    return MonthlySummary(
        total_days=n,
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        half_day=counts[AttendanceStatus.HALF_DAY],
        late=counts[AttendanceStatus.LATE],
        leave=counts[AttendanceStatus.SICK_LEAVE] + counts[AttendanceStatus.CASUAL_LEAVE],
        holiday=counts[AttendanceStatus.HOLIDAY],
        total_hours=round(total_hours, 2),
        overtime_hours=round(overtime, 2),
    )
