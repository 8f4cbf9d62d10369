from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local, parse_iso_date, parse_iso_datetime, parse_month
from ..common.validators import FieldErrors, require_choice, require_int, require_non_empty, require_number
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_SCHEDULED_HOURS
from ..core.enums import AttendanceStatus, CheckMethod, StaffStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from ..stores.model import Store
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, MonthlySummary, summarize, working_hours
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _staff_and_date(errors: FieldErrors, data: dict) -> Optional[date]:
    if data.get("staffId") in (None, ""):
        errors.messages.append("staffId is required")
    return errors.check(lambda v: parse_iso_date(require_non_empty(v, "date")), data.get("date"))


def _scheduled_hours(data: dict) -> float:
    return require_number(data.get("scheduledHours") or DEFAULT_SCHEDULED_HOURS, "Scheduled hours", minimum=0)


@dataclass(frozen=True)
class StaffDay:
    """An active staff member with the attendance row of one date, if marked."""

    staff: Staff
    record: Optional[AttendanceRecord]

    @property
    def status(self) -> str:
        return self.record.status.value if self.record else "not_marked"


@dataclass(frozen=True)
class StaffMonth:
    staff: Staff
    summary: MonthlySummary


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._staff = staff
        self._factory = strategy_factory or AttendanceStrategyFactory(grace_minutes=DEFAULT_LATE_GRACE_MINUTES)

    def _staff_in_store(self, store_id: int, staff_id) -> Staff:
        member = self._staff.get_in_store(require_int(staff_id, "staffId"), store_id)
        if not member:
            raise NotFoundError("Staff member not found in this store")
        return member

    def _active_staff(self, store_id: int) -> Sequence[Staff]:
        members, _ = self._staff.list_in_store(store_id, status=StaffStatus.ACTIVE)
        return members

    def list_attendance(
        self,
        store_id: int,
        *,
        on: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        status: Optional[str] = None,
        now: datetime | None = None,
    ) -> Sequence[AttendanceRecord]:
        """Records of one date, of a date range, or of today."""

        if on:
            first = last = parse_iso_date(on)
        elif start and end:
            first, last = parse_iso_date(start), parse_iso_date(end)
            if last < first:
                raise ValidationError("endDate cannot be before startDate")
        else:
            first = last = (now or now_local()).date()

        status_filter = require_choice(status, AttendanceStatus, "Status") if status else None
        return self._attendance.list_for_store(store_id, start=first, end=last, status=status_filter)

    def mark(self, store_id: int, actor_id: int, data: dict) -> tuple[Staff, AttendanceRecord]:
        """Create or replace the attendance row of one staff member on one date."""

        errors = FieldErrors()
        work_date = _staff_and_date(errors, data)
        status = errors.check(require_choice, data.get("status"), AttendanceStatus, "Status")
        errors.raise_if_any()

        member = self._staff_in_store(store_id, data["staffId"])
        if work_date < member.date_of_joining:
            raise ValidationError("Attendance date cannot be before the staff member's date of joining")

        check_in = parse_iso_datetime(data["checkIn"], on_date=work_date) if data.get("checkIn") else None
        check_out = parse_iso_datetime(data["checkOut"], on_date=work_date) if data.get("checkOut") else None
        scheduled = _scheduled_hours(data)
        actual, overtime = working_hours(check_in, check_out, scheduled)

        existing = self._attendance.get_for_staff_and_date(member.staff_id, work_date)
        record = AttendanceRecord(
            attendance_id=existing.attendance_id if existing else 0,
            staff_id=member.staff_id,
            store_id=store_id,
            work_date=work_date,
            status=status,
            check_in_time=check_in,
            check_out_time=check_out,
            check_in_method=require_choice(data.get("checkInMethod") or CheckMethod.MANUAL, CheckMethod, "Check-in method"),
            check_out_method=require_choice(data.get("checkOutMethod") or CheckMethod.MANUAL, CheckMethod, "Check-out method"),
            scheduled_hours=scheduled,
            actual_hours=actual,
            overtime_hours=overtime,
            notes=(data.get("notes") or "").strip() or None,
            created_by=existing.created_by if existing else actor_id,
            updated_by=actor_id,
        )
        self._attendance.save(record)
        logger.info("Attendance of staff %s on %s marked as %s", member.staff_id, work_date, status.value)
        return member, self._attendance.get_for_staff_and_date(member.staff_id, work_date)

    def bulk_mark(self, store_id: int, actor_id: int, data: dict) -> tuple[list[dict], list[dict]]:
        """Mark many staff members for one date; each entry succeeds or fails on its own."""

        on = data.get("date")
        entries = data.get("attendanceData")
        if not isinstance(entries, list) or not entries:
            raise ValidationError("attendanceData must be a non-empty list")

        successful: list[dict] = []
        failed: list[dict] = []
        for entry in entries:
            staff_id = entry.get("staffId") if isinstance(entry, dict) else None
            try:
                if not isinstance(entry, dict):
                    raise ValidationError("Each attendance entry must be an object")
                _, record = self.mark(store_id, actor_id, {**entry, "date": entry.get("date") or on})
                successful.append({"staffId": staff_id, "success": True, "attendanceId": record.attendance_id})
            except DomainError as e:
                failed.append({"staffId": staff_id, "error": str(e)})
        logger.info("Bulk attendance for store %s: %s successful, %s errors", store_id, len(successful), len(failed))
        return successful, failed

    def daily_stats(self, store_id: int, *, on: Optional[str] = None, now: datetime | None = None) -> tuple[date, dict]:
        day = parse_iso_date(on) if on else (now or now_local()).date()
        total_staff = len(self._active_staff(store_id))
        counts = Counter(r.status for r in self._attendance.list_for_store(store_id, start=day, end=day))
        marked = sum(counts.values())
        return day, {
            "totalStaff": total_staff,
            "present": counts[AttendanceStatus.PRESENT],
            "absent": counts[AttendanceStatus.ABSENT],
            "late": counts[AttendanceStatus.LATE],
            "halfDay": counts[AttendanceStatus.HALF_DAY],
            "holiday": counts[AttendanceStatus.HOLIDAY],
            "onLeave": counts[AttendanceStatus.SICK_LEAVE] + counts[AttendanceStatus.CASUAL_LEAVE],
            "notMarked": max(0, total_staff - marked),
        }

    def staff_with_attendance(self, store_id: int, *, on: Optional[str] = None, now: datetime | None = None) -> tuple[date, list[StaffDay]]:
        day = parse_iso_date(on) if on else (now or now_local()).date()
        by_staff = {r.staff_id: r for r in self._attendance.list_for_store(store_id, start=day, end=day)}
        return day, [StaffDay(staff=m, record=by_staff.get(m.staff_id)) for m in self._active_staff(store_id)]

    def history(
        self,
        store_id: int,
        staff_id,
        *,
        month: Optional[str] = None,
        now: datetime | None = None,
    ) -> tuple[Staff, list[AttendanceRecord], MonthlySummary]:
        member = self._staff_in_store(store_id, staff_id)
        year, month_no = parse_month(month, today=(now or now_local()).date())
        start, end = month_bounds(year, month_no)
        records = list(self._attendance.list_for_store(store_id, start=start, end=end, staff_id=member.staff_id))
        return member, records, summarize(records)

    def set_manual_time(self, store: Store, actor_id: int, data: dict) -> tuple[Staff, AttendanceRecord]:
        """Record check-in/out times; without an explicit status, derive it from the store's opening time."""

        errors = FieldErrors()
        work_date = _staff_and_date(errors, data)
        errors.check(require_non_empty, data.get("checkIn"), "checkIn")
        errors.raise_if_any()

        check_in = parse_iso_datetime(data["checkIn"], on_date=work_date)
        check_out = parse_iso_datetime(data["checkOut"], on_date=work_date) if data.get("checkOut") else None
        scheduled = _scheduled_hours(data)

        payload = dict(data)
        if not data.get("status"):
            opening = store.opening_time(work_date.weekday())
            opening_at = parse_iso_datetime(opening, on_date=work_date) if opening else None
            strategy = self._factory.for_times(
                check_in=check_in, check_out=check_out, opening=opening_at, scheduled_hours=scheduled
            )
            decision = strategy.decide(check_in=check_in, check_out=check_out, opening=opening_at, scheduled_hours=scheduled)
            payload["status"] = decision.status.value
            if decision.note and not data.get("notes"):
                payload["notes"] = decision.note
        return self.mark(store.store_id, actor_id, payload)

    def store_monthly_summary(self, store_id: int, *, year: int, month: int) -> list[StaffMonth]:
        start, end = month_bounds(year, month)
        by_staff: dict[int, list[AttendanceRecord]] = {}
        for r in self._attendance.list_for_store(store_id, start=start, end=end):
            by_staff.setdefault(r.staff_id, []).append(r)

        members, _ = self._staff.list_in_store(store_id, staff_ids=list(by_staff)) if by_staff else ([], 0)
        return [StaffMonth(staff=m, summary=summarize(by_staff[m.staff_id])) for m in members]
