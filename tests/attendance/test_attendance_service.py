from datetime import date

import pytest

from fakes import FakeAttendanceRepo, FakeStaffRepo, FakeStoresRepo, make_store
from shelfcure.attendance.service import AttendanceService
from shelfcure.core.enums import AttendanceStatus, StaffStatus
from shelfcure.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def staff():
    repo = FakeStaffRepo()
    repo.add(store_id=1, name="Asha", email="asha@x.io", employee_id="PH001", date_of_joining=date(2025, 6, 1))
    repo.add(store_id=1, name="Bala", email="bala@x.io", employee_id="CA001")
    repo.add(store_id=1, name="Chitra", email="chitra@x.io", employee_id="AS001", status=StaffStatus.INACTIVE)
    repo.add(store_id=2, name="Other", email="other@x.io", employee_id="PH001")
    return repo


@pytest.fixture
def attendance():
    return FakeAttendanceRepo()


@pytest.fixture
def service(attendance, staff):
    return AttendanceService(attendance, staff)


def test_mark_computes_hours_and_overtime(service):
    member, record = service.mark(
        1,
        99,
        {"staffId": 1, "date": "2025-06-16", "status": "present", "checkIn": "09:00", "checkOut": "19:30"},
    )

    assert member.name == "Asha"
    assert record.actual_hours == 10.5
    assert record.overtime_hours == 2.5
    assert record.created_by == 99


def test_mark_twice_replaces_the_same_row(service, attendance):
    _, first = service.mark(1, 10, {"staffId": 2, "date": "2025-06-16", "status": "absent"})
    _, second = service.mark(1, 11, {"staffId": 2, "date": "2025-06-16", "status": "sick_leave", "notes": "flu"})

    assert second.attendance_id == first.attendance_id
    assert second.status == AttendanceStatus.SICK_LEAVE
    assert second.created_by == 10
    assert second.updated_by == 11
    assert len(attendance.records) == 1


def test_mark_rejects_date_before_joining(service):
    with pytest.raises(ValidationError, match="date of joining"):
        service.mark(1, 1, {"staffId": 1, "date": "2025-05-31", "status": "present"})


def test_mark_rejects_staff_of_another_store(service):
    with pytest.raises(NotFoundError):
        service.mark(1, 1, {"staffId": 4, "date": "2025-06-16", "status": "present"})


def test_mark_reports_every_missing_field(service):
    with pytest.raises(ValidationError) as exc:
        service.mark(1, 1, {"status": "unknown"})

    assert len(exc.value.errors) == 3


def test_mark_rejects_checkout_before_checkin(service):
    with pytest.raises(ValidationError):
        service.mark(
            1, 1, {"staffId": 2, "date": "2025-06-16", "status": "present", "checkIn": "18:00", "checkOut": "09:00"}
        )


def test_bulk_mark_keeps_going_after_a_bad_entry(service):
    successful, errors = service.bulk_mark(
        1,
        1,
        {
            "date": "2025-06-16",
            "attendanceData": [
                {"staffId": 1, "status": "present"},
                {"staffId": 4, "status": "present"},
                {"staffId": 2, "status": "late"},
            ],
        },
    )

    assert [s["staffId"] for s in successful] == [1, 2]
    assert errors == [{"staffId": 4, "error": "Staff member not found in this store"}]


def test_bulk_mark_reports_malformed_hours_and_times(service, attendance):
    successful, errors = service.bulk_mark(
        1,
        1,
        {
            "date": "2025-06-16",
            "attendanceData": [
                {"staffId": 1, "status": "present"},
                {"staffId": 2, "status": "present", "scheduledHours": "eight"},
                {"staffId": 2, "status": "present", "checkIn": 900},
            ],
        },
    )

    assert [s["staffId"] for s in successful] == [1]
    assert errors == [
        {"staffId": 2, "error": "Scheduled hours must be a number"},
        {"staffId": 2, "error": "Invalid timestamp: 900"},
    ]
    assert len(attendance.records) == 1


def test_daily_stats_counts_unmarked_active_staff(service, now):
    service.mark(1, 1, {"staffId": 1, "date": "2025-06-16", "status": "late"})

    day, stats = service.daily_stats(1, now=now)

    assert day == date(2025, 6, 16)
    assert stats["totalStaff"] == 2
    assert stats["late"] == 1
    assert stats["notMarked"] == 1


def test_staff_with_attendance_marks_missing_rows(service, now):
    service.mark(1, 1, {"staffId": 2, "date": "2025-06-16", "status": "absent"})

    _, rows = service.staff_with_attendance(1, now=now)

    assert {r.staff.name: r.status for r in rows} == {"Asha": "not_marked", "Bala": "absent"}


def test_history_summarizes_one_month(service, now):
    service.mark(1, 1, {"staffId": 2, "date": "2025-06-02", "status": "present", "checkIn": "09:00", "checkOut": "17:00"})
    service.mark(1, 1, {"staffId": 2, "date": "2025-06-03", "status": "absent"})
    service.mark(1, 1, {"staffId": 2, "date": "2025-05-30", "status": "present"})

    member, records, summary = service.history(1, 2, month="2025-06", now=now)

    assert member.name == "Bala"
    assert len(records) == 2
    assert summary.present == 1
    assert summary.absent == 1
    assert summary.total_hours == 8
    assert summary.attendance_percentage == 50


def test_list_attendance_rejects_reversed_range(service):
    with pytest.raises(ValidationError):
        service.list_attendance(1, start="2025-06-10", end="2025-06-01")


def test_manual_time_uses_store_opening_hours(service):
    store = make_store(FakeStoresRepo(), owner_id=1)

    _, late = service.set_manual_time(store, 1, {"staffId": 1, "date": "2025-06-16", "checkIn": "09:45"})
    _, on_time = service.set_manual_time(store, 1, {"staffId": 2, "date": "2025-06-16", "checkIn": "09:05"})

    assert late.status == AttendanceStatus.LATE
    assert late.notes == "Late by 45 minutes"
    assert on_time.status == AttendanceStatus.PRESENT


def test_manual_time_rejects_non_numeric_scheduled_hours(service):
    store = make_store(FakeStoresRepo(), owner_id=1)

    with pytest.raises(ValidationError, match="Scheduled hours must be a number"):
        service.set_manual_time(
            store, 1, {"staffId": 2, "date": "2025-06-16", "checkIn": "09:00", "scheduledHours": [8]}
        )


def test_manual_time_short_shift_is_half_day(service):
    store = make_store(FakeStoresRepo(), owner_id=1)

    _, record = service.set_manual_time(
        store, 1, {"staffId": 2, "date": "2025-06-16", "checkIn": "09:00", "checkOut": "12:00"}
    )

    assert record.status == AttendanceStatus.HALF_DAY
    assert record.actual_hours == 3


def test_manual_time_on_closed_day_is_present(service):
    store = make_store(FakeStoresRepo(), owner_id=1)

    # 2025-06-22 is a Sunday, closed by default.
    _, record = service.set_manual_time(store, 1, {"staffId": 2, "date": "2025-06-22", "checkIn": "14:00"})

    assert record.status == AttendanceStatus.PRESENT


def test_store_monthly_summary_groups_by_staff(service):
    service.mark(1, 1, {"staffId": 1, "date": "2025-06-02", "status": "present"})
    service.mark(1, 1, {"staffId": 1, "date": "2025-06-03", "status": "half_day"})
    service.mark(1, 1, {"staffId": 2, "date": "2025-06-02", "status": "casual_leave"})

    rows = service.store_monthly_summary(1, year=2025, month=6)

    by_name = {r.staff.name: r.summary for r in rows}
    assert by_name["Asha"].total_days == 2
    assert by_name["Asha"].half_day == 1
    assert by_name["Bala"].leave == 1
