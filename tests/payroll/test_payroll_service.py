from datetime import date

import pytest

from fakes import fake_repos, make_store
from shelfcure.attendance.model import AttendanceRecord
from shelfcure.core.enums import ApprovalStatus, AttendanceStatus, PaymentMethod, PaymentStatus, StaffRole
from shelfcure.core.exceptions import NotFoundError, ValidationError
from shelfcure.payroll.model import SalaryConfig
from shelfcure.payroll.service import PayrollService


@pytest.fixture
def repos():
    return fake_repos()


@pytest.fixture
def store(repos):
    return make_store(repos["stores_repo"], owner_id=5)


@pytest.fixture
def service(repos, store):
    staff = repos["staff_repo"]
    staff.add(store_id=store.store_id, name="Asha", email="asha@x.io", employee_id="PH001")
    staff.add(store_id=store.store_id, name="Bala", email="bala@x.io", employee_id="CA001", role=StaffRole.CASHIER)
    repos["salary_configs_repo"].save(
        SalaryConfig(config_id=0, staff_id=1, store_id=store.store_id, base_salary=18000), actor_id=9
    )
    return PayrollService(
        repos["salaries_repo"],
        repos["salary_configs_repo"],
        staff,
        repos["attendance_repo"],
        repos["stores_repo"],
    )


def _mark(repos, staff_id: int, day: int, status: AttendanceStatus) -> None:
    repos["attendance_repo"].save(
        AttendanceRecord(attendance_id=0, staff_id=staff_id, store_id=1, work_date=date(2025, 6, day), status=status)
    )


@pytest.fixture
def processed(repos, store, service, now):
    _mark(repos, 1, 2, AttendanceStatus.PRESENT)
    _mark(repos, 1, 3, AttendanceStatus.ABSENT)
    _mark(repos, 2, 2, AttendanceStatus.PRESENT)
    return service.process(store, 9, {"month": "2025-06"}, now=now)


def test_process_requires_attendance_for_the_month(service, store, now):
    with pytest.raises(ValidationError) as exc:
        service.process(store, 9, {"month": "2025-06"}, now=now)

    assert str(exc.value) == (
        "No attendance records found for June 2025. Please mark attendance before processing payroll."
    )


def test_process_reports_each_staff_member(processed):
    assert processed["month"] == 6
    assert processed["year"] == 2025
    assert [s["staffName"] for s in processed["successful"]] == ["Asha"]
    assert processed["successful"][0]["netSalary"] == 17307.69
    assert processed["errors"] == [{"staffId": 2, "staffName": "Bala", "error": "Salary configuration not found"}]


def test_process_twice_is_rejected_per_staff(processed, service, store, now):
    again = service.process(store, 9, {"month": "2025-06", "staffIds": [1]}, now=now)

    assert again["successful"] == []
    assert again["errors"][0]["error"] == "Payroll already processed for this month"


def test_process_rejects_non_list_staff_ids(repos, service, store, now):
    _mark(repos, 1, 2, AttendanceStatus.PRESENT)

    with pytest.raises(ValidationError):
        service.process(store, 9, {"month": "2025-06", "staffIds": "1"}, now=now)


def test_stats_show_expected_payroll_before_processing(service, now):
    month, year, stats = service.stats(1, month="2025-06", now=now)

    assert (month, year) == (6, 2025)
    assert stats["processedCount"] == 0
    assert stats["totalStaff"] == 2
    assert stats["notProcessed"] == 2
    assert stats["isExpected"] is True
    assert stats["expectedTotalPayroll"] == 18000
    assert stats["staffWithConfigs"] == 1


def test_stats_after_processing(processed, service, now):
    _, _, stats = service.stats(1, month="2025-06", now=now)

    assert stats["processedCount"] == 1
    assert stats["pendingCount"] == 1
    assert stats["totalPayroll"] == 17307.69
    assert stats["notProcessed"] == 1
    assert "isExpected" not in stats


def test_approval_and_payment_workflow(processed, service, now):
    salary_id = processed["successful"][0]["payrollId"]

    row = service.update_status(1, salary_id, 9, {"status": "approved"}, now=now)
    assert row.salary.approval_status == ApprovalStatus.APPROVED
    assert row.staff.name == "Asha"

    with pytest.raises(ValidationError, match="Payment method"):
        service.update_status(1, salary_id, 9, {"status": "paid"}, now=now)

    row = service.update_status(
        1, salary_id, 9, {"status": "paid", "paymentMethod": "upi", "paymentReference": "UTR1"}, now=now
    )
    assert row.salary.payment_status == PaymentStatus.PAID
    assert row.salary.payment_method == PaymentMethod.UPI
    assert row.salary.payment_date == now

    for action in ("rejected", "on_hold", "cancelled"):
        with pytest.raises(ValidationError):
            service.update_status(1, salary_id, 9, {"status": action, "rejectionReason": "x"}, now=now)


def test_rejection_needs_a_reason_and_blocks_payment(processed, service, now):
    salary_id = processed["successful"][0]["payrollId"]

    with pytest.raises(ValidationError, match="reason"):
        service.update_status(1, salary_id, 9, {"status": "rejected"}, now=now)

    row = service.update_status(1, salary_id, 9, {"status": "rejected", "notes": "wrong hours"}, now=now)
    assert row.salary.rejection_reason == "wrong hours"

    with pytest.raises(ValidationError, match="cannot be paid"):
        service.update_status(1, salary_id, 9, {"status": "paid", "paymentMethod": "cash"}, now=now)


def test_update_status_rejects_unknown_action_and_foreign_record(processed, service, now):
    salary_id = processed["successful"][0]["payrollId"]

    with pytest.raises(ValidationError):
        service.update_status(1, salary_id, 9, {"status": "archived"}, now=now)
    with pytest.raises(NotFoundError):
        service.update_status(2, salary_id, 9, {"status": "approved"}, now=now)


def test_payslip_marks_record_generated(processed, service, store, repos, now):
    salary_id = processed["successful"][0]["payrollId"]

    slip = service.payslip(store, salary_id, 9, now=now)

    assert slip.period == "June 2025"
    assert slip.staff.name == "Asha"
    assert repos["salaries_repo"].salaries[salary_id].payslip_generated is True


def test_owner_summary_groups_by_store(processed, service, now):
    result = service.owner_summary(5, month="2025-06", now=now)

    assert result["summary"]["totalStaff"] == 1
    assert result["summary"]["pendingSalaries"] == 1
    assert result["summary"]["totalPendingAmount"] == 17307.69
    assert result["storeWise"][0]["storeCode"] == "ST0001"


def test_save_salary_config_creates_then_updates(service, now):
    _, config, created = service.save_salary_config(
        1, 9, {"staffId": 2, "baseSalary": 12000, "overtime": {"rate": 2}}, now=now
    )
    assert created is True
    assert config.base_salary == 12000
    assert config.overtime.rate == 2
    assert config.effective_from == now.date()

    _, config, created = service.save_salary_config(
        1, 9, {"staffId": 2, "salaryConfig": {"allowances": {"hra": {"enabled": True, "type": "percentage", "percentage": 20}}}}, now=now
    )
    assert created is False
    assert config.base_salary == 12000
    assert config.allowances["hra"].value_for(config.base_salary) == 2400


def test_save_salary_config_validates_rules(service, repos, now):
    with pytest.raises(ValidationError):
        service.save_salary_config(1, 9, {"staffId": 2}, now=now)
    with pytest.raises(ValidationError) as exc:
        service.save_salary_config(1, 9, {"staffId": 2, "baseSalary": 1000, "overtime": {"rate": 0.5}}, now=now)
    assert exc.value.errors == ["Overtime rate must be at least 1"]

    with pytest.raises(ValidationError) as exc:
        service.save_salary_config(
            1,
            9,
            {
                "staffId": 2,
                "baseSalary": 1000,
                "deductions": {
                    "pf": {"enabled": True, "employeeContribution": -1},
                    "tds": {"enabled": True, "percentage": 150},
                    "professionalTax": {"enabled": True, "amount": -200},
                },
            },
            now=now,
        )
    assert exc.value.errors == [
        "PF percentage must be between 0 and 100",
        "TDS percentage must be between 0 and 100",
        "Professional tax cannot be negative",
    ]
    assert repos["salary_configs_repo"].get_for_staff(2) is None


def test_init_default_configs_skips_configured_staff(service, repos, now):
    result = service.init_default_configs(1, 9, now=now)

    assert [s["staffName"] for s in result["successful"]] == ["Bala"]
    assert result["successful"][0]["baseSalary"] == 10000
    assert repos["salary_configs_repo"].get_for_staff(2).allowances["transport"].amount == 800


def test_salary_configs_lists_active_staff_with_configs(service):
    rows = service.salary_configs(1)

    assert [(m.name, c is not None) for m, c in rows] == [("Asha", True), ("Bala", False)]
