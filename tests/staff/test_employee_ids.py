import pytest

from fakes import FakeStaffRepo
from shelfcure.core.exceptions import DuplicateError
from shelfcure.staff.employee_ids import (
    EmployeeIdExhaustedError,
    claim_employee_id,
    next_employee_id,
    next_sequence,
    prefix_for,
)


def test_prefix_per_role_with_fallback():
    assert prefix_for("pharmacist") == "PH"
    assert prefix_for("store_manager") == "MGR"
    assert prefix_for("janitor") == "ST"
    assert prefix_for(None) == "ST"


def test_next_sequence_ignores_foreign_shapes():
    assert next_sequence(["PH001", "PH007", "PHX12", "PH000", "CA009"], "PH") == 8
    assert next_sequence([], "PH") == 1


def test_next_employee_id_is_scoped_to_the_store():
    staff = FakeStaffRepo()
    staff.add(store_id=1, name="A", email="a@x.io", employee_id="PH001")
    staff.add(store_id=1, name="B", email="b@x.io", employee_id="PH002")
    staff.add(store_id=2, name="C", email="c@x.io", employee_id="PH005")

    assert next_employee_id(staff, 1, "pharmacist") == "PH003"
    assert next_employee_id(staff, 3, "pharmacist") == "PH001"


def test_next_employee_id_probes_past_taken_numbers():
    class Crowded(FakeStaffRepo):
        def employee_id_exists(self, store_id, employee_id, *, exclude_staff_id=None):
            return employee_id != "CA004"

    assert next_employee_id(Crowded(), 1, "cashier") == "CA004"


def test_next_employee_id_gives_up_after_limit():
    class Full(FakeStaffRepo):
        def employee_id_exists(self, store_id, employee_id, *, exclude_staff_id=None):
            return True

    with pytest.raises(EmployeeIdExhaustedError):
        next_employee_id(Full(), 1, "cashier")


def test_claim_normalizes_and_checks_uniqueness():
    staff = FakeStaffRepo()
    member = staff.add(store_id=1, name="A", email="a@x.io", employee_id="PH001")

    assert claim_employee_id(staff, 1, " ph002 ") == "PH002"
    assert claim_employee_id(staff, 2, "ph001") == "PH001"
    assert claim_employee_id(staff, 1, "ph001", exclude_staff_id=member.staff_id) == "PH001"
    with pytest.raises(DuplicateError) as exc:
        claim_employee_id(staff, 1, "ph001")
    assert exc.value.field == "employeeId"
