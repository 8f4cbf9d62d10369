from datetime import date

import pytest

from fakes import fake_repos
from shelfcure.attendance.model import AttendanceRecord
from shelfcure.container import AppSettings, wire
from shelfcure.core.enums import AttendanceStatus, Plan, Role
from shelfcure.core.exceptions import AuthorizationError, DuplicateError, NotFoundError, ValidationError
from shelfcure.users.model import User

STORE = {
    "name": "City Pharmacy",
    "contact": {"phone": "+91 98765 43210", "email": "City@Pharmacy.in"},
    "address": {"street": "MG Road", "city": "Bengaluru", "state": "Karnataka", "pincode": "560001"},
    "business": {"licenseNumber": "KA-DL-001", "gstNumber": "29abcde1234f1z5"},
}


@pytest.fixture
def repos():
    return fake_repos()


@pytest.fixture
def container(repos):
    return wire(settings=AppSettings(jwt_secret="x"), **repos)


@pytest.fixture
def stores(container):
    container.subscription_service.subscribe(1, plan=Plan.STANDARD)
    return container.store_service


def test_create_store_generates_code_and_takes_a_slot(stores, container, now):
    store = stores.create_store(1, STORE, now=now)

    assert store.code == "ST0001"
    assert store.email == "city@pharmacy.in"
    assert store.gst_number == "29ABCDE1234F1Z5"
    assert store.operating_hours["sunday"]["closed"] is True
    assert container.subscription_service.get_for_owner(1).current_store_count == 1

    second = stores.create_store(1, {**STORE, "business": {"licenseNumber": "KA-DL-002"}}, now=now)
    assert second.code == "ST0002"


def test_create_store_is_blocked_at_the_plan_limit(stores, now):
    for n in range(3):
        stores.create_store(1, {**STORE, "business": {"licenseNumber": f"L{n}"}}, now=now)

    with pytest.raises(ValidationError, match="Store limit reached"):
        stores.create_store(1, {**STORE, "business": {"licenseNumber": "L9"}}, now=now)


def test_failed_insert_gives_the_slot_back(stores, container, now):
    stores.create_store(1, STORE, now=now)

    with pytest.raises(DuplicateError) as exc:
        stores.create_store(1, STORE, now=now)

    assert exc.value.field == "licenseNumber"
    assert container.subscription_service.get_for_owner(1).current_store_count == 1


def test_create_store_reports_invalid_fields(stores, now):
    with pytest.raises(ValidationError) as exc:
        stores.create_store(1, {"name": "X", "address": {"pincode": "12"}, "operatingHours": {"monday": {"open": "9"}}}, now=now)

    assert "Please enter a valid 6-digit pincode" in exc.value.errors
    assert "License number is required" in exc.value.errors


def test_explicit_code_must_be_unique(stores, now):
    stores.create_store(1, {**STORE, "code": "blr1"}, now=now)

    with pytest.raises(DuplicateError):
        stores.create_store(1, {**STORE, "code": "BLR1", "business": {"licenseNumber": "other"}}, now=now)


def test_owner_only_sees_own_stores(stores, container, now):
    store = stores.create_store(1, STORE, now=now)

    with pytest.raises(NotFoundError):
        stores.get_store(2, store.store_id, now=now)
    overviews, total = stores.list_stores(1, now=now)
    assert total == 1
    assert overviews[0].staff_count == 0


def test_store_statistics_and_attendance_rate(stores, repos, now):
    store = stores.create_store(1, STORE, now=now)
    staff = repos["staff_repo"]
    staff.add(store_id=store.store_id, name="A", email="a@x.io", employee_id="PH001")
    for day, status in ((2, AttendanceStatus.PRESENT), (3, AttendanceStatus.ABSENT)):
        repos["attendance_repo"].save(
            AttendanceRecord(attendance_id=0, staff_id=1, store_id=store.store_id, work_date=date(2025, 6, day), status=status)
        )

    _, statistics = stores.get_store(1, store.store_id, now=now)
    overviews, _ = stores.list_stores(1, now=now)

    assert statistics["staffCount"] == 1
    assert statistics["attendance"]["attendancePercentage"] == 50
    assert overviews[0].attendance_rate == 50


def test_update_store_merges_settings(stores, now):
    store = stores.create_store(1, STORE, now=now)

    updated = stores.update_store(1, store.store_id, {"settings": {"lowStockThreshold": 25}, "address": {"city": "Mysuru"}}, now=now)

    assert updated.city == "Mysuru"
    assert updated.settings["lowStockThreshold"] == 25
    assert updated.settings["currency"] == "INR"


def test_delete_store_deactivates_and_frees_slot(stores, container, now):
    store = stores.create_store(1, STORE, now=now)

    stores.delete_store(1, store.store_id)
    stores.delete_store(1, store.store_id)

    assert container.stores_repo.get_by_id(store.store_id).is_active is False
    assert container.subscription_service.get_for_owner(1).current_store_count == 0


def test_create_store_user_and_manager_store_resolution(stores, container, now):
    store = stores.create_store(1, STORE, now=now)

    user = stores.create_store_user(1, store.store_id, {"name": "Mina", "email": "mina@x.io", "role": "store_manager"})

    assert user.role == Role.STORE_MANAGER
    assert user.current_store_id == store.store_id
    assert stores.resolve_manager_store(user).store_id == store.store_id
    with pytest.raises(ValidationError):
        stores.create_store_user(1, store.store_id, {"name": "X", "email": "x@x.io", "role": "store_owner"})


def test_manager_without_active_store_is_denied(stores, now):
    store = stores.create_store(1, STORE, now=now)
    stores.delete_store(1, store.store_id)
    user = User(user_id=5, name="M", email="m@x.io", password_hash="x", role=Role.STORE_MANAGER, store_ids=(store.store_id,))

    with pytest.raises(AuthorizationError):
        stores.resolve_manager_store(user)
