"""In-memory repositories implementing the repository protocols."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from shelfcure.attendance.model import AttendanceRecord
from shelfcure.core.enums import ConfigStatus, Department, StaffRole, SubscriptionStatus, WorkingHours
from shelfcure.core.exceptions import DuplicateError
from shelfcure.payroll.model import SalaryConfig, StaffSalary
from shelfcure.staff.model import Staff
from shelfcure.stores.model import Store
from shelfcure.subscriptions.model import Subscription
from shelfcure.users.model import User


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, **kwargs) -> User:
        user = User(user_id=self._next_id, **kwargs)
        self.users[user.user_id] = user
        self._next_id += 1
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        email = (email or "").lower()
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, name, email, phone, password_hash, role):
        if self.get_by_email(email):
            raise DuplicateError("User already exists with this email", field="email", value=email)
        return self.add(name=name, email=email.lower(), phone=phone, password_hash=password_hash, role=role).user_id

    def record_failed_login(self, user_id, *, attempts, lock_until):
        u = self.users[user_id]
        self.users[user_id] = replace(u, login_attempts=attempts, lock_until=lock_until)

    def record_successful_login(self, user_id, *, at):
        u = self.users[user_id]
        self.users[user_id] = replace(u, login_attempts=0, lock_until=None, last_login=at)

    def update_password(self, user_id, *, password_hash):
        self.users[user_id] = replace(self.users[user_id], password_hash=password_hash)
        return True

    def update_profile(self, user_id, *, name, phone):
        u = self.users[user_id]
        self.users[user_id] = replace(u, name=name or u.name, phone=phone or u.phone)
        return True

    def set_current_store(self, user_id, store_id):
        self.users[user_id] = replace(self.users[user_id], current_store_id=store_id)
        return True

    def add_store(self, user_id, store_id):
        u = self.users[user_id]
        if store_id not in u.store_ids:
            self.users[user_id] = replace(u, store_ids=u.store_ids + (store_id,))


class FakeStoresRepo:
    def __init__(self):
        self._next_id = 1
        self.stores: dict[int, Store] = {}

    def get_by_id(self, store_id):
        return self.stores.get(int(store_id))

    def get_for_owner(self, store_id, owner_id):
        s = self.stores.get(int(store_id))
        return s if s and s.owner_id == owner_id else None

    def list_for_owner(self, owner_id, *, search=None, is_active=None, offset=0, limit=None):
        rows = [s for s in self.stores.values() if s.owner_id == owner_id]
        if is_active is not None:
            rows = [s for s in rows if s.is_active == is_active]
        if search:
            q = search.lower()
            rows = [s for s in rows if q in s.name.lower() or q in s.code.lower() or q in s.city.lower()]
        rows.sort(key=lambda s: s.store_id, reverse=True)
        total = len(rows)
        if limit is not None:
            rows = rows[offset : offset + limit]
        return rows, total

    def list_by_ids(self, store_ids):
        return [self.stores[i] for i in store_ids if i in self.stores]

    def code_exists(self, code):
        return any(s.code == code for s in self.stores.values())

    def list_codes_with_prefix(self, prefix):
        return [s.code for s in self.stores.values() if s.code.startswith(prefix)]

    def create(self, *, owner_id, fields):
        if any(s.license_number == fields.get("license_number") for s in self.stores.values()):
            raise DuplicateError("A store with this license number already exists", field="licenseNumber")
        store = Store(store_id=self._next_id, owner_id=owner_id, created_by=owner_id, **fields)
        self.stores[store.store_id] = store
        self._next_id += 1
        return store.store_id

    def update(self, store_id, *, fields, updated_by):
        self.stores[store_id] = replace(self.stores[store_id], updated_by=updated_by, **fields)
        return True

    def set_active(self, store_id, *, is_active, updated_by):
        self.stores[store_id] = replace(self.stores[store_id], is_active=is_active, updated_by=updated_by)
        return True


class FakeSubscriptionsRepo:
    def __init__(self):
        self._next_id = 1
        self.subs: dict[int, Subscription] = {}

    def get_for_owner(self, store_owner_id):
        return next((s for s in self.subs.values() if s.store_owner_id == store_owner_id), None)

    def create(self, **kwargs):
        sub = Subscription(subscription_id=self._next_id, **kwargs)
        self.subs[sub.subscription_id] = sub
        self._next_id += 1
        return sub.subscription_id

    def change_plan(self, *, subscription_id, **kwargs):
        self.subs[subscription_id] = replace(self.subs[subscription_id], **kwargs)
        return True

    def increment_store_count(self, subscription_id):
        s = self.subs[subscription_id]
        if s.current_store_count >= s.store_count_limit:
            return False
        self.subs[subscription_id] = replace(s, current_store_count=s.current_store_count + 1)
        return True

    def decrement_store_count(self, subscription_id):
        s = self.subs[subscription_id]
        if s.current_store_count <= 0:
            return False
        self.subs[subscription_id] = replace(s, current_store_count=s.current_store_count - 1)
        return True

    def cancel(self, *, subscription_id, cancelled_at, reason):
        self.subs[subscription_id] = replace(
            self.subs[subscription_id],
            status=SubscriptionStatus.CANCELLED,
            cancellation_date=cancelled_at,
            cancellation_reason=reason,
            auto_renewal=False,
        )
        return True


class FakeStaffRepo:
    def __init__(self):
        self._next_id = 1
        self.staff: dict[int, Staff] = {}

    def add(self, *, store_id, name, email, employee_id, role=StaffRole.PHARMACIST, **kwargs) -> Staff:
        values = dict(
            phone="9876543210",
            department=Department.PHARMACY,
            date_of_joining=date(2025, 1, 1),
            salary=18000.0,
            working_hours=WorkingHours.FULL_TIME,
        )
        values.update(kwargs)
        member = Staff(
            staff_id=self._next_id,
            store_id=store_id,
            name=name,
            email=email,
            employee_id=employee_id,
            role=role,
            **values,
        )
        self.staff[member.staff_id] = member
        self._next_id += 1
        return member

    def get_in_store(self, staff_id, store_id):
        m = self.staff.get(int(staff_id))
        return m if m and m.store_id == store_id else None

    def find_in_store(self, store_id, *, email=None, user_account_id=None):
        for m in sorted(self.staff.values(), key=lambda m: m.staff_id):
            if m.store_id != store_id:
                continue
            if (user_account_id is not None and m.user_account_id == user_account_id) or (
                email and m.email == email.lower()
            ):
                return m
        return None

    def list_in_store(
        self,
        store_id,
        *,
        status=None,
        role=None,
        department=None,
        search=None,
        staff_ids: Optional[Iterable[int]] = None,
        offset=0,
        limit=None,
    ):
        rows = [m for m in self.staff.values() if m.store_id == store_id]
        if status is not None:
            rows = [m for m in rows if m.status == status]
        if role:
            rows = [m for m in rows if m.role.value == role]
        if department:
            rows = [m for m in rows if m.department.value == department]
        if search:
            q = search.lower()
            rows = [
                m
                for m in rows
                if q in m.name.lower() or q in m.employee_id.lower() or q in m.email or q in m.phone or q in m.role.value
            ]
        if staff_ids is not None:
            ids = {int(i) for i in staff_ids}
            rows = [m for m in rows if m.staff_id in ids]
        rows.sort(key=lambda m: (m.role != StaffRole.STORE_MANAGER, m.role.value, m.name))
        total = len(rows)
        if limit is not None:
            rows = rows[offset : offset + limit]
        return rows, total

    def list_employee_ids(self, store_id, prefix):
        return [m.employee_id for m in self.staff.values() if m.store_id == store_id and m.employee_id.startswith(prefix)]

    def employee_id_exists(self, store_id, employee_id, *, exclude_staff_id=None):
        return any(
            m.store_id == store_id and m.employee_id == employee_id and m.staff_id != exclude_staff_id
            for m in self.staff.values()
        )

    def email_exists(self, email, *, exclude_staff_id=None):
        return any(m.email == email.lower() and m.staff_id != exclude_staff_id for m in self.staff.values())

    def create(self, *, store_id, fields, created_by):
        member = Staff(staff_id=self._next_id, store_id=store_id, created_by=created_by, **fields)
        self.staff[member.staff_id] = member
        self._next_id += 1
        return member.staff_id

    def update(self, staff_id, *, fields, updated_by):
        self.staff[staff_id] = replace(self.staff[staff_id], updated_by=updated_by, **fields)
        return True

    def set_status(self, staff_id, *, status, updated_by):
        self.staff[staff_id] = replace(self.staff[staff_id], status=status, updated_by=updated_by)
        return True

    def link_user_account(self, staff_id, user_id):
        self.staff[staff_id] = replace(self.staff[staff_id], user_account_id=user_id)
        return True


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[tuple[int, date], AttendanceRecord] = {}

    def get_for_staff_and_date(self, staff_id, work_date):
        return self.records.get((staff_id, work_date))

    def save(self, record):
        existing = self.records.get((record.staff_id, record.work_date))
        attendance_id = existing.attendance_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.records[(record.staff_id, record.work_date)] = replace(record, attendance_id=attendance_id)
        return attendance_id

    def list_for_store(self, store_id, *, start, end, status=None, staff_id=None):
        rows = [
            r
            for r in self.records.values()
            if r.store_id == store_id
            and start <= r.work_date <= end
            and (status is None or r.status == status)
            and (staff_id is None or r.staff_id == staff_id)
        ]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def count_for_store(self, store_id, *, start, end):
        return len(self.list_for_store(store_id, start=start, end=end))


class FakeSalaryConfigsRepo:
    def __init__(self):
        self._next_id = 1
        self.configs: dict[int, SalaryConfig] = {}
        self.fail = False

    def get_for_staff(self, staff_id):
        return self.configs.get(staff_id)

    def list_for_store(self, store_id, *, status: Optional[ConfigStatus] = None):
        return [c for c in self.configs.values() if c.store_id == store_id and (status is None or c.status == status)]

    def save(self, config, *, actor_id):
        if self.fail:
            raise RuntimeError("database unavailable")
        existing = self.configs.get(config.staff_id)
        config_id = existing.config_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.configs[config.staff_id] = replace(config, config_id=config_id)
        return config_id


class FakeSalariesRepo:
    def __init__(self):
        self._next_id = 1
        self.salaries: dict[int, StaffSalary] = {}

    def get_in_store(self, salary_id, store_id):
        s = self.salaries.get(int(salary_id))
        return s if s and s.store_id == store_id else None

    def exists_for_period(self, staff_id, *, month, year):
        return any(s.staff_id == staff_id and s.month == month and s.year == year for s in self.salaries.values())

    def list_for_store_period(self, store_id, *, month, year):
        return [s for s in self.salaries.values() if s.store_id == store_id and s.month == month and s.year == year]

    def list_for_owner_period(self, store_owner_id, *, month, year):
        return [
            s for s in self.salaries.values() if s.store_owner_id == store_owner_id and s.month == month and s.year == year
        ]

    def create(self, salary):
        s = replace(salary.with_totals(), salary_id=self._next_id)
        self.salaries[s.salary_id] = s
        self._next_id += 1
        return s.salary_id

    def update_workflow(self, salary):
        if salary.salary_id not in self.salaries:
            return False
        self.salaries[salary.salary_id] = salary
        return True


def fake_repos() -> dict:
    return {
        "users_repo": FakeUsersRepo(),
        "stores_repo": FakeStoresRepo(),
        "subscriptions_repo": FakeSubscriptionsRepo(),
        "staff_repo": FakeStaffRepo(),
        "attendance_repo": FakeAttendanceRepo(),
        "salary_configs_repo": FakeSalaryConfigsRepo(),
        "salaries_repo": FakeSalariesRepo(),
    }


def make_store(stores: FakeStoresRepo, *, owner_id: int, code: str = "ST0001", **kwargs) -> Store:
    fields = dict(
        name="City Pharmacy",
        code=code,
        phone="9876543210",
        street="MG Road",
        city="Bengaluru",
        state="Karnataka",
        pincode="560001",
        license_number=f"DL-{code}",
    )
    fields.update(kwargs)
    return stores.get_by_id(stores.create(owner_id=owner_id, fields=fields))



def bearer(container, user) -> dict:
    return {"Authorization": f"Bearer {container.auth_service.issue_token(user)}"}
