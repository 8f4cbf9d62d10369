from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..attendance.model import summarize
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import EMAIL_RE, FieldErrors, require_choice, require_non_empty, require_pattern
from ..core.constants import DEFAULT_STORE_PAGE_SIZE
from ..core.enums import PaymentStatus, Role, StaffStatus
from ..core.exceptions import AuthorizationError, DomainError, DuplicateError, NotFoundError, ValidationError
from ..payroll.repository import StaffSalaryRepository
from ..staff.repository import StaffRepository
from ..subscriptions.service import SubscriptionService
from ..users.model import User
from ..users.repository import UserRepository
from .model import Store
from .payload import parse_store_payload
from .repository import StoreRepository

logger = logging.getLogger(__name__)

STORE_CODE_PREFIX = "ST"
STORE_CODE_DIGITS = 4
STORE_CODE_MAX_ATTEMPTS = 10
STORE_USER_ROLES = (Role.STORE_MANAGER, Role.STAFF, Role.CASHIER)


@dataclass(frozen=True)
class StoreOverview:
    """A store plus the counters shown in the owner's store list."""

    store: Store
    staff_count: int
    attendance_rate: int


class StoreService:
    """Use case: store owners manage their stores; store managers get their store context."""

    def __init__(
        self,
        stores: StoreRepository,
        subscriptions: SubscriptionService,
        users: UserRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        salaries: StaffSalaryRepository,
        *,
        default_password: str,
    ):
        self._stores = stores
        self._subscriptions = subscriptions
        self._users = users
        self._staff = staff
        self._attendance = attendance
        self._salaries = salaries
        self._default_password = default_password

    def _owned(self, owner_id: int, store_id: int) -> Store:
        store = self._stores.get_for_owner(store_id, owner_id)
        if not store:
            raise NotFoundError("Store not found")
        return store

    def generate_code(self) -> str:
        pattern = re.compile(rf"^{STORE_CODE_PREFIX}(\d+)$")
        numbers = [int(m.group(1)) for m in (pattern.match(c) for c in self._stores.list_codes_with_prefix(STORE_CODE_PREFIX)) if m]
        number = max(numbers) + 1 if numbers else 1
        for _ in range(STORE_CODE_MAX_ATTEMPTS):
            code = f"{STORE_CODE_PREFIX}{number:0{STORE_CODE_DIGITS}d}"
            if not self._stores.code_exists(code):
                return code
            number += 1
        raise DomainError("Unable to generate a unique store code")

    def create_store(self, owner_id: int, data: dict, *, now: datetime | None = None) -> Store:
        now = now or now_local()
        fields = parse_store_payload(data, today=now.date())
        if "code" in fields:
            if self._stores.code_exists(fields["code"]):
                raise DuplicateError("Store code already exists", field="code", value=fields["code"])
        else:
            fields["code"] = self.generate_code()

        self._subscriptions.reserve_store_slot(owner_id, now=now)
        try:
            store_id = self._stores.create(owner_id=owner_id, fields=fields)
        except Exception:
            self._subscriptions.release_store_slot(owner_id)
            raise

        logger.info("Owner %s created store %s (%s)", owner_id, store_id, fields["code"])
        return self._stores.get_by_id(store_id)

    def _staff_count(self, store_id: int) -> int:
        _, total = self._staff.list_in_store(store_id, status=StaffStatus.ACTIVE, limit=1)
        return total

    def _month_records(self, store_id: int, now: datetime):
        start, end = month_bounds(now.year, now.month)
        return self._attendance.list_for_store(store_id, start=start, end=end)

    def list_stores(
        self,
        owner_id: int,
        *,
        page: int = 1,
        limit: int = DEFAULT_STORE_PAGE_SIZE,
        search: Optional[str] = None,
        status: Optional[str] = None,
        now: datetime | None = None,
    ) -> tuple[Sequence[StoreOverview], int]:
        now = now or now_local()
        is_active = None if status is None else status == "active"
        stores, total = self._stores.list_for_owner(
            owner_id,
            search=search,
            is_active=is_active,
            offset=(page - 1) * limit,
            limit=limit,
        )

        overviews = []
        for store in stores:
            summary = summarize(self._month_records(store.store_id, now))
            rate = round(summary.present / summary.total_days * 100) if summary.total_days else 0
            overviews.append(
                StoreOverview(store=store, staff_count=self._staff_count(store.store_id), attendance_rate=rate)
            )
        return overviews, total

    def get_store(self, owner_id: int, store_id: int, *, now: datetime | None = None) -> tuple[Store, dict]:
        now = now or now_local()
        store = self._owned(owner_id, store_id)

        summary = summarize(self._month_records(store.store_id, now))
        salaries = self._salaries.list_for_store_period(store.store_id, month=now.month, year=now.year)
        statistics = {
            "staffCount": self._staff_count(store.store_id),
            "attendance": {
                "totalRecords": summary.total_days,
                "present": summary.present,
                "absent": summary.absent,
                "late": summary.late,
                "halfDay": summary.half_day,
                "onLeave": summary.leave,
                "attendancePercentage": summary.attendance_percentage,
            },
            "salary": {
                "totalSalaries": round(sum(s.net_salary for s in salaries), 2),
                "paidSalaries": round(sum(s.net_salary for s in salaries if s.payment_status == PaymentStatus.PAID), 2),
                "pendingSalaries": round(sum(s.net_salary for s in salaries if s.payment_status == PaymentStatus.PENDING), 2),
            },
        }
        return store, statistics

    def update_store(self, owner_id: int, store_id: int, data: dict, *, now: datetime | None = None) -> Store:
        now = now or now_local()
        store = self._owned(owner_id, store_id)
        fields = parse_store_payload(data, today=now.date(), partial=True, current=store)
        if "code" in fields and fields["code"] != store.code and self._stores.code_exists(fields["code"]):
            raise DuplicateError("Store code already exists", field="code", value=fields["code"])

        if fields:
            self._stores.update(store.store_id, fields=fields, updated_by=owner_id)
        return self._stores.get_by_id(store.store_id)

    def delete_store(self, owner_id: int, store_id: int) -> None:
        """Soft delete: deactivate and give the subscription slot back."""

        store = self._owned(owner_id, store_id)
        if not store.is_active:
            return
        self._stores.set_active(store.store_id, is_active=False, updated_by=owner_id)
        self._subscriptions.release_store_slot(owner_id)
        logger.info("Owner %s deactivated store %s", owner_id, store.store_id)

    def create_store_user(self, owner_id: int, store_id: int, data: dict) -> User:
        """Create a login for a manager/staff/cashier of one of the owner's stores."""

        store = self._owned(owner_id, store_id)

        errors = FieldErrors()
        name = errors.check(require_non_empty, data.get("name"), "Name")
        email = errors.check(require_pattern, (data.get("email") or "").strip().lower(), "email", EMAIL_RE)
        role = errors.check(require_choice, data.get("role") or Role.STAFF.value, Role, "Role")
        errors.raise_if_any()
        if role not in STORE_USER_ROLES:
            raise ValidationError("Invalid role specified")
        if self._users.get_by_email(email):
            raise DuplicateError("User with this email already exists", field="email", value=email)

        user_id = self._users.create_user(
            name=name,
            email=email,
            phone=(data.get("phone") or "").strip() or None,
            password_hash=generate_password_hash(data.get("password") or self._default_password),
            role=role,
        )
        self._users.add_store(user_id, store.store_id)
        self._users.set_current_store(user_id, store.store_id)
        logger.info("Owner %s added %s %s to store %s", owner_id, role.value, email, store.store_id)
        return self._users.get_by_id(user_id)

    def resolve_manager_store(self, user: User) -> Store:
        """The active store a store manager works in (current store first)."""

        candidates = list(user.store_ids)
        if user.current_store_id and user.current_store_id in candidates:
            candidates.remove(user.current_store_id)
            candidates.insert(0, user.current_store_id)

        by_id = {s.store_id: s for s in self._stores.list_by_ids(candidates)}
        for store_id in candidates:
            store = by_id.get(store_id)
            if store and store.is_active:
                return store
        raise AuthorizationError("Access denied. No active store assignment found.")
