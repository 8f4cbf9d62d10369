from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import require_choice
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import Department, Role, StaffRole, StaffStatus, WorkingHours
from ..core.exceptions import DuplicateError, NotFoundError
from ..payroll.defaults import default_for_role
from ..payroll.model import SalaryConfig
from ..payroll.repository import SalaryConfigRepository
from ..users.model import User
from ..users.repository import UserRepository
from .employee_ids import claim_employee_id, next_employee_id
from .model import STAFF_PERMISSIONS, Staff
from .payload import parse_staff_payload
from .repository import StaffRepository

logger = logging.getLogger(__name__)


def resolve_status_filter(raw: Optional[str]) -> Optional[StaffStatus]:
    """Missing status means active staff only; ``all`` disables the filter."""

    if raw is None or raw == "":
        return StaffStatus.ACTIVE
    if raw == "all":
        return None
    return require_choice(raw, StaffStatus, "Status")


def _digits_phone(phone: Optional[str]) -> str:
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    return digits[-10:] if len(digits) >= 10 else "0000000000"


class StaffService:
    """Use case: store managers maintain the staff roster of their store."""

    def __init__(
        self,
        staff: StaffRepository,
        users: UserRepository,
        configs: SalaryConfigRepository,
        *,
        default_password: str,
    ):
        self._staff = staff
        self._users = users
        self._configs = configs
        self._default_password = default_password

    def get_staff(self, store_id: int, staff_id: int) -> Staff:
        member = self._staff.get_in_store(staff_id, store_id)
        if not member:
            raise NotFoundError("Staff member not found")
        return member

    def list_staff(
        self,
        store_id: int,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        search: Optional[str] = None,
        role: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
    ) -> tuple[Sequence[Staff], int]:
        return self._staff.list_in_store(
            store_id,
            status=resolve_status_filter(status),
            role=role,
            department=department,
            search=search,
            offset=(page - 1) * limit,
            limit=limit,
        )

    def ensure_manager_record(self, store_id: int, manager: User) -> None:
        """Make sure the signed-in store manager appears in the store's roster.

        Failures are logged only; listing staff must keep working.
        """

        try:
            existing = self._staff.find_in_store(store_id, email=manager.email, user_account_id=manager.user_id)
            if existing:
                if existing.user_account_id is None:
                    self._staff.link_user_account(existing.staff_id, manager.user_id)
                if existing.role != StaffRole.STORE_MANAGER and manager.role == Role.STORE_MANAGER:
                    self._staff.update(existing.staff_id, fields={"role": StaffRole.STORE_MANAGER}, updated_by=manager.user_id)
                return

            staff_id = self._staff.create(
                store_id=store_id,
                fields={
                    "name": manager.name,
                    "email": manager.email,
                    "phone": _digits_phone(manager.phone),
                    "employee_id": next_employee_id(self._staff, store_id, StaffRole.STORE_MANAGER.value),
                    "role": StaffRole.STORE_MANAGER,
                    "department": Department.ADMINISTRATION,
                    "date_of_joining": date.today(),
                    "salary": 0,
                    "working_hours": WorkingHours.FULL_TIME,
                    "status": StaffStatus.ACTIVE,
                    "has_system_access": True,
                    "permissions": STAFF_PERMISSIONS,
                },
                created_by=manager.user_id,
            )
            self._staff.link_user_account(staff_id, manager.user_id)
            logger.info("Added store manager %s to staff of store %s", manager.email, store_id)
        except Exception:
            logger.exception("Could not ensure store manager %s is in staff of store %s", manager.email, store_id)

    def create_staff(self, store_id: int, actor_id: int, data: dict) -> Staff:
        fields = parse_staff_payload(data)

        requested = (data.get("employeeId") or "").strip()
        if requested:
            fields["employee_id"] = claim_employee_id(self._staff, store_id, requested)
        else:
            fields["employee_id"] = next_employee_id(self._staff, store_id, fields["role"].value)

        if self._staff.email_exists(fields["email"]):
            raise DuplicateError(
                "A staff member with this email address already exists in the system.",
                field="email",
                value=fields["email"],
            )

        staff_id = self._staff.create(store_id=store_id, fields=fields, created_by=actor_id)
        member = self._staff.get_in_store(staff_id, store_id)
        logger.info("Created staff %s (%s) in store %s", member.name, member.employee_id, store_id)

        if member.has_system_access:
            self._provision_user_account(member, password=data.get("password"))
        self._provision_salary_config(member, actor_id)

        return self._staff.get_in_store(staff_id, store_id)

    def _provision_user_account(self, member: Staff, *, password: Optional[str]) -> None:
        try:
            user = self._users.get_by_email(member.email)
            if user is None:
                role = Role.STORE_MANAGER if member.role == StaffRole.STORE_MANAGER else Role.STAFF
                user_id = self._users.create_user(
                    name=member.name,
                    email=member.email,
                    phone=member.phone,
                    password_hash=generate_password_hash(password or self._default_password),
                    role=role,
                )
                self._users.add_store(user_id, member.store_id)
                self._users.set_current_store(user_id, member.store_id)
            else:
                user_id = user.user_id
            self._staff.link_user_account(member.staff_id, user_id)
        except Exception:
            logger.exception("Failed to create/link user account for %s", member.name)

    def _provision_salary_config(self, member: Staff, actor_id: int) -> None:
        try:
            defaults = default_for_role(member.role)
            self._configs.save(
                SalaryConfig(
                    config_id=0,
                    staff_id=member.staff_id,
                    store_id=member.store_id,
                    base_salary=defaults.base_salary,
                    allowances=defaults.allowance_rules(),
                    effective_from=date.today(),
                ),
                actor_id=actor_id,
            )
        except Exception:
            logger.exception("Failed to create salary config for %s", member.name)

    def update_staff(self, store_id: int, staff_id: int, actor_id: int, data: dict) -> Staff:
        member = self.get_staff(store_id, staff_id)
        fields = parse_staff_payload(data, partial=True)

        requested = (data.get("employeeId") or "").strip()
        if requested and requested.upper() != member.employee_id:
            fields["employee_id"] = claim_employee_id(self._staff, store_id, requested, exclude_staff_id=member.staff_id)
        if "email" in fields and self._staff.email_exists(fields["email"], exclude_staff_id=member.staff_id):
            raise DuplicateError(
                "A staff member with this email address already exists in the system.",
                field="email",
                value=fields["email"],
            )

        if fields:
            self._staff.update(member.staff_id, fields=fields, updated_by=actor_id)
        return self.get_staff(store_id, staff_id)

    def deactivate_staff(self, store_id: int, staff_id: int, actor_id: int) -> None:
        member = self.get_staff(store_id, staff_id)
        self._staff.set_status(member.staff_id, status=StaffStatus.INACTIVE, updated_by=actor_id)

    def stats(self, store_id: int) -> dict:
        members, _ = self._staff.list_in_store(store_id)
        statuses = Counter(m.status for m in members)
        salaries = [m.salary for m in members]
        roles = Counter(m.role.value for m in members if m.status == StaffStatus.ACTIVE)
        return {
            "totalStaff": len(members),
            "activeStaff": statuses[StaffStatus.ACTIVE],
            "inactiveStaff": statuses[StaffStatus.INACTIVE],
            "onLeaveStaff": statuses[StaffStatus.ON_LEAVE],
            "terminatedStaff": statuses[StaffStatus.TERMINATED],
            "averageSalary": round(sum(salaries) / len(salaries), 2) if salaries else 0,
            "totalSalaryExpense": round(sum(salaries), 2),
            "roleDistribution": [{"role": role, "count": count} for role, count in sorted(roles.items())],
        }
