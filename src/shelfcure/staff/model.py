from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import Department, StaffRole, StaffStatus, WorkingHours

STAFF_PERMISSIONS = (
    "inventory_read",
    "inventory_write",
    "sales_read",
    "sales_write",
    "reports_read",
    "customer_management",
)


@dataclass(frozen=True)
class Staff:
    """Domain entity: an employee of one store (distinct from a login ``User``)."""

    staff_id: int
    store_id: int
    name: str
    email: str
    phone: str
    employee_id: str
    role: StaffRole
    department: Department
    date_of_joining: date
    salary: float
    working_hours: WorkingHours
    status: StaffStatus = StaffStatus.ACTIVE
    has_system_access: bool = False
    user_account_id: Optional[int] = None
    address: Optional[dict] = None
    date_of_birth: Optional[date] = None
    emergency_contact: Optional[dict] = None
    permissions: tuple[str, ...] = field(default_factory=tuple)
    performance_rating: int = 3
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == StaffStatus.ACTIVE
