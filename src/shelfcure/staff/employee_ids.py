"""Employee ID generation: role prefix + zero padded sequence, unique per store."""

from __future__ import annotations

import re
from typing import Optional

from ..core.constants import EMPLOYEE_ID_DIGITS, EMPLOYEE_ID_MAX_ATTEMPTS
from ..core.exceptions import DomainError, DuplicateError
from .repository import StaffRepository

ROLE_PREFIX = {
    "pharmacist": "PH",
    "assistant": "AS",
    "cashier": "CA",
    "inventory_manager": "IM",
    "sales_executive": "SE",
    "supervisor": "SU",
    "store_manager": "MGR",
}
DEFAULT_PREFIX = "ST"


class EmployeeIdExhaustedError(DomainError):
    """Raised when no free employee ID was found within the probe limit."""


def prefix_for(role: Optional[str]) -> str:
    return ROLE_PREFIX.get(str(role or ""), DEFAULT_PREFIX)


def format_employee_id(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{EMPLOYEE_ID_DIGITS}d}"


def next_sequence(existing_ids, prefix: str) -> int:
    """1 + the highest numeric suffix among ids shaped ``<prefix><digits>``."""

    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    numbers = [int(m.group(1)) for m in (pattern.match(e or "") for e in existing_ids) if m]
    numbers = [n for n in numbers if n > 0]
    return max(numbers) + 1 if numbers else 1


def next_employee_id(staff: StaffRepository, store_id: int, role: Optional[str]) -> str:
    prefix = prefix_for(role)
    number = next_sequence(staff.list_employee_ids(store_id, prefix), prefix)

    for _ in range(EMPLOYEE_ID_MAX_ATTEMPTS):
        candidate = format_employee_id(prefix, number)
        if not staff.employee_id_exists(store_id, candidate):
            return candidate
        number += 1

    raise EmployeeIdExhaustedError("Unable to generate unique employee ID after multiple attempts")


def claim_employee_id(staff: StaffRepository, store_id: int, requested: str, *, exclude_staff_id: Optional[int] = None) -> str:
    """Normalize a caller supplied id and make sure the store does not use it yet."""

    employee_id = requested.strip().upper()
    if staff.employee_id_exists(store_id, employee_id, exclude_staff_id=exclude_staff_id):
        raise DuplicateError("Employee ID already exists in this store", field="employeeId", value=employee_id)
    return employee_id
