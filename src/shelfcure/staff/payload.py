"""Request body -> Staff fields."""

from __future__ import annotations

from typing import Any

from ..common.datetime_utils import parse_iso_date
from ..common.validators import (
    EMAIL_RE,
    PINCODE_RE,
    STAFF_PHONE_RE,
    FieldErrors,
    require_choice,
    require_max_length,
    require_non_empty,
    require_number,
    require_pattern,
)
from ..core.enums import Department, StaffRole, StaffStatus, WorkingHours
from ..core.exceptions import ValidationError
from .model import STAFF_PERMISSIONS

# body key -> Staff attribute
_KEYS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "role": "role",
    "department": "department",
    "dateOfJoining": "date_of_joining",
    "salary": "salary",
    "workingHours": "working_hours",
    "status": "status",
    "hasSystemAccess": "has_system_access",
    "address": "address",
    "dateOfBirth": "date_of_birth",
    "emergencyContact": "emergency_contact",
    "permissions": "permissions",
    "performanceRating": "performance_rating",
}
REQUIRED = ("name", "email", "phone", "role", "department", "dateOfJoining", "salary", "workingHours")


def _name(value: Any) -> str:
    return require_max_length(require_non_empty(value, "Staff name"), "Name", 100)


def _address(value: Any) -> dict:
    if not isinstance(value, dict):
        raise ValidationError("Address must be an object")
    address = {k: (str(value.get(k) or "").strip()) for k in ("street", "city", "state", "pincode")}
    if address["pincode"]:
        require_pattern(address["pincode"], "6-digit pincode", PINCODE_RE)
    return address


def _emergency_contact(value: Any) -> dict:
    if not isinstance(value, dict):
        raise ValidationError("Emergency contact must be an object")
    contact = {k: (str(value.get(k) or "").strip()) for k in ("name", "relationship", "phone")}
    if contact["phone"]:
        require_pattern(contact["phone"], "10-digit phone number", STAFF_PHONE_RE)
    return contact


def _permissions(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Permissions must be a list")
    unknown = [p for p in value if p not in STAFF_PERMISSIONS]
    if unknown:
        raise ValidationError(f"Unknown permissions: {', '.join(map(str, unknown))}")
    return tuple(value)


def _rating(value: Any) -> int:
    return int(require_number(value, "Performance rating", minimum=1, maximum=5))


_PARSERS = {
    "name": _name,
    "email": lambda v: require_pattern(str(v or "").strip().lower(), "email", EMAIL_RE),
    "phone": lambda v: require_pattern(str(v or ""), "10-digit phone number", STAFF_PHONE_RE),
    "role": lambda v: require_choice(v, StaffRole, "Role"),
    "department": lambda v: require_choice(v, Department, "Department"),
    "dateOfJoining": lambda v: parse_iso_date(require_non_empty(v, "Date of joining")),
    "salary": lambda v: require_number(v, "Salary", minimum=0),
    "workingHours": lambda v: require_choice(v, WorkingHours, "Working hours"),
    "status": lambda v: require_choice(v, StaffStatus, "Status"),
    "hasSystemAccess": bool,
    "address": _address,
    "dateOfBirth": lambda v: parse_iso_date(v) if v else None,
    "emergencyContact": _emergency_contact,
    "permissions": _permissions,
    "performanceRating": _rating,
}


def parse_staff_payload(data: dict, *, partial: bool = False) -> dict:
    errors = FieldErrors()
    fields: dict = {}

    if not partial:
        for key in REQUIRED:
            if data.get(key) in (None, ""):
                errors.messages.append(f"{key} is required")

    for key, attr in _KEYS.items():
        if key not in data or (not partial and key in REQUIRED and data.get(key) in (None, "")):
            continue
        value = errors.check(_PARSERS[key], data[key])
        if value is not None or key in ("dateOfBirth",):
            fields[attr] = value

    errors.raise_if_any()
    return fields
