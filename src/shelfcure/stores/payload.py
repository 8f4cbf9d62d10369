"""Request body -> Store fields, with the field rules of a store record."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

from ..common.validators import (
    EMAIL_RE,
    GST_RE,
    PINCODE_RE,
    STORE_PHONE_RE,
    FieldErrors,
    require_max_length,
    require_non_empty,
    require_number,
    require_pattern,
)
from ..core.exceptions import ValidationError
from .model import WEEKDAYS, default_operating_hours, default_store_settings

CODE_RE = re.compile(r"^[A-Z0-9]{1,10}$")
HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _section(data: dict, name: str) -> dict:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _pick(data: dict, section: str, key: str, flat_key: Optional[str] = None) -> Any:
    """Read ``data[section][key]``, falling back to a flat ``data[flat_key]``."""

    sec = _section(data, section)
    if key in sec:
        return sec[key]
    return data.get(flat_key or key)


def _has(data: dict, section: str, key: str, flat_key: Optional[str] = None) -> bool:
    return key in _section(data, section) or (flat_key or key) in data


def _establishment_year(value: Any, today: date) -> Optional[int]:
    if value in (None, ""):
        return None
    year = require_number(value, "Establishment year", minimum=1900, maximum=today.year)
    return int(year)


def _settings(value: Any, current: Optional[dict]) -> dict:
    if not isinstance(value, dict):
        raise ValidationError("Settings must be an object")
    merged = dict(current or default_store_settings())
    merged.update(value)
    require_number(merged.get("defaultTaxRate", 0), "Tax rate", minimum=0, maximum=100)
    require_number(merged.get("lowStockThreshold", 0), "Low stock threshold", minimum=0)
    require_number(merged.get("expiryAlertDays", 1), "Expiry alert days", minimum=1)
    return merged


def _operating_hours(value: Any, current: Optional[dict]) -> dict:
    if not isinstance(value, dict):
        raise ValidationError("Operating hours must be an object")
    merged = dict(current or default_operating_hours())
    for day, hours in value.items():
        if day not in WEEKDAYS or not isinstance(hours, dict):
            raise ValidationError(f"Invalid operating hours entry: {day}")
        entry = {
            "open": str(hours.get("open") or ""),
            "close": str(hours.get("close") or ""),
            "closed": bool(hours.get("closed", False)),
        }
        if not entry["closed"]:
            for key in ("open", "close"):
                if not HHMM_RE.match(entry[key]):
                    raise ValidationError(f"Invalid {key} time for {day} (expected HH:MM)")
        merged[day] = entry
    return merged


def parse_store_payload(data: dict, *, today: date, partial: bool = False, current=None) -> dict:
    """Validate a create (``partial=False``) or update body.

    Accepts the nested shape (``contact``, ``address``, ``business``) as well as flat keys.
    """

    errors = FieldErrors()
    fields: dict = {}

    def want(section: str, key: str, flat_key: Optional[str] = None) -> bool:
        return not partial or _has(data, section, key, flat_key)

    if want("", "name"):
        name = errors.check(require_non_empty, data.get("name"), "Store name")
        if name:
            fields["name"] = errors.check(require_max_length, name, "Store name", 100)
    if "code" in data and data.get("code"):
        code = str(data["code"]).strip().upper()
        if not CODE_RE.match(code):
            errors.messages.append("Store code must be 1-10 letters or digits")
        else:
            fields["code"] = code
    if "description" in data:
        desc = (data.get("description") or "").strip() or None
        if desc:
            errors.check(require_max_length, desc, "Description", 500)
        fields["description"] = desc

    if want("contact", "phone"):
        fields["phone"] = errors.check(require_pattern, _pick(data, "contact", "phone"), "phone number", STORE_PHONE_RE)
    if _has(data, "contact", "email"):
        email = (_pick(data, "contact", "email") or "").strip().lower()
        fields["email"] = errors.check(require_pattern, email, "email", EMAIL_RE) if email else None

    for key, label in (("street", "Street address"), ("city", "City"), ("state", "State")):
        if want("address", key):
            fields[key] = errors.check(require_non_empty, _pick(data, "address", key), label)
    if _has(data, "address", "country"):
        fields["country"] = (_pick(data, "address", "country") or "").strip() or "India"
    if want("address", "pincode"):
        fields["pincode"] = errors.check(require_pattern, str(_pick(data, "address", "pincode") or ""), "6-digit pincode", PINCODE_RE)

    if want("business", "licenseNumber"):
        fields["license_number"] = errors.check(require_non_empty, _pick(data, "business", "licenseNumber"), "License number")
    if _has(data, "business", "gstNumber"):
        gst = (_pick(data, "business", "gstNumber") or "").strip().upper()
        fields["gst_number"] = errors.check(require_pattern, gst, "GST number", GST_RE) if gst else None
    if _has(data, "business", "drugLicenseNumber"):
        fields["drug_license_number"] = (_pick(data, "business", "drugLicenseNumber") or "").strip() or None
    if _has(data, "business", "establishmentYear"):
        fields["establishment_year"] = errors.check(_establishment_year, _pick(data, "business", "establishmentYear"), today)

    if "settings" in data:
        fields["settings"] = errors.check(_settings, data["settings"], getattr(current, "settings", None))
    elif not partial:
        fields["settings"] = default_store_settings()
    if "operatingHours" in data:
        fields["operating_hours"] = errors.check(_operating_hours, data["operatingHours"], getattr(current, "operating_hours", None))
    elif not partial:
        fields["operating_hours"] = default_operating_hours()

    errors.raise_if_any()
    return fields
