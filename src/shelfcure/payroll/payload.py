"""Request body -> SalaryConfig."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import FieldErrors, require_choice, require_number
from ..core.enums import ConfigStatus, SalaryType
from .model import (
    SalaryConfig,
    allowances_from_json,
    deductions_from_json,
    overtime_from_json,
    standard_hours_from_json,
)


def _object(value, name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object")
    return value


def parse_salary_config(
    data: dict,
    *,
    staff_id: int,
    store_id: int,
    current: Optional[SalaryConfig] = None,
    today: Optional[date] = None,
) -> SalaryConfig:
    """Build the config to save; keys missing from ``data`` keep ``current`` values."""

    errors = FieldErrors()
    base = current or SalaryConfig(config_id=0, staff_id=staff_id, store_id=store_id, base_salary=0.0)
    changes: dict = {}

    if "baseSalary" in data or current is None:
        changes["base_salary"] = errors.check(require_number, data.get("baseSalary"), "Base salary", minimum=0)
    if data.get("salaryType"):
        changes["salary_type"] = errors.check(require_choice, data["salaryType"], SalaryType, "Salary type")
    if data.get("status"):
        changes["status"] = errors.check(require_choice, data["status"], ConfigStatus, "Status")
    if data.get("currency"):
        changes["currency"] = str(data["currency"]).strip().upper()
    if data.get("effectiveFrom"):
        changes["effective_from"] = errors.check(parse_iso_date, data["effectiveFrom"])
    if data.get("effectiveTo"):
        changes["effective_to"] = errors.check(parse_iso_date, data["effectiveTo"])

    for key, attr, parse in (
        ("standardHours", "standard_hours", standard_hours_from_json),
        ("overtime", "overtime", overtime_from_json),
        ("allowances", "allowances", allowances_from_json),
        ("deductions", "deductions", deductions_from_json),
    ):
        if key not in data:
            continue
        try:
            changes[attr] = parse(_object(data[key], key))
        except (TypeError, ValueError) as e:
            errors.messages.append(f"Invalid {key}: {e}")

    errors.raise_if_any()

    config = replace(base, staff_id=staff_id, store_id=store_id, **changes)
    if config.overtime.rate < 1:
        errors.messages.append("Overtime rate must be at least 1")
    if config.standard_hours.daily <= 0 or config.standard_hours.monthly <= 0:
        errors.messages.append("Standard hours must be positive")
    for name, rule in config.allowances.items():
        if rule.amount < 0 or rule.percentage < 0 or rule.percentage > 100:
            errors.messages.append(f"Invalid {name} allowance")
    rules = config.deductions
    for name, percentage in (("PF", rules.pf_percentage), ("ESI", rules.esi_percentage), ("TDS", rules.tds_percentage)):
        if percentage < 0 or percentage > 100:
            errors.messages.append(f"{name} percentage must be between 0 and 100")
    if rules.professional_tax_amount < 0:
        errors.messages.append("Professional tax cannot be negative")
    errors.raise_if_any()

    if config.effective_from is None:
        config = replace(config, effective_from=today or date.today())
    return config
