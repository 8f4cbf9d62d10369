from __future__ import annotations

from dataclasses import dataclass, field

from .model import AllowanceRule, default_allowance_rules


@dataclass(frozen=True)
class RoleSalaryDefault:
    base_salary: float
    allowances: dict = field(default_factory=dict)

    def allowance_rules(self) -> dict[str, AllowanceRule]:
        rules = default_allowance_rules()
        rules.update(self.allowances)
        return rules


ROLE_DEFAULTS: dict[str, RoleSalaryDefault] = {
    "store_manager": RoleSalaryDefault(
        25000,
        {
            "hra": AllowanceRule(enabled=True, type="percentage", percentage=40),
            "transport": AllowanceRule(enabled=True, amount=2000),
        },
    ),
    "pharmacist": RoleSalaryDefault(
        18000,
        {
            "hra": AllowanceRule(enabled=True, type="percentage", percentage=30),
            "transport": AllowanceRule(enabled=True, amount=1500),
        },
    ),
    "cashier": RoleSalaryDefault(10000, {"transport": AllowanceRule(enabled=True, amount=800)}),
}

FALLBACK_DEFAULT = RoleSalaryDefault(12000, {"transport": AllowanceRule(enabled=True, amount=1000)})


def default_for_role(role) -> RoleSalaryDefault:
    key = getattr(role, "value", role)
    return ROLE_DEFAULTS.get(str(key or ""), FALLBACK_DEFAULT)
