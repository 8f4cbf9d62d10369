from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import BillingDuration, Plan


@dataclass(frozen=True)
class PlanDefinition:
    store_count_limit: int
    features: dict = field(default_factory=dict)
    limits: dict = field(default_factory=dict)
    amount: float = 0.0
    currency: str = "INR"


def _features(*, multi_store: bool, whatsapp: bool, ocr: bool, reports: bool) -> dict:
    return {
        "multiStore": multi_store,
        "analytics": True,
        "whatsappIntegration": whatsapp,
        "billOCR": ocr,
        "customReports": reports,
        "inventoryManagement": True,
        "customerManagement": True,
        "staffManagement": True,
    }


def _limits(users: int, products: int, transactions: int, storage_gb: int) -> dict:
    return {
        "maxUsers": users,
        "maxProducts": products,
        "maxTransactions": transactions,
        "maxStorage": storage_gb,
    }


PLAN_CATALOG: dict[Plan, PlanDefinition] = {
    Plan.BASIC: PlanDefinition(
        store_count_limit=1,
        features=_features(multi_store=False, whatsapp=False, ocr=False, reports=False),
        limits=_limits(5, 1000, 1000, 1),
        amount=999,
    ),
    Plan.STANDARD: PlanDefinition(
        store_count_limit=3,
        features=_features(multi_store=True, whatsapp=True, ocr=False, reports=False),
        limits=_limits(15, 5000, 5000, 5),
        amount=1999,
    ),
    Plan.PREMIUM: PlanDefinition(
        store_count_limit=10,
        features=_features(multi_store=True, whatsapp=True, ocr=True, reports=True),
        limits=_limits(50, 25000, 25000, 25),
        amount=2999,
    ),
    Plan.ENTERPRISE: PlanDefinition(
        store_count_limit=999,
        features=_features(multi_store=True, whatsapp=True, ocr=True, reports=True),
        limits=_limits(999, 999999, 999999, 100),
        amount=4999,
    ),
}

BILLING_MONTHS: dict[BillingDuration, int] = {
    BillingDuration.MONTHLY: 1,
    BillingDuration.QUARTERLY: 3,
    BillingDuration.YEARLY: 12,
}

# Route-level feature names -> subscription feature flags.
FEATURE_FLAGS = {
    "staff": "staffManagement",
    "inventory": "inventoryManagement",
    "customers": "customerManagement",
    "analytics": "analytics",
    "reports": "customReports",
    "multi_store": "multiStore",
}


def plan_features(plan: Plan | str) -> PlanDefinition:
    """Catalog entry for a plan; unknown plans fall back to basic."""

    try:
        return PLAN_CATALOG[Plan(plan)]
    except ValueError:
        return PLAN_CATALOG[Plan.BASIC]
