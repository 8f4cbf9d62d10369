from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import BillingDuration, Plan, SubscriptionStatus


@dataclass(frozen=True)
class Subscription:
    """Domain entity: a store owner's billing plan."""

    subscription_id: int
    store_owner_id: int
    plan: Plan
    status: SubscriptionStatus
    billing_duration: BillingDuration
    start_date: datetime
    end_date: datetime
    store_count_limit: int
    current_store_count: int = 0
    trial_end_date: Optional[datetime] = None
    features: dict = field(default_factory=dict)
    limits: dict = field(default_factory=dict)
    pricing: dict = field(default_factory=dict)
    payment_status: str = "pending"
    auto_renewal: bool = True
    cancellation_date: Optional[datetime] = None
    cancellation_reason: Optional[str] = None

    def is_active(self, now: datetime) -> bool:
        if self.status == SubscriptionStatus.ACTIVE:
            return True
        return self.status == SubscriptionStatus.TRIAL and self.end_date is not None and self.end_date > now

    def is_expired(self, now: datetime) -> bool:
        return self.end_date is not None and now > self.end_date

    @property
    def can_create_more_stores(self) -> bool:
        return self.current_store_count < self.store_count_limit

    @property
    def remaining_store_slots(self) -> int:
        return max(0, self.store_count_limit - self.current_store_count)

    def remaining_days(self, now: datetime) -> int:
        if not self.end_date:
            return 0
        return math.ceil((self.end_date - now).total_seconds() / 86400)

    def can_create_store(self, now: datetime) -> bool:
        return self.is_active(now) and self.can_create_more_stores

    def has_feature(self, flag: str) -> bool:
        return bool(self.features.get(flag, False))
