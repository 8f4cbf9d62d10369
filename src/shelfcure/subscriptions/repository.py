from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import BillingDuration, Plan, SubscriptionStatus
from .model import Subscription


class SubscriptionRepository(Protocol):
    def get_for_owner(self, store_owner_id: int) -> Optional[Subscription]:
        raise NotImplementedError

    def create(
        self,
        *,
        store_owner_id: int,
        plan: Plan,
        status: SubscriptionStatus,
        billing_duration: BillingDuration,
        start_date: datetime,
        end_date: datetime,
        trial_end_date: Optional[datetime],
        store_count_limit: int,
        features: dict,
        limits: dict,
        pricing: dict,
    ) -> int:
        raise NotImplementedError

    def change_plan(
        self,
        *,
        subscription_id: int,
        plan: Plan,
        status: SubscriptionStatus,
        billing_duration: BillingDuration,
        start_date: datetime,
        end_date: datetime,
        store_count_limit: int,
        features: dict,
        limits: dict,
        pricing: dict,
    ) -> bool:
        raise NotImplementedError

    def increment_store_count(self, subscription_id: int) -> bool:
        """Increment only while below the limit. Returns False when the limit is reached."""

        raise NotImplementedError

    def decrement_store_count(self, subscription_id: int) -> bool:
        """Decrement only while above zero."""

        raise NotImplementedError

    def cancel(self, *, subscription_id: int, cancelled_at: datetime, reason: Optional[str]) -> bool:
        raise NotImplementedError
