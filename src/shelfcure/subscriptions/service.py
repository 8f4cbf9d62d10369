from __future__ import annotations

import logging
from calendar import monthrange
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import BillingDuration, Plan, SubscriptionStatus
from ..core.exceptions import NotFoundError, SubscriptionError, ValidationError
from .model import Subscription
from .plans import BILLING_MONTHS, FEATURE_FLAGS, PLAN_CATALOG, plan_features
from .repository import SubscriptionRepository

logger = logging.getLogger(__name__)

TRIAL_DAYS = 14


def _add_months(start: datetime, months: int) -> datetime:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def plan_pricing(plan: Plan, billing_duration: BillingDuration) -> dict:
    definition = plan_features(plan)
    months = BILLING_MONTHS[billing_duration]
    return {
        "amount": round(definition.amount * months, 2),
        "monthlyAmount": definition.amount,
        "currency": definition.currency,
        "months": months,
    }


class SubscriptionService:
    def __init__(self, subscriptions: SubscriptionRepository):
        self._subscriptions = subscriptions

    def catalog(self) -> list[dict]:
        return [
            {
                "plan": plan.value,
                "storeCountLimit": d.store_count_limit,
                "features": dict(d.features),
                "limits": dict(d.limits),
                "pricing": {"amount": d.amount, "currency": d.currency},
            }
            for plan, d in PLAN_CATALOG.items()
        ]

    def find_for_owner(self, store_owner_id: int) -> Optional[Subscription]:
        return self._subscriptions.get_for_owner(store_owner_id)

    def get_for_owner(self, store_owner_id: int) -> Subscription:
        sub = self._subscriptions.get_for_owner(store_owner_id)
        if not sub:
            raise NotFoundError("No subscription found")
        return sub

    def subscribe(
        self,
        store_owner_id: int,
        *,
        plan: Plan,
        billing_duration: BillingDuration = BillingDuration.MONTHLY,
        trial: bool = False,
        now: datetime | None = None,
    ) -> Subscription:
        """Start a subscription, or move an existing one to another plan."""

        now = now or now_local()
        definition = plan_features(plan)
        pricing = plan_pricing(plan, billing_duration)
        if trial:
            status = SubscriptionStatus.TRIAL
            end_date = now + timedelta(days=TRIAL_DAYS)
        else:
            status = SubscriptionStatus.ACTIVE
            end_date = _add_months(now, BILLING_MONTHS[billing_duration])

        existing = self._subscriptions.get_for_owner(store_owner_id)
        if existing is None:
            self._subscriptions.create(
                store_owner_id=store_owner_id,
                plan=plan,
                status=status,
                billing_duration=billing_duration,
                start_date=now,
                end_date=end_date,
                trial_end_date=end_date if trial else None,
                store_count_limit=definition.store_count_limit,
                features=dict(definition.features),
                limits=dict(definition.limits),
                pricing=pricing,
            )
            logger.info("Owner %s subscribed to %s (%s)", store_owner_id, plan.value, status.value)
        else:
            if existing.current_store_count > definition.store_count_limit:
                raise ValidationError(
                    f"Cannot switch to {plan.value} plan: it allows {definition.store_count_limit} stores "
                    f"but you have {existing.current_store_count}"
                )
            self._subscriptions.change_plan(
                subscription_id=existing.subscription_id,
                plan=plan,
                status=status,
                billing_duration=billing_duration,
                start_date=now,
                end_date=end_date,
                store_count_limit=definition.store_count_limit,
                features=dict(definition.features),
                limits=dict(definition.limits),
                pricing=pricing,
            )
            logger.info("Owner %s moved from %s to %s", store_owner_id, existing.plan.value, plan.value)

        return self.get_for_owner(store_owner_id)

    def cancel(self, store_owner_id: int, *, reason: Optional[str] = None, now: datetime | None = None) -> Subscription:
        sub = self.get_for_owner(store_owner_id)
        if sub.status == SubscriptionStatus.CANCELLED:
            raise ValidationError("Subscription is already cancelled")
        self._subscriptions.cancel(subscription_id=sub.subscription_id, cancelled_at=now or now_local(), reason=reason)
        return self.get_for_owner(store_owner_id)

    def reserve_store_slot(self, store_owner_id: int, *, now: datetime | None = None) -> Subscription:
        """Check the owner may open another store and take one slot."""

        now = now or now_local()
        sub = self._subscriptions.get_for_owner(store_owner_id)
        if not sub or not sub.is_active(now):
            raise ValidationError("Active subscription required to create stores")
        if not sub.can_create_more_stores or not self._subscriptions.increment_store_count(sub.subscription_id):
            raise ValidationError(
                f"Store limit reached. Your {sub.plan.value} plan allows {sub.store_count_limit} store(s). "
                "Please upgrade your subscription."
            )
        return sub

    def release_store_slot(self, store_owner_id: int) -> None:
        sub = self._subscriptions.get_for_owner(store_owner_id)
        if sub:
            self._subscriptions.decrement_store_count(sub.subscription_id)

    def ensure_store_access(self, store_owner_id: int, *, now: datetime | None = None) -> Subscription:
        """Store-level routes need the owner's subscription active (or trialing) and not past its end date."""

        now = now or now_local()
        sub = self._subscriptions.get_for_owner(store_owner_id)
        if not sub:
            raise SubscriptionError("Store subscription not found. Please contact store owner.")
        if sub.status not in (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL):
            raise SubscriptionError("Store subscription is not active. Please contact store owner.")
        if sub.is_expired(now):
            raise SubscriptionError("Store subscription has expired. Please contact store owner to renew.")
        return sub

    def ensure_feature(self, store_owner_id: int, feature: str) -> None:
        flag = FEATURE_FLAGS.get(feature, feature)
        sub = self._subscriptions.get_for_owner(store_owner_id)
        if not sub or not sub.has_feature(flag):
            raise SubscriptionError(f"Feature '{feature}' is not available in your subscription plan")
