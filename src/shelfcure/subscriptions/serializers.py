from __future__ import annotations

from datetime import datetime

from .model import Subscription


def _iso(value):
    return value.isoformat() if value else None


def subscription_to_dict(sub: Subscription, *, now: datetime) -> dict:
    return {
        "id": sub.subscription_id,
        "storeOwner": sub.store_owner_id,
        "plan": sub.plan.value,
        "status": sub.status.value,
        "billingDuration": sub.billing_duration.value,
        "startDate": _iso(sub.start_date),
        "endDate": _iso(sub.end_date),
        "trialEndDate": _iso(sub.trial_end_date),
        "storeCountLimit": sub.store_count_limit,
        "currentStoreCount": sub.current_store_count,
        "remainingStoreSlots": sub.remaining_store_slots,
        "remainingDays": sub.remaining_days(now),
        "isActive": sub.is_active(now),
        "canCreateStore": sub.can_create_store(now),
        "features": sub.features,
        "limits": sub.limits,
        "pricing": sub.pricing,
        "paymentStatus": sub.payment_status,
        "autoRenewal": sub.auto_renewal,
        "cancellationDate": _iso(sub.cancellation_date),
        "cancellationReason": sub.cancellation_reason,
    }
