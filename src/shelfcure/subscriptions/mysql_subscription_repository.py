from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import BillingDuration, Plan, SubscriptionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchone, load_json
from .model import Subscription
from .repository import SubscriptionRepository

_COLUMNS = """
    subscription_id, store_owner_id, plan, status, billing_duration, start_date, end_date,
    trial_end_date, store_count_limit, current_store_count, features, limits, pricing,
    payment_status, auto_renewal, cancellation_date, cancellation_reason
"""


def _row_to_subscription(r: dict) -> Subscription:
    return Subscription(
        subscription_id=int(r["subscription_id"]),
        store_owner_id=int(r["store_owner_id"]),
        plan=Plan(r["plan"]),
        status=SubscriptionStatus(r["status"]),
        billing_duration=BillingDuration(r["billing_duration"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        trial_end_date=r.get("trial_end_date"),
        store_count_limit=int(r["store_count_limit"]),
        current_store_count=int(r["current_store_count"]),
        features=load_json(r.get("features"), {}),
        limits=load_json(r.get("limits"), {}),
        pricing=load_json(r.get("pricing"), {}),
        payment_status=r.get("payment_status") or "pending",
        auto_renewal=bool(r.get("auto_renewal", True)),
        cancellation_date=r.get("cancellation_date"),
        cancellation_reason=r.get("cancellation_reason"),
    )


class MySQLSubscriptionRepository(SubscriptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_owner(self, store_owner_id: int) -> Optional[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM subscriptions
                WHERE store_owner_id=%s
                ORDER BY subscription_id DESC
                LIMIT 1
                """,
                (int(store_owner_id),),
            )
            r = fetchone(cur)
            return _row_to_subscription(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subscriptions
                    (store_owner_id, plan, status, billing_duration, start_date, end_date, trial_end_date,
                     store_count_limit, current_store_count, features, limits, pricing)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,0,%s,%s,%s)
                """,
                (
                    int(store_owner_id),
                    plan.value,
                    status.value,
                    billing_duration.value,
                    start_date,
                    end_date,
                    trial_end_date,
                    int(store_count_limit),
                    dump_json(features),
                    dump_json(limits),
                    dump_json(pricing),
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subscriptions
                SET plan=%s, status=%s, billing_duration=%s, start_date=%s, end_date=%s,
                    store_count_limit=%s, features=%s, limits=%s, pricing=%s,
                    cancellation_date=NULL, cancellation_reason=NULL
                WHERE subscription_id=%s
                """,
                (
                    plan.value,
                    status.value,
                    billing_duration.value,
                    start_date,
                    end_date,
                    int(store_count_limit),
                    dump_json(features),
                    dump_json(limits),
                    dump_json(pricing),
                    int(subscription_id),
                ),
            )
            return cur.rowcount > 0

    def increment_store_count(self, subscription_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subscriptions
                SET current_store_count = current_store_count + 1
                WHERE subscription_id=%s AND current_store_count < store_count_limit
                """,
                (int(subscription_id),),
            )
            return cur.rowcount > 0

    def decrement_store_count(self, subscription_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subscriptions
                SET current_store_count = current_store_count - 1
                WHERE subscription_id=%s AND current_store_count > 0
                """,
                (int(subscription_id),),
            )
            return cur.rowcount > 0

    def cancel(self, *, subscription_id: int, cancelled_at: datetime, reason: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subscriptions
                SET status='cancelled', auto_renewal=0, cancellation_date=%s, cancellation_reason=%s
                WHERE subscription_id=%s
                """,
                (cancelled_at, reason, int(subscription_id)),
            )
            return cur.rowcount > 0
