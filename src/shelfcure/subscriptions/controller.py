from __future__ import annotations

from flask import Flask, g

from ..common.datetime_utils import now_local
from ..common.http import json_body, ok
from ..common.validators import require_choice
from ..container import Container
from ..core.enums import BillingDuration, Plan, Role
from .serializers import subscription_to_dict


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    subscriptions = container.subscription_service

    @app.route("/api/subscriptions/plans", methods=["GET"], endpoint="subscription_plans")
    def subscription_plans():
        return ok(subscriptions.catalog())

    @app.route("/api/store-owner/subscription", methods=["GET"], endpoint="subscription_get")
    @guards.authorize(Role.STORE_OWNER)
    def subscription_get():
        sub = subscriptions.get_for_owner(g.user.user_id)
        return ok(subscription_to_dict(sub, now=now_local()))

    @app.route("/api/store-owner/subscription", methods=["POST"], endpoint="subscription_subscribe")
    @guards.authorize(Role.STORE_OWNER)
    def subscription_subscribe():
        data = json_body()
        sub = subscriptions.subscribe(
            g.user.user_id,
            plan=require_choice(data.get("plan"), Plan, "Plan"),
            billing_duration=require_choice(data.get("billingDuration") or BillingDuration.MONTHLY, BillingDuration, "Billing duration"),
            trial=bool(data.get("trial")),
        )
        return ok(subscription_to_dict(sub, now=now_local()), message=f"Subscribed to {sub.plan.value} plan")

    @app.route("/api/store-owner/subscription/cancel", methods=["PUT"], endpoint="subscription_cancel")
    @guards.authorize(Role.STORE_OWNER)
    def subscription_cancel():
        sub = subscriptions.cancel(g.user.user_id, reason=json_body().get("reason"))
        return ok(subscription_to_dict(sub, now=now_local()), message="Subscription cancelled")
