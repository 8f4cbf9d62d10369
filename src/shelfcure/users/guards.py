from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..stores.service import StoreService
from ..subscriptions.service import SubscriptionService
from .service import AuthService


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return request.cookies.get("token")


class Guards:
    """Route decorators: token check, role check, store manager context.

    Each decorator raises domain exceptions; the app's error handlers turn
    them into 401/403 responses.
    """

    def __init__(self, auth: AuthService, stores: StoreService, subscriptions: SubscriptionService):
        self._auth = auth
        self._stores = stores
        self._subscriptions = subscriptions

    def protect(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.user = self._auth.user_from_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def authorize(self, *roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                g.user = self._auth.user_from_token(bearer_token())
                if g.user.role not in roles:
                    raise AuthorizationError(f"User role {g.user.role.value} is not authorized to access this route")
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def store_manager(self, feature: Optional[str] = "staff"):
        """Store manager with an active store whose owner's subscription allows ``feature``."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                g.user = self._auth.user_from_token(bearer_token())
                if g.user.role != Role.STORE_MANAGER:
                    raise AuthorizationError("Access denied. Store manager role required.")
                store = self._stores.resolve_manager_store(g.user)
                self._subscriptions.ensure_store_access(store.owner_id)
                if feature:
                    self._subscriptions.ensure_feature(store.owner_id, feature)
                g.store = store
                return view(*args, **kwargs)

            return wrapper

        return decorator
