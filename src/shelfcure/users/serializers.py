from __future__ import annotations

from .model import User


def user_to_dict(user: User) -> dict:
    """Public view of a user; never includes the password hash."""

    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role.value,
        "isActive": user.is_active,
        "currentStore": user.current_store_id,
        "stores": list(user.store_ids),
        "lastLogin": user.last_login.isoformat() if user.last_login else None,
    }
