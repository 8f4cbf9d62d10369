from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str],
        password_hash: str,
        role: Role,
    ) -> int:
        raise NotImplementedError

    def record_failed_login(self, user_id: int, *, attempts: int, lock_until: Optional[datetime]) -> None:
        raise NotImplementedError

    def record_successful_login(self, user_id: int, *, at: datetime) -> None:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: Optional[str], phone: Optional[str]) -> bool:
        raise NotImplementedError

    def set_current_store(self, user_id: int, store_id: int) -> bool:
        raise NotImplementedError

    def add_store(self, user_id: int, store_id: int) -> None:
        raise NotImplementedError
