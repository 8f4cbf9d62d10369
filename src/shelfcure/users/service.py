from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import (
    EMAIL_RE,
    FieldErrors,
    require_choice,
    require_min_length,
    require_non_empty,
    require_pattern,
)
from ..core.constants import DEFAULT_TOKEN_DAYS, LOCK_MINUTES, MAX_LOGIN_ATTEMPTS
from ..core.enums import Role
from ..core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    AuthorizationError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from ..stores.repository import StoreRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Roles an anonymous caller may sign up as.
SELF_REGISTER_ROLES = (Role.STORE_OWNER, Role.STAFF, Role.CASHIER)


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    expire_days: int = DEFAULT_TOKEN_DAYS


@dataclass(frozen=True)
class AuthResult:
    """What a successful register/login hands back to the client."""

    token: str
    user: User


class AuthService:
    """Use case: register, login (with lockout), token verification, account maintenance."""

    def __init__(self, users: UserRepository, stores: StoreRepository, *, tokens: TokenSettings):
        self._users = users
        self._stores = stores
        self._tokens = tokens

    def issue_token(self, user: User) -> str:
        expire = datetime.now(timezone.utc) + timedelta(days=self._tokens.expire_days)
        return jwt.encode({"id": user.user_id, "exp": expire}, self._tokens.secret, algorithm=ALGORITHM)

    def user_from_token(self, token: Optional[str]) -> User:
        if not token:
            raise AuthenticationError("Not authorized to access this route")
        try:
            payload = jwt.decode(token, self._tokens.secret, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthenticationError("Not authorized to access this route")

        user_id = payload.get("id")
        if user_id is None:
            raise AuthenticationError("Not authorized to access this route")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("User not found")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        return user

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        role: str = Role.STAFF.value,
    ) -> AuthResult:
        errors = FieldErrors()
        name = errors.check(require_non_empty, name, "Name")
        email = errors.check(require_pattern, (email or "").strip().lower(), "Email", EMAIL_RE)
        errors.check(require_min_length, password, "Password", 6)
        errors.raise_if_any()

        role_enum = require_choice(role or Role.STAFF.value, Role, "Role")
        if role_enum not in SELF_REGISTER_ROLES:
            raise ValidationError(f"Role {role_enum.value} cannot be self-registered")

        if self._users.get_by_email(email):
            raise DuplicateError("User already exists with this email", field="email", value=email)

        user_id = self._users.create_user(
            name=name,
            email=email,
            phone=(phone or "").strip() or None,
            password_hash=generate_password_hash(password),
            role=role_enum,
        )
        user = self._users.get_by_id(user_id)
        logger.info("Registered user %s (%s)", email, role_enum.value)
        return AuthResult(token=self.issue_token(user), user=user)

    def login(self, email: str, password: str, *, now: datetime | None = None) -> AuthResult:
        if not email or not password:
            raise ValidationError("Please provide email and password")
        now = now or now_local()

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid credentials")
        if user.is_locked(now):
            raise AccountLockedError("Account is temporarily locked due to too many failed login attempts")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        try:
            matched = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            matched = False

        if not matched:
            attempts = user.login_attempts + 1
            lock_until = now + timedelta(minutes=LOCK_MINUTES) if attempts >= MAX_LOGIN_ATTEMPTS else None
            self._users.record_failed_login(user.user_id, attempts=attempts, lock_until=lock_until)
            if lock_until:
                logger.warning("Locked account %s until %s", user.email, lock_until.isoformat())
            raise AuthenticationError("Invalid credentials")

        self._users.record_successful_login(user.user_id, at=now)
        user = self._users.get_by_id(user.user_id)
        return AuthResult(token=self.issue_token(user), user=user)

    def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("Please provide current and new password")
        require_min_length(new_password, "Password", 6)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not check_password_hash(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")
        self._users.update_password(user_id, password_hash=generate_password_hash(new_password))

    def update_profile(self, user_id: int, *, name: Optional[str] = None, phone: Optional[str] = None) -> User:
        self._users.update_profile(
            user_id,
            name=(name or "").strip() or None,
            phone=(phone or "").strip() or None,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def switch_store(self, user_id: int, store_id) -> dict:
        if not store_id:
            raise ValidationError("Please provide store ID")
        try:
            store_id = int(store_id)
        except (TypeError, ValueError):
            raise ValidationError("Invalid store ID")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if store_id not in user.store_ids:
            raise AuthorizationError("You do not have access to this store")
        store = self._stores.get_by_id(store_id)
        if not store:
            raise NotFoundError("Store not found")

        self._users.set_current_store(user_id, store_id)
        return {"id": store.store_id, "name": store.name}
