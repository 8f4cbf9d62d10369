from dataclasses import replace
from datetime import datetime, timedelta

import pytest
from jose import jwt

from fakes import FakeStoresRepo, FakeUsersRepo, make_store
from shelfcure.core.enums import Role
from shelfcure.core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    AuthorizationError,
    DuplicateError,
    ValidationError,
)
from shelfcure.users.service import AuthService, TokenSettings


@pytest.fixture
def users():
    return FakeUsersRepo()


@pytest.fixture
def stores():
    return FakeStoresRepo()


@pytest.fixture
def auth(users, stores):
    return AuthService(users, stores, tokens=TokenSettings(secret="s3cret", expire_days=7))


def test_register_issues_token_with_user_id(auth):
    result = auth.register(name="Owner", email="Owner@Shop.in", password="secret1", role="store_owner")

    claims = jwt.decode(result.token, "s3cret", algorithms=["HS256"])
    assert claims["id"] == result.user.user_id
    assert result.user.email == "owner@shop.in"
    assert result.user.role == Role.STORE_OWNER


def test_register_rejects_privileged_roles(auth):
    for role in ("superadmin", "store_manager"):
        with pytest.raises(ValidationError):
            auth.register(name="X", email="x@shop.in", password="secret1", role=role)


def test_register_collects_field_errors(auth):
    with pytest.raises(ValidationError) as exc:
        auth.register(name="", email="nope", password="123")

    assert len(exc.value.errors) == 3


def test_register_rejects_duplicate_email(auth):
    auth.register(name="A", email="a@shop.in", password="secret1")

    with pytest.raises(DuplicateError):
        auth.register(name="B", email="A@shop.in", password="secret1")


def test_login_locks_account_after_repeated_failures(auth, users):
    auth.register(name="A", email="a@shop.in", password="secret1")
    now = datetime(2025, 6, 16, 10, 0)

    for _ in range(5):
        with pytest.raises(AuthenticationError):
            auth.login("a@shop.in", "wrong", now=now)

    with pytest.raises(AccountLockedError):
        auth.login("a@shop.in", "secret1", now=now + timedelta(minutes=5))

    result = auth.login("a@shop.in", "secret1", now=now + timedelta(minutes=31))
    assert result.user.login_attempts == 0
    assert result.user.lock_until is None


def test_login_with_unknown_email(auth):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login("ghost@shop.in", "secret1")


def test_user_from_token_rejects_bad_tokens(auth):
    with pytest.raises(AuthenticationError):
        auth.user_from_token(None)
    with pytest.raises(AuthenticationError):
        auth.user_from_token("not-a-jwt")
    forged = jwt.encode({"id": 1}, "other-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        auth.user_from_token(forged)


def test_user_from_token_rejects_deactivated_accounts(auth, users):
    result = auth.register(name="A", email="a@shop.in", password="secret1")
    users.users[result.user.user_id] = replace(result.user, is_active=False)

    with pytest.raises(AuthenticationError, match="deactivated"):
        auth.user_from_token(result.token)


def test_change_password(auth):
    user = auth.register(name="A", email="a@shop.in", password="secret1").user

    with pytest.raises(AuthenticationError):
        auth.change_password(user.user_id, current_password="wrong", new_password="secret2")
    auth.change_password(user.user_id, current_password="secret1", new_password="secret2")

    assert auth.login("a@shop.in", "secret2").user.user_id == user.user_id


def test_switch_store_requires_assignment(auth, users, stores):
    user = auth.register(name="A", email="a@shop.in", password="secret1").user
    store = make_store(stores, owner_id=99)

    with pytest.raises(AuthorizationError):
        auth.switch_store(user.user_id, store.store_id)

    users.add_store(user.user_id, store.store_id)
    assert auth.switch_store(user.user_id, str(store.store_id)) == {"id": store.store_id, "name": "City Pharmacy"}
    assert users.get_by_id(user.user_id).current_store_id == store.store_id


def test_update_profile_keeps_blank_fields(auth):
    user = auth.register(name="A", email="a@shop.in", password="secret1", phone="9000000000").user

    updated = auth.update_profile(user.user_id, name="Anand", phone="  ")

    assert updated.name == "Anand"
    assert updated.phone == "9000000000"
