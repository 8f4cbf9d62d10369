from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from fakes import bearer, fake_repos, make_store
from shelfcure.container import AppSettings, wire
from shelfcure.core.enums import Plan, Role
from shelfcure.main import create_app


@pytest.fixture
def now():
    # A Monday.
    return datetime(2025, 6, 16, 10, 0)


@pytest.fixture
def repos():
    return fake_repos()


@pytest.fixture
def container(repos):
    return wire(settings=AppSettings(jwt_secret="test-jwt-secret"), **repos)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def owner(repos):
    return repos["users_repo"].add(
        name="Owner",
        email="owner@shelfcure.test",
        password_hash=generate_password_hash("secret123"),
        role=Role.STORE_OWNER,
    )


@pytest.fixture
def store(container, repos, owner):
    container.subscription_service.subscribe(owner.user_id, plan=Plan.BASIC)
    return make_store(repos["stores_repo"], owner_id=owner.user_id)


@pytest.fixture
def manager(repos, store):
    users = repos["users_repo"]
    user = users.add(
        name="Manager",
        email="manager@shelfcure.test",
        phone="9000000001",
        password_hash=generate_password_hash("secret123"),
        role=Role.STORE_MANAGER,
    )
    users.add_store(user.user_id, store.store_id)
    users.set_current_store(user.user_id, store.store_id)
    return users.get_by_id(user.user_id)


@pytest.fixture
def owner_headers(container, owner):
    return bearer(container, owner)


@pytest.fixture
def manager_headers(container, manager):
    return bearer(container, manager)
