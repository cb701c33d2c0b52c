"""
Pytest configuration for Django app tests.
"""

from collections.abc import Callable, Iterator

from django.core.cache import cache
from django.test import Client as DjangoTestClient

import pytest
import respx
from supra_schemas import ROLE_IDS, Role

from apps.web.core.auth import SESSION_TOKEN_KEY, SESSION_USER_KEY
from apps.web.core.tests.factories import SessionUserFactory, make_token

BACKEND_URL = "http://backend.test"


@pytest.fixture(autouse=True)
def clear_cache() -> Iterator[None]:
    """Sessions, catalog entries and idempotency keys live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def backend_api() -> Iterator[respx.MockRouter]:
    """Mocked backend API; unmatched requests fail the test."""
    with respx.mock(base_url=BACKEND_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def login_as(client: DjangoTestClient) -> Callable[..., dict]:
    """
    Sign the test client in with a backend session.

    Usage:
        user = login_as(Role.MANAGER, first_name="Giorgi")
    """

    def _login(role: Role = Role.USER, **fields) -> dict:
        user = SessionUserFactory(role=role.value, role_id=ROLE_IDS.get(role, 3), **fields)
        session = client.session
        session[SESSION_TOKEN_KEY] = make_token(sub=user["user_id"])
        session[SESSION_USER_KEY] = user
        session.save()
        return user

    return _login
