"""
tests/conftest.py -- Shared test fixtures for Bookshelf API tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + books
  - _patch_lifespan(): wires test stores and services into app.state,
    bypassing the real startup
  - tokens: a TokenService signed with TEST_SECRET
  - user_store / accounts: in-memory store + AccountService for unit tests
  - api_client: TestClient over the real app, for integration tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
the TestClient because it runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

bcrypt runs at its minimum work factor (4) everywhere in the suite.

The DEBUG env var must be set before any api/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any core/api import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AccountService
from auth.store import UserStore
from auth.tokens import TokenService
from books.store import BookStore

TEST_SECRET = "test-secret-" + "k" * 40
OTHER_SECRET = "other-secret-" + "q" * 40
TEST_ROUNDS = 4
TEST_TTL = 900


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, BookStore]:
    """Create a users store and a books store over one named shared-memory DB.

    A uuid is appended so two modules never see each other's rows even if a
    previous module's connections are still being torn down.
    """
    db_url = f"sqlite:///file:test_bookshelf_{db_suffix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url), BookStore(db_url)


def _patch_lifespan(user_store: UserStore, book_store: BookStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.book_store = book_store
        app.state.tokens = tokens
        app.state.accounts = AccountService(user_store, tokens, bcrypt_rounds=TEST_ROUNDS)
        yield

    return test_lifespan


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def tamper(token: str) -> str:
    """Flip one character in the middle of the signature segment.

    The middle is used rather than the last character: the final base64url
    character of a signature carries padding bits that decoders ignore.
    """
    header, payload, signature = token.split(".")
    i = len(signature) // 2
    replacement = "A" if signature[i] != "A" else "B"
    return ".".join([header, payload, signature[:i] + replacement + signature[i + 1 :]])


# ---------------------------------------------------------------------------
# Unit-level fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET, TEST_TTL)


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def accounts(user_store: UserStore, tokens: TokenService) -> AccountService:
    return AccountService(user_store, tokens, bcrypt_rounds=TEST_ROUNDS)


# ---------------------------------------------------------------------------
# Module-scoped client -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real FastAPI app with isolated stores.

    Tests hit the real routers, dependencies, exception handlers and
    response models. Each module gets fresh databases, so usernames only
    need to be unique within a module.
    """
    user_store, book_store = _make_test_stores("api")
    service = TokenService(TEST_SECRET, TEST_TTL)

    app.router.lifespan_context = _patch_lifespan(user_store, book_store, service)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    book_store.close()
    user_store.close()


@pytest.fixture(scope="module")
def register_and_login(api_client: TestClient):
    """Return a helper that registers a user over HTTP and returns its token."""

    def _register_and_login(username: str, password: str = "pw123", first: str = "A", last: str = "L") -> str:
        resp = api_client.post(
            "/auth/register",
            json={"username": username, "password": password, "firstName": first, "lastName": last},
        )
        assert resp.status_code == 201, resp.text
        resp = api_client.post("/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]

    return _register_and_login
