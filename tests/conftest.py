"""
tests/conftest.py -- Shared test fixtures for Robinson integration tests.

This module provides:
  - _make_test_store(): creates an isolated in-memory UserStore
  - _patch_lifespan(): wires the test store into app.state, bypassing real startup
  - user_store: store seeded with alice (user) and root (admin)
  - web_client: TestClient with follow_redirects=False for web route tests
  - lenient_client: same, but unhandled exceptions become 500 responses
  - real_lifespan: the unpatched lifespan, for teardown checks

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because run_in_threadpool executes store calls on worker threads. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format shares one in-memory instance across all
connections in the same process.

PORT and SESSION_SECRET must be set before any api/ or core/ import so
get_settings() validates instead of raising ValidationError. BCRYPT_ROUNDS=4
keeps hashing fast.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set config before any app import.
os.environ.setdefault("PORT", "3000")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from asgi import app
from auth.models import User
from auth.passwords import hash_password
from auth.store import UserStore

ALICE_PASSWORD = "correct"
ROOT_PASSWORD = "rootpass123"

# Snapshot before any fixture swaps it; tests assert it is restored.
_REAL_LIFESPAN = app.router.lifespan_context


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_store() -> UserStore:
    """Create an isolated named shared-memory SQLite store.

    A fresh uuid per call so tests never see each other's users.
    """
    name = f"test_auth_{uuid.uuid4().hex}"
    return UserStore(db_url=f"sqlite:///file:{name}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    """UserStore with alice (plain user) and root (admin)."""
    store = _make_test_store()
    store.create_user(User(username="alice", hashed_password=hash_password(ALICE_PASSWORD)))
    store.create_user(User(username="root", hashed_password=hash_password(ROOT_PASSWORD), admin=True))
    yield store
    store.close()


@pytest.fixture
def web_client(user_store: UserStore, monkeypatch) -> Generator[TestClient, None, None]:
    """Yield a TestClient bound to the seeded store.

    follow_redirects=False is essential: we assert on redirect locations,
    which are invisible once the client follows the redirect. One client per
    test so session cookies never leak between tests. monkeypatch restores the
    real lifespan on teardown.
    """
    monkeypatch.setattr(app.router, "lifespan_context", _patch_lifespan(user_store))
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def lenient_client(user_store: UserStore, monkeypatch) -> Generator[TestClient, None, None]:
    """Like web_client, but unhandled exceptions come back as 500 responses.

    Starlette re-raises an unhandled exception after the catch-all handler has
    responded; raise_server_exceptions=False lets tests inspect that response.
    """
    monkeypatch.setattr(app.router, "lifespan_context", _patch_lifespan(user_store))
    with TestClient(app, follow_redirects=False, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def real_lifespan():
    """The app's own lifespan, as it was before any client fixture patched it."""
    return _REAL_LIFESPAN
