"""Unit tests for auth/session.py and auth/dependencies.py helpers.

Covers:
- serialize_user returns only the id; unsaved users cannot be serialized
- deserialize_user round-trips a stored user
- deserialize_user raises UserNotFound once the record is deleted
- SessionState one-shot message queue and identity handling
- project_user for anonymous and logged-in users
"""

import asyncio

import pytest

from auth.dependencies import UserView, project_user
from auth.models import User
from auth.session import SessionState, UserNotFound, deserialize_user, serialize_user

# ---------------------------------------------------------------------------
# Marshalling
# ---------------------------------------------------------------------------


def test_serialize_returns_id(user_store):
    alice = user_store.get_by_username("alice")
    assert serialize_user(alice) == alice.id


def test_serialize_unsaved_user_raises():
    with pytest.raises(ValueError):
        serialize_user(User(username="ghost", hashed_password="x"))


def test_round_trip(user_store):
    for name in ("alice", "root"):
        user = user_store.get_by_username(name)
        assert asyncio.run(deserialize_user(user_store, serialize_user(user))) == user


def test_deleted_user_not_found(user_store):
    alice = user_store.get_by_username("alice")
    identity = serialize_user(alice)
    user_store.delete_user(alice.id)
    with pytest.raises(UserNotFound) as excinfo:
        asyncio.run(deserialize_user(user_store, identity))
    assert excinfo.value.identity == identity


# ---------------------------------------------------------------------------
# SessionState
# ---------------------------------------------------------------------------


def test_empty_session_is_anonymous():
    state = SessionState({})
    assert state.identity is None
    assert state.pending_messages == []


def test_establish_replaces_prior_state():
    data = {"messages": ["old"], "other": 1}
    state = SessionState(data)
    state.establish(7)
    assert data == {"user_id": 7}
    assert state.identity == 7


@pytest.mark.parametrize("value", ["7", True, 7.0, None, [7]])
def test_non_int_identity_is_anonymous(value):
    assert SessionState({"user_id": value}).identity is None


def test_messages_are_one_shot():
    state = SessionState({})
    state.queue_message("first")
    state.queue_message("second")
    assert state.take_messages() == ["first", "second"]
    assert state.take_messages() == []
    assert state.pending_messages == []


def test_forget_identity_keeps_messages():
    state = SessionState({"user_id": 3, "messages": ["hi"]})
    state.forget_identity()
    assert state.identity is None
    assert state.pending_messages == ["hi"]


def test_clear():
    data = {"user_id": 3, "messages": ["hi"]}
    SessionState(data).clear()
    assert data == {}


# ---------------------------------------------------------------------------
# project_user
# ---------------------------------------------------------------------------


def test_project_anonymous():
    assert project_user(None) == UserView(username="", admin=False)


def test_project_admin(user_store):
    assert project_user(user_store.get_by_username("root")) == UserView(username="root", admin=True)
