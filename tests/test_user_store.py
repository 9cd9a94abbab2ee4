"""Unit tests for auth/store.py -- UserStore queries and provisioning."""

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore


def test_get_by_username_returns_record(user_store):
    user = user_store.get_by_username("alice")
    assert user is not None
    assert user.username == "alice"
    assert user.admin is False
    assert user.id is not None
    assert user.hashed_password.startswith("$2")


def test_get_by_username_is_case_sensitive(user_store):
    assert user_store.get_by_username("ALICE") is None


def test_get_by_username_missing(user_store):
    assert user_store.get_by_username("nobody") is None
    assert user_store.get_by_username("") is None


def test_get_by_id_matches_username_lookup(user_store):
    by_name = user_store.get_by_username("root")
    by_id = user_store.get_by_id(by_name.id)
    assert by_id == by_name
    assert by_id.admin is True


def test_get_by_id_missing(user_store):
    assert user_store.get_by_id(99999) is None


def test_duplicate_username_rejected(user_store):
    with pytest.raises(IntegrityError):
        user_store.create_user(User(username="alice", hashed_password="x"))


def test_delete_user(user_store):
    uid = user_store.get_by_username("alice").id
    assert user_store.delete_user(uid) is True
    assert user_store.get_by_id(uid) is None
    assert user_store.delete_user(uid) is False


def test_has_users_and_ping(user_store):
    assert user_store.has_users() is True
    assert user_store.ping() is True


def test_password_hash_not_in_repr(user_store):
    user = user_store.get_by_username("alice")
    assert user.hashed_password not in repr(user)


def test_store_has_no_default_url():
    # The default location lives only in Settings.database_url.
    with pytest.raises(TypeError):
        UserStore()
