"""
auth/session.py -- Per-request session state and user identity marshalling.

The session itself is Starlette's SessionMiddleware: a JSON dict signed with
SESSION_SECRET (itsdangerous) and stored in the "robinson_session" cookie.
SessionState gives that dict a fixed shape so handlers never poke at raw keys:

  user_id   -- SessionIdentity of the logged-in user (absent when anonymous)
  messages  -- one-shot messages queued for the next login form render

serialize_user / deserialize_user convert between a full User and the
SessionIdentity kept in the cookie. Only the id is ever written; the password
hash and role are re-read from the store on every request.
"""

from __future__ import annotations

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from auth.models import SessionIdentity, User
from auth.store import UserStore

_IDENTITY_KEY = "user_id"
_MESSAGES_KEY = "messages"


class UserNotFound(Exception):
    """The session's identity no longer matches any user record."""

    def __init__(self, identity: SessionIdentity) -> None:
        super().__init__(f"No user with id {identity!r}")
        self.identity = identity


# ---------------------------------------------------------------------------
# Identity marshalling
# ---------------------------------------------------------------------------


def serialize_user(user: User) -> SessionIdentity:
    """Return the minimal identity to persist in the session."""
    if user.id is None:
        raise ValueError("Cannot serialize a user that has not been stored.")
    return user.id


async def deserialize_user(store: UserStore, identity: SessionIdentity) -> User:
    """Rehydrate a User from a session identity.

    Raises UserNotFound when the account was deleted after the session was
    issued. Store faults propagate to the caller unchanged.
    """
    user = await run_in_threadpool(store.get_by_id, identity)
    if user is None:
        raise UserNotFound(identity)
    return user


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


class SessionState:
    """Typed view over one request's session dict.

    Owned by the request for its lifetime. Mutations are written back to the
    cookie by SessionMiddleware when the response is sent.
    """

    def __init__(self, data: dict) -> None:
        self._data = data

    @classmethod
    def from_request(cls, request: Request) -> SessionState:
        return cls(request.session)

    @property
    def identity(self) -> SessionIdentity | None:
        value = self._data.get(_IDENTITY_KEY)
        # JSON round-trip keeps ints as ints; anything else is a forged or
        # stale payload and is treated as anonymous.
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    def establish(self, identity: SessionIdentity) -> None:
        """Start an authenticated session. Prior session state is discarded."""
        self._data.clear()
        self._data[_IDENTITY_KEY] = identity

    def forget_identity(self) -> None:
        self._data.pop(_IDENTITY_KEY, None)

    @property
    def pending_messages(self) -> list[str]:
        messages = self._data.get(_MESSAGES_KEY)
        if not isinstance(messages, list):
            return []
        return [str(m) for m in messages]

    def queue_message(self, message: str) -> None:
        self._data[_MESSAGES_KEY] = [*self.pending_messages, message]

    def take_messages(self) -> list[str]:
        """Return and clear the queued messages. A message is shown at most once."""
        messages = self.pending_messages
        self._data.pop(_MESSAGES_KEY, None)
        return messages

    def clear(self) -> None:
        self._data.clear()
