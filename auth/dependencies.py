"""
auth/dependencies.py -- Resolve the current user from the request session.

try_get_current_user() is the soft variant used by every web route: it returns
None for anonymous sessions and for sessions whose user has since been deleted.
project_user() turns the result into the two fields templates need.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from starlette.requests import Request

from auth.models import User
from auth.session import SessionState, UserNotFound, deserialize_user
from auth.store import UserStore

logger = logging.getLogger("robinson.auth")


class UserView(NamedTuple):
    username: str
    admin: bool


async def try_get_current_user(request: Request) -> User | None:
    """Return the authenticated User for this request, or None.

    A stale identity (UserNotFound) is dropped from the session so the next
    request does not repeat the lookup. Store faults are not caught here; they
    reach the boundary error handler.
    """
    session = SessionState.from_request(request)
    identity = session.identity
    if identity is None:
        return None

    user_store: UserStore = request.app.state.user_store
    try:
        return await deserialize_user(user_store, identity)
    except UserNotFound:
        logger.info("Session identity %s no longer exists; treating as logged out", identity)
        session.forget_identity()
        return None


def project_user(user: User | None) -> UserView:
    """Extract the display fields for the landing page. Anonymous -> ("", False)."""
    if user is None:
        return UserView(username="", admin=False)
    return UserView(username=user.username, admin=user.admin)
