"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). The store does the
work; routes and the verifier only read these.

Layer rule: no imports from api/, web/, or core/.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# The only thing a session ever carries about a user: the primary key.
SessionIdentity = int


@dataclass
class User:
    """A registered account.

    id and username are both unique across the store. hashed_password is a
    bcrypt hash and is never passed to templates. Records are provisioned by
    the create-user CLI and are read-only from the request path.
    """

    username: str
    hashed_password: str = field(repr=False)
    admin: bool = False
    id: int | None = None
    created_at: str | None = None
