"""
auth/verifier.py -- Username/password verification for the login form.

verify() returns a tagged result instead of raising:

  Verified(user)       -- credentials match
  Rejected()           -- unknown username OR wrong password (same value, so
                          the caller cannot leak which field was wrong)
  LookupFailed(error)  -- the credential store itself failed; the caller logs
                          it and shows the generic rejection message

Order is strict: lookup first, compare only against a record that exists.
An unknown username returns Rejected without calling compare_passwords().

Both store I/O and bcrypt are blocking, so each step is awaited through
run_in_threadpool. If the awaiting task is cancelled mid-comparison, the worker
thread still runs bcrypt to completion and its result is discarded; there is
no path from cancellation to Verified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from starlette.concurrency import run_in_threadpool

from auth.models import User
from auth.passwords import compare_passwords
from auth.store import UserStore


@dataclass(frozen=True)
class Verified:
    user: User


@dataclass(frozen=True)
class Rejected:
    pass


@dataclass(frozen=True)
class LookupFailed:
    error: Exception


VerificationResult = Union[Verified, Rejected, LookupFailed]


async def verify(store: UserStore, username: str, password: str) -> VerificationResult:
    """Check a username/password pair against the credential store.

    Empty strings are valid inputs; they never match a record.
    Never raises for store faults -- those come back as LookupFailed.
    """
    try:
        user = await run_in_threadpool(store.get_by_username, username)
    except Exception as exc:
        return LookupFailed(exc)

    if user is None:
        return Rejected()

    matched = await run_in_threadpool(compare_passwords, password, user)
    if not matched:
        return Rejected()
    return Verified(user)
