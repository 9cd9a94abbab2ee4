"""
web/routes.py -- Jinja2 template routes for the Robinson web UI.

These routes serve server-rendered HTML and share app.state.user_store with
the rest of the app. The session is Starlette's SessionMiddleware, accessed
only through auth.session.SessionState.

Routes:
  GET  /        -- landing page (shows who is logged in, if anyone)
  GET  /login   -- login form, or redirect to / when already logged in
  POST /login   -- verify credentials; redirect to / or back to /login
  GET  /logout  -- clear the session, redirect to /

Login failure handling:
  Rejected and LookupFailed both queue the same one-shot message and redirect
  to /login. The message never says which field was wrong and never hints
  that the store is unhealthy. LookupFailed is logged server-side.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from auth.dependencies import project_user, try_get_current_user
from auth.session import SessionState, serialize_user
from auth.store import UserStore
from auth.verifier import LookupFailed, Verified, verify

logger = logging.getLogger("robinson.web")

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
router = APIRouter()

LOGIN_FAILED_MESSAGE = "Notandanafn eða lykilorð vitlaust."


def _no_store(resp: RedirectResponse) -> RedirectResponse:
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Landing page
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    user = await try_get_current_user(request)
    view = project_user(user)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": "Robinson skýrsla",
            "logged_in": user is not None,
            "username": view.username,
            "admin": view.admin,
        },
    )


# ---------------------------------------------------------------------------
# Auth routes -- login, logout
# ---------------------------------------------------------------------------


@router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request) -> HTMLResponse:
    """Render the login form with any queued failure message, then drop the queue."""
    if await try_get_current_user(request) is not None:
        return RedirectResponse("/", status_code=302)

    session = SessionState.from_request(request)
    message = ", ".join(session.take_messages())
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "title": "Innskráning",
            "message": message,
            "logged_in": False,
        },
    )


@router.post("/login", response_class=HTMLResponse)
async def login_post(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
) -> RedirectResponse:
    """Handle username/password login form submission."""
    user_store: UserStore = request.app.state.user_store
    session = SessionState.from_request(request)

    result = await verify(user_store, username, password)
    if isinstance(result, Verified):
        session.establish(serialize_user(result.user))
        logger.info("User %r logged in", result.user.username)
        return _no_store(RedirectResponse("/", status_code=302))

    if isinstance(result, LookupFailed):
        logger.error("Credential store lookup failed during login", exc_info=result.error)

    session.queue_message(LOGIN_FAILED_MESSAGE)
    return _no_store(RedirectResponse("/login", status_code=302))


@router.get("/logout")
async def logout(request: Request) -> RedirectResponse:
    """Clear the session and redirect to the landing page.

    Teardown is best-effort: a failure is logged and the redirect still happens.
    """
    try:
        SessionState.from_request(request).clear()
    except Exception:
        logger.exception("Session teardown failed during logout")
    return RedirectResponse("/", status_code=302)
