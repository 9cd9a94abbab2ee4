"""
api/main.py -- FastAPI application entry point for Robinson.

Builds the ASGI app, its middleware, and its lifespan. HTML routes and the
HTML error pages live in web/ and are attached by asgi.py.

Run with:      python main.py serve
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. log_requests      -- one log line per request with latency
  2. SessionMiddleware -- signed cookie session (request.session)

Lifespan opens the UserStore on startup and disposes its engine on shutdown.

Settings are read at import. A missing PORT or SESSION_SECRET raises
ValidationError here, before uvicorn binds a socket.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.sessions import SessionMiddleware

from api.models import HealthResponse
from auth.store import UserStore
from core.config import get_settings

_VERSION = "1.0.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.DEBUG if _settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("robinson.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the credential store for the lifetime of the server."""
    logger.info("Robinson starting up")
    app.state.user_store = UserStore(db_url=_settings.database_url)
    if not app.state.user_store.has_users():
        logger.warning("No user accounts exist -- create one with: python main.py create-user <username>")
    logger.info("Credential store initialized")

    yield

    app.state.user_store.close()
    logger.info("Robinson shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Robinson",
    description="Robinson skýrsla -- session-authenticated report site.",
    version=_VERSION,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

# resave/saveUninitialized have no equivalent here: SessionMiddleware only
# writes a cookie when the session dict is non-empty.
app.add_middleware(
    SessionMiddleware,
    secret_key=_settings.session_secret,
    session_cookie="robinson_session",
    max_age=_settings.session_max_age,
    same_site="lax",
    https_only=_settings.secure_cookies,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Health endpoint
#
# No authentication. Load balancers and monitors call this.
# ---------------------------------------------------------------------------


@app.get("/api/v1/health")
async def health(request: Request) -> HealthResponse:
    """Return liveness, version, and credential store reachability."""
    db_ok = await run_in_threadpool(request.app.state.user_store.ping)
    return HealthResponse(
        version=_VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
