"""
web/handlers.py -- HTML error pages.

  404                 -> notfound.html
  any other HTTP code -> error.html with that status
  unhandled exception -> error.html with 500; traceback goes to the log only

Registered on the app by asgi.py, alongside the web router.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from web.routes import templates

logger = logging.getLogger("robinson.web")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    if exc.status_code == 404:
        return templates.TemplateResponse(
            request,
            "notfound.html",
            {"title": "Fannst ekki"},
            status_code=404,
        )
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": "Villa kom upp", "status_code": exc.status_code},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    """Catch-all for unexpected server errors.

    The exception is written to the log only, never to the response body.
    """
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": "Villa kom upp", "status_code": 500},
        status_code=500,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
