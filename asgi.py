"""
asgi.py -- Application assembly for Robinson.

This is the ONLY file that imports from both api/ and web/. It joins the two
layers into a single ASGI app without coupling them to each other.

Run with:  python main.py serve
           uvicorn asgi:app --reload
"""

from fastapi.staticfiles import StaticFiles

from api.main import app
from web.handlers import register_error_handlers
from web.routes import STATIC_DIR
from web.routes import router as web_router

app.include_router(web_router, tags=["Web UI"])
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
register_error_handlers(app)
