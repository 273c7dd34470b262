"""Database-less variant of the landing page.

Run with ``uvicorn showcase.static_site:app``. It renders the same template as
the main app from a fixed view-model and never opens a database connection.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging_utils import configure_logging
from .rendering import STATIC_DIR, render, static_home_view

configure_logging()

app = FastAPI(title="Graphit Showcase (static)", version="1.0.0")


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404:
        return HTMLResponse(render("not_found.html", {"title": "Page Not Found"}), status_code=404)
    return await http_exception_handler(request, exc)


@app.get("/", response_class=HTMLResponse)
async def home() -> HTMLResponse:
    return HTMLResponse(render("home.html", static_home_view()))


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
