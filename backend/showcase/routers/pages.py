from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from ..db import Database, get_database
from ..queries import fetch_projects, fetch_role_counts, fetch_stats, fetch_users
from ..rendering import build_dashboard_view, build_home_view, fallback_home_view, render

router = APIRouter(tags=["pages"])
logger = logging.getLogger("showcase.pages")

RECENT_PROJECTS_LIMIT = 3


@router.get("/", response_class=HTMLResponse)
def home(db: Database = Depends(get_database)) -> HTMLResponse:
    try:
        with db.session() as session:
            view = build_home_view(
                stats=fetch_stats(session),
                recent_projects=fetch_projects(session, limit=RECENT_PROJECTS_LIMIT),
                role_stats=fetch_role_counts(session),
            )
    except SQLAlchemyError:
        logger.exception(
            "Error loading home page, serving fallback content",
            extra={"event": "home_degraded", "path": "/"},
        )
        view = fallback_home_view()

    return HTMLResponse(render("home.html", view))


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(db: Database = Depends(get_database)) -> Response:
    try:
        with db.session() as session:
            view = build_dashboard_view(
                users=fetch_users(session, newest_first=True),
                projects=fetch_projects(session),
            )
    except SQLAlchemyError:
        logger.exception("Error loading dashboard", extra={"event": "dashboard_failed", "path": "/dashboard"})
        return PlainTextResponse("Internal Server Error", status_code=500)

    return HTMLResponse(render("dashboard.html", view))
