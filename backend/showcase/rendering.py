"""View-models and HTML rendering for the landing page and the dashboard.

Templates are pure functions of the view-model: handlers gather data, build a
plain dict with one of the ``*_view`` helpers and pass it to :func:`render`.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

PAGE_TITLE = "Welcome to My Beautiful App"
SUBTITLE = "A modern, elegant web experience built with FastAPI & SQLAlchemy"

FEATURES = [
    {
        "icon": "🚀",
        "title": "Fast Performance",
        "description": "Lightning-fast response times with optimized code and database queries",
    },
    {
        "icon": "🎨",
        "title": "Beautiful Design",
        "description": "Modern, responsive design that works on all devices",
    },
    {
        "icon": "💾",
        "title": "Database Integration",
        "description": "Seamless database integration for dynamic content management",
    },
]

STAT_KEYS = ("total_users", "total_projects", "completed_projects", "active_projects")


def _format_date(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime("%b %d, %Y")
    return "" if value is None else str(value)


def _status_label(value: str | None) -> str:
    return (value or "").replace("-", " ")


_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["date"] = _format_date
_env.filters["status_label"] = _status_label


def render(template_name: str, view: Mapping[str, Any]) -> str:
    return _env.get_template(template_name).render(**view)


def _zeroed_stats() -> dict[str, int]:
    return {key: 0 for key in STAT_KEYS}


def build_home_view(
    stats: Mapping[str, int],
    recent_projects: Iterable[Mapping[str, Any]],
    role_stats: Iterable[Mapping[str, Any]],
) -> dict[str, Any]:
    merged = _zeroed_stats()
    merged.update(stats)
    return {
        "title": PAGE_TITLE,
        "heading": "Discover Something Amazing On Graphit software",
        "subtitle": SUBTITLE,
        "stats": merged,
        "recent_projects": list(recent_projects),
        "role_stats": list(role_stats),
        "features": FEATURES,
        "degraded": False,
        "live_stats": True,
    }


def fallback_home_view() -> dict[str, Any]:
    """Landing page served when the database cannot be queried."""
    return {
        "title": PAGE_TITLE,
        "heading": "Discover Something Amazing",
        "subtitle": SUBTITLE,
        "stats": _zeroed_stats(),
        "recent_projects": [],
        "role_stats": [],
        "features": FEATURES,
        "degraded": True,
        "live_stats": False,
    }


def static_home_view() -> dict[str, Any]:
    return {
        "title": PAGE_TITLE,
        "heading": "Discover Something Amazing",
        "subtitle": "A modern, elegant web experience",
        "stats": None,
        "recent_projects": [],
        "role_stats": [],
        "features": FEATURES,
        "degraded": False,
        "live_stats": False,
    }


def build_dashboard_view(
    users: Iterable[Mapping[str, Any]],
    projects: Iterable[Mapping[str, Any]],
) -> dict[str, Any]:
    return {"title": "Dashboard", "users": list(users), "projects": list(projects)}
