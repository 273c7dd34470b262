from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from ..db import Database, get_database
from ..metrics import PROJECTS_CREATED_TOTAL
from ..queries import create_project, fetch_projects, fetch_stats, fetch_users
from ..schemas import CreateProjectRequest, CreateProjectResponse, ProjectItem, UserItem

router = APIRouter(prefix="/api", tags=["api"])
logger = logging.getLogger("showcase.api")


@router.get("/stats", response_model=dict[str, int])
def stats(db: Database = Depends(get_database)) -> dict[str, int]:
    try:
        with db.session() as session:
            return fetch_stats(session)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching stats", extra={"event": "stats_failed", "path": "/api/stats"})
        raise HTTPException(status_code=500, detail="Failed to fetch statistics") from exc


@router.get("/users", response_model=list[UserItem])
def users(db: Database = Depends(get_database)) -> list[UserItem]:
    try:
        with db.session() as session:
            rows = fetch_users(session)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching users", extra={"event": "users_failed", "path": "/api/users"})
        raise HTTPException(status_code=500, detail="Failed to fetch users") from exc

    return [UserItem(**row) for row in rows]


@router.get("/projects", response_model=list[ProjectItem])
def projects(db: Database = Depends(get_database)) -> list[ProjectItem]:
    try:
        with db.session() as session:
            rows = fetch_projects(session)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching projects", extra={"event": "projects_failed", "path": "/api/projects"})
        raise HTTPException(status_code=500, detail="Failed to fetch projects") from exc

    return [ProjectItem(**row) for row in rows]


@router.post(
    "/projects",
    response_model=CreateProjectResponse,
    responses={
        400: {"description": "Title or user_id missing"},
        500: {"description": "Project could not be stored"},
    },
)
def add_project(payload: CreateProjectRequest, db: Database = Depends(get_database)) -> CreateProjectResponse:
    """Create a project and bump the ``total_projects`` counter."""

    if not payload.title or not payload.user_id:
        raise HTTPException(status_code=400, detail="Title and user_id are required")

    try:
        with db.session() as session:
            project_id = create_project(session, payload.title, payload.description, payload.user_id)
    except SQLAlchemyError as exc:
        logger.exception("Error creating project", extra={"event": "project_create_failed", "path": "/api/projects"})
        raise HTTPException(status_code=500, detail="Failed to create project") from exc

    PROJECTS_CREATED_TOTAL.inc()
    return CreateProjectResponse(id=project_id)
