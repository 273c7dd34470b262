from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from .models import Metric, Project, User


def fetch_stats(session: Session) -> dict[str, int]:
    rows = session.execute(select(Metric.metric_name, Metric.metric_value)).all()
    return {name: value for name, value in rows}


def fetch_users(session: Session, newest_first: bool = False) -> list[dict[str, Any]]:
    stmt = select(User.id, User.name, User.email, User.role, User.created_at)
    if newest_first:
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
    else:
        stmt = stmt.order_by(User.id)
    return [dict(row) for row in session.execute(stmt).mappings().all()]


def fetch_projects(session: Session, limit: Optional[int] = None) -> list[dict[str, Any]]:
    """Projects joined with their owner's name, newest first.

    Projects whose owner does not exist are left out by the inner join.
    """
    stmt = (
        select(
            Project.id,
            Project.title,
            Project.description,
            Project.status,
            Project.user_id,
            Project.created_at,
            User.name.label("user_name"),
        )
        .join(User, Project.user_id == User.id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [dict(row) for row in session.execute(stmt).mappings().all()]


def fetch_role_counts(session: Session) -> list[dict[str, Any]]:
    stmt = select(User.role, func.count().label("count")).group_by(User.role).order_by(User.role)
    return [dict(row) for row in session.execute(stmt).mappings().all()]


def create_project(session: Session, title: str, description: Optional[str], user_id: int) -> int:
    project = Project(title=title, description=description or "", user_id=user_id)
    session.add(project)
    session.flush()

    # Only total_projects follows project creation; the other metrics are left as they are.
    session.execute(
        update(Metric)
        .where(Metric.metric_name == "total_projects")
        .values(metric_value=Metric.metric_value + 1)
    )
    return project.id
