from __future__ import annotations

from datetime import datetime

from sqlalchemy import DDL, CheckConstraint, DateTime, Index, Integer, String, Text, event, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

PROJECT_STATUSES = ("planning", "in-progress", "completed")


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    role: Mapped[str | None] = mapped_column(String(50), default="user", server_default="user")
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())


class Project(Base):
    __tablename__ = "projects"
    # user_id is indexed only, owners are not enforced by the store.
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{status}'" for status in PROJECT_STATUSES) + ")",
            name="ck_projects_status",
        ),
        Index("idx_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(String(16), default="planning", server_default="planning")
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())


class Metric(Base):
    __tablename__ = "statistics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    metric_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    metric_value: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
    )


# updated_at is also refreshed by the database itself, for writes that bypass the ORM.
_METRIC_TOUCH_DDL = [
    DDL(
        "ALTER TABLE statistics MODIFY updated_at DATETIME NULL "
        "DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP"
    ).execute_if(dialect="mysql"),
    DDL(
        "CREATE TRIGGER statistics_touch_updated_at AFTER UPDATE OF metric_value ON statistics "
        "FOR EACH ROW BEGIN "
        "UPDATE statistics SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id; "
        "END"
    ).execute_if(dialect="sqlite"),
    DDL(
        "CREATE OR REPLACE FUNCTION statistics_touch_updated_at() RETURNS trigger AS $$ "
        "BEGIN NEW.updated_at = now(); RETURN NEW; END; $$ LANGUAGE plpgsql"
    ).execute_if(dialect="postgresql"),
    DDL(
        "CREATE TRIGGER statistics_touch_updated_at BEFORE UPDATE ON statistics "
        "FOR EACH ROW EXECUTE FUNCTION statistics_touch_updated_at()"
    ).execute_if(dialect="postgresql"),
]

for _ddl in _METRIC_TOUCH_DDL:
    event.listen(Metric.__table__, "after_create", _ddl)
