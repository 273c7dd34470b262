from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserItem(BaseModel):
    id: int
    name: str
    email: str
    role: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectItem(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    user_name: str


class CreateProjectRequest(BaseModel):
    # Missing or empty title/user_id is rejected with 400 by the handler. Values are stored as sent.
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    user_id: Optional[int] = None


class CreateProjectResponse(BaseModel):
    id: int
    message: str = "Project created successfully"


class HealthResponse(BaseModel):
    status: str
    ts: str
