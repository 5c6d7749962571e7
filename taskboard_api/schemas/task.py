from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from taskboard_api.db.models import MemberType


class TaskMemberRead(BaseModel):
    """Member assigned to a task."""
    id: UUID = Field(..., description="Member id")
    user_id: UUID = Field(..., description="User id")
    type: MemberType = Field(..., description="Member role")
    email: Optional[str] = Field(None)

    class Config:
        from_attributes = True


class TaskRead(BaseModel):
    """Task read model with fixed fields; custom columns are included when set."""
    id: UUID = Field(..., description="Task id")
    sheet_id: UUID = Field(..., description="Sheet id")
    workspace_id: UUID = Field(..., description="Workspace id")
    name: str = Field(..., description="Task name")
    status: Optional[str] = Field(None)
    priority: Optional[str] = Field(None)
    links: Optional[List[str]] = Field(None)
    price: Optional[float] = Field(None)
    paid: Optional[bool] = Field(None)
    order: int = Field(..., description="Display position")
    text1: Optional[str] = Field(None)
    number1: Optional[float] = Field(None)
    checkbox1: Optional[bool] = Field(None)
    select1: Optional[str] = Field(None)
    date1: Optional[datetime] = Field(None)
    members: List[TaskMemberRead] = Field(default_factory=list)
    created_at: datetime = Field(..., description="Created at")
    updated_at: datetime = Field(..., description="Updated at")

    class Config:
        from_attributes = True


class PaginationRead(BaseModel):
    """Pagination block of list responses."""
    page: int = Field(..., ge=1)
    pages: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
    count: int = Field(..., ge=0)


class TaskListResponse(BaseModel):
    """A page of tasks."""
    tasks: List[TaskRead]
    pagination: PaginationRead


class TaskReorderRequest(BaseModel):
    """
    Drag-and-drop reorder of tasks; taskId[i] receives orders[i] after reversal.

    Element types are checked by the reorder service so that every problem is
    reported together.
    """
    taskId: Any = Field(..., description="Ids of the tasks to reorder", examples=[["<task id>"]])
    orders: Any = Field(..., description="New positions, paired with taskId", examples=[[1]])
