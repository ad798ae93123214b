"""Pydantic models for task endpoints."""

from datetime import datetime
from typing import List, Union

from pydantic import BaseModel, Field


class TaskStatusEntry(BaseModel):
    """One line of a task status log."""

    timestamp: datetime = Field(..., description="When the message was recorded")
    message: str = Field(..., description="Progress message")


class TaskSummary(BaseModel):
    """Short task description used in listings."""

    id: str = Field(..., description="Task id")
    name: str = Field(..., description="Task name")
    created: datetime = Field(..., description="When the task was registered")
    started: Union[datetime, None] = Field(None, description="When the work began executing")
    completed: Union[datetime, None] = Field(None, description="Completion time")
    done: bool = Field(..., description="Whether the task has finished")
    failed: bool = Field(..., description="Whether the task finished with an error")


class TaskInfo(TaskSummary):
    """Task description with the full status log."""

    status_list: List[TaskStatusEntry] = Field(..., description="Status log, oldest first")


class ListTasksResponse(BaseModel):
    """Response model for listing tasks."""

    tasks: List[TaskSummary] = Field(..., description="Known tasks")
    count: int = Field(..., description="Total number of tasks")
