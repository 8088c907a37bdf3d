"""Asana resource models used by the ingestion engine."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMMENT_SUBTYPE = "comment_added"


class _AsanaModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class AsanaUser(_AsanaModel):
    """A user reference as embedded in tasks and stories."""

    gid: str = Field(default="", description="Asana user id.")
    name: str = Field(default="", description="Display name of the user.")

    @field_validator("gid", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return "" if value is None else value


class AsanaStory(_AsanaModel):
    """A single activity entry on a task."""

    gid: str = Field(default="", description="Story id.")
    created_at: datetime = Field(..., description="When the story was created.")
    created_by: AsanaUser | None = Field(default=None, description="Author, absent for system activity.")
    resource_subtype: str = Field(default="", description="Story subtype tag, e.g. comment_added.")
    text: str = Field(default="", description="Plain-text body of the story.")
    type: str | None = Field(default=None, description="Coarse story type (comment or system).")

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_comment(self) -> bool:
        return self.resource_subtype == COMMENT_SUBTYPE

    @property
    def author_name(self) -> str | None:
        if self.created_by is None or not self.created_by.name:
            return None
        return self.created_by.name


class SubtaskRef(_AsanaModel):
    """Row of the shallow subtask listing."""

    gid: str = Field(..., description="Subtask id.")
    name: str = Field(default="", description="Subtask title.")

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Any:
        return "" if value is None else value


class AsanaTask(_AsanaModel):
    """Task metadata as returned by ``GET /tasks/{gid}``."""

    gid: str = Field(..., description="Task id.")
    name: str = Field(default="", description="Task title.")
    notes: str = Field(default="", description="Plain-text description, empty when unset.")
    assignee: AsanaUser | None = Field(default=None, description="Assigned user, if any.")
    due_on: date | None = Field(default=None, description="Due date, if any.")
    completed: bool = Field(default=False, description="Completion flag.")
    permalink_url: str = Field(default="", description="Canonical link to the task in Asana.")

    @field_validator("gid")
    @classmethod
    def _normalize_gid(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Task gid must not be empty")
        return normalized

    @field_validator("name", "notes", "permalink_url", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def assignee_name(self) -> str | None:
        if self.assignee is None or not self.assignee.name:
            return None
        return self.assignee.name


class EnrichedTask(AsanaTask):
    """A task together with its comments and its fully resolved subtask tree."""

    stories: tuple[AsanaStory, ...] = Field(
        default=(),
        description="Comment stories in the order the API returned them.",
    )
    subtasks: tuple[EnrichedTask, ...] = Field(
        default=(),
        description="Direct subtasks in listing order.",
    )
    skipped_subtasks: int = Field(
        default=0,
        ge=0,
        description="Direct subtasks that were listed but could not be fetched.",
    )

    @classmethod
    def from_task(
        cls,
        task: AsanaTask,
        *,
        stories: tuple[AsanaStory, ...] = (),
        subtasks: tuple[EnrichedTask, ...] = (),
        skipped_subtasks: int = 0,
    ) -> EnrichedTask:
        fields = {name: getattr(task, name) for name in AsanaTask.model_fields}
        return cls(
            **fields,
            stories=stories,
            subtasks=subtasks,
            skipped_subtasks=skipped_subtasks,
        )

    def walk(self) -> Iterator[EnrichedTask]:
        """Yield this task and every descendant, depth first in listing order."""

        stack: list[EnrichedTask] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.subtasks))


__all__ = [
    "AsanaStory",
    "AsanaTask",
    "AsanaUser",
    "COMMENT_SUBTYPE",
    "EnrichedTask",
    "SubtaskRef",
]
