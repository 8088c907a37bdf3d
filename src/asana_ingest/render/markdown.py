"""Render an enriched task tree as a single Markdown document."""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Iterator, Sequence

from ..asana.models import AsanaStory, EnrichedTask

UNASSIGNED = "Unassigned"
UNKNOWN_AUTHOR = "Unknown"
NO_DUE_DATE = "No date"
NO_DESCRIPTION = "_No description provided._"
STATUS_COMPLETED = "✅ Completed"
STATUS_INCOMPLETE = "⭕ Incomplete"
ICON_COMPLETED = "✅"
ICON_INCOMPLETE = "⭕"
COMMENT_ICON = "🗣️"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_due_date(value: date | None) -> str:
    """Format a due date like ``Jan 5, 2025``."""

    if value is None:
        return NO_DUE_DATE
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_timestamp(value: datetime, tz: tzinfo = timezone.utc) -> str:
    """Format a story timestamp like ``1/5/2025, 3:04:05 PM`` in ``tz``."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
    )


def _author(story: AsanaStory) -> str:
    return story.author_name or UNKNOWN_AUTHOR


def _render_root_comments(stories: Sequence[AsanaStory], tz: tzinfo) -> list[str]:
    parts = ["## Comments\n\n"]
    for story in stories:
        parts.append(f"### {COMMENT_ICON} {_author(story)} - {format_timestamp(story.created_at, tz)}\n")
        parts.append(f"{story.text}\n\n")
        parts.append("---\n\n")
    return parts


def _render_subtask_body(sub: EnrichedTask, index: int, level: int, parts: list[str]) -> None:
    heading = "#" * (level + 2)
    icon = ICON_COMPLETED if sub.completed else ICON_INCOMPLETE
    parts.append(f"{heading} {index}. {icon} {sub.name}\n\n")
    parts.append(
        f"*Assignee: {sub.assignee_name or UNASSIGNED} | Due: {format_due_date(sub.due_on)}*\n\n"
    )

    if sub.notes:
        quoted = sub.notes.replace("\n", "\n> ")
        parts.append(f"> {quoted}\n\n")

    if sub.stories:
        parts.append("**Comments:**\n")
        for story in sub.stories:
            text = story.text.replace("\n", " ")
            parts.append(f"- **{_author(story)}**: {text}\n")
        parts.append("\n")


def _render_subtasks(subtasks: Sequence[EnrichedTask], level: int, parts: list[str]) -> None:
    # Each subtask ends with a blank line, written after its own subtasks.
    stack: list[tuple[Iterator[tuple[int, EnrichedTask]], int]] = [
        (enumerate(subtasks, start=1), level)
    ]
    while stack:
        entries, depth = stack[-1]
        item = next(entries, None)
        if item is None:
            stack.pop()
            if stack:
                parts.append("\n")
            continue

        index, sub = item
        _render_subtask_body(sub, index, depth, parts)
        if sub.subtasks:
            stack.append((enumerate(sub.subtasks, start=1), depth + 1))
            continue
        parts.append("\n")


def render_markdown(task: EnrichedTask, *, tz: tzinfo = timezone.utc) -> str:
    """Render ``task`` and its subtree.

    The root gets a title, a metadata line, a description and, when present, a
    full comments section. Subtasks follow as numbered headings whose depth
    grows with nesting (``###`` for direct children, ``####`` below them, and
    so on), each with a compact metadata line, quoted notes and one bullet per
    comment. Output depends only on ``task`` and ``tz``.
    """

    parts: list[str] = [f"# {task.name}\n\n"]

    status = STATUS_COMPLETED if task.completed else STATUS_INCOMPLETE
    parts.append(f"**Link:** [Open in Asana]({task.permalink_url})\n")
    parts.append(
        f"**Assignee:** {task.assignee_name or UNASSIGNED} | "
        f"**Due:** {format_due_date(task.due_on)} | "
        f"**Status:** {status}\n\n"
    )

    parts.append("## Description\n\n")
    parts.append(f"{task.notes}\n\n" if task.notes else f"{NO_DESCRIPTION}\n\n")

    if task.stories:
        parts.extend(_render_root_comments(task.stories, tz))

    if task.subtasks:
        parts.append("## Subtasks\n\n")
        _render_subtasks(task.subtasks, 1, parts)

    return "".join(parts)


__all__ = ["format_due_date", "format_timestamp", "render_markdown"]
