"""Sequential traversal of an Asana task tree."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..asana.client import ResourceFetcher
from ..asana.models import COMMENT_SUBTYPE, AsanaStory, AsanaTask, EnrichedTask, SubtaskRef
from ..errors import AsanaResponseError
from .logbook import LogSink, discard

TASK_FIELDS = "name,notes,assignee.name,due_on,completed,permalink_url"
STORY_FIELDS = "text,created_at,created_by.name,resource_subtype"
SUBTASK_FIELDS = "gid,name"
DEFAULT_STORY_LIMIT = 100

_T = TypeVar("_T")

_TASK = TypeAdapter(AsanaTask)
_STORIES = TypeAdapter(list[AsanaStory])
_SUBTASKS = TypeAdapter(list[SubtaskRef])


@dataclass(slots=True)
class _Frame:
    """A task whose own reads are done and whose subtasks are being visited."""

    task: AsanaTask
    depth: int
    stories: tuple[AsanaStory, ...]
    pending: deque[SubtaskRef]
    total: int
    children: list[EnrichedTask] = field(default_factory=list)
    skipped: int = 0

    @property
    def position(self) -> int:
        return self.total - len(self.pending)

    def build(self) -> EnrichedTask:
        return EnrichedTask.from_task(
            self.task,
            stories=self.stories,
            subtasks=tuple(self.children),
            skipped_subtasks=self.skipped,
        )


def _validate(adapter: TypeAdapter[_T], payload: Any, path: str) -> _T:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise AsanaResponseError(
            f"Asana API Error: unexpected payload from {path} ({exc.error_count()} validation errors)",
            path=path,
        ) from exc


async def _open_frame(
    client: ResourceFetcher,
    task_gid: str,
    depth: int,
    story_limit: int,
) -> _Frame:
    """Perform the three reads for one task: metadata, stories, subtask listing."""

    task_path = f"/tasks/{task_gid}"
    data = await client.fetch(task_path, {"opt_fields": TASK_FIELDS})
    if not isinstance(data, dict):
        raise AsanaResponseError(
            f"Asana API Error: unexpected payload from {task_path}",
            path=task_path,
        )
    task = _validate(_TASK, {**data, "gid": data.get("gid") or task_gid}, task_path)

    stories_path = f"/tasks/{task_gid}/stories"
    raw_stories = await client.fetch(
        stories_path,
        {"opt_fields": STORY_FIELDS, "limit": story_limit},
    )
    # Only comments are kept; other story kinds are dropped before validation.
    if isinstance(raw_stories, list):
        raw_stories = [
            story
            for story in raw_stories
            if isinstance(story, dict) and story.get("resource_subtype") == COMMENT_SUBTYPE
        ]
    comments = tuple(_validate(_STORIES, raw_stories, stories_path))

    subtasks_path = f"/tasks/{task_gid}/subtasks"
    raw_subtasks = await client.fetch(subtasks_path, {"opt_fields": SUBTASK_FIELDS})
    listing = _validate(_SUBTASKS, raw_subtasks, subtasks_path)

    return _Frame(
        task=task,
        depth=depth,
        stories=comments,
        pending=deque(listing),
        total=len(listing),
    )


async def process_task(
    task_gid: str,
    client: ResourceFetcher,
    log: LogSink = discard,
    depth: int = 0,
    *,
    story_limit: int = DEFAULT_STORY_LIMIT,
) -> EnrichedTask:
    """Fetch ``task_gid`` and its whole subtask tree.

    Subtasks are visited depth first, one request at a time, in the order the
    API lists them. Traversal keeps an explicit stack of frames, so deep trees
    do not hit the interpreter's recursion limit.

    Failures while reading ``task_gid`` itself propagate. A subtask whose reads
    fail is logged at ``error`` level, counted in its parent's
    ``skipped_subtasks`` and left out of the tree; its siblings are still
    processed.

    Only ``depth == 0`` narrates progress through ``log``.
    """

    if depth == 0:
        log(f"Fetching main task details ({task_gid})...", "info")

    root = await _open_frame(client, task_gid, depth, story_limit)
    if depth == 0 and root.total:
        log(f"Found {root.total} subtasks. Processing...", "info")

    stack: list[_Frame] = [root]
    while True:
        frame = stack[-1]
        if frame.pending:
            subtask = frame.pending.popleft()
            if frame.depth == 0:
                log(f'Processing subtask {frame.position}/{frame.total}: "{subtask.name}"', "info")
            try:
                child = await _open_frame(client, subtask.gid, frame.depth + 1, story_limit)
            except Exception as exc:
                frame.skipped += 1
                indent = "  " * frame.depth
                log(f"{indent}Failed to fetch subtask {subtask.gid}: {exc}", "error")
                continue
            stack.append(child)
            continue

        stack.pop()
        node = frame.build()
        if not stack:
            return node
        stack[-1].children.append(node)


__all__ = [
    "DEFAULT_STORY_LIMIT",
    "STORY_FIELDS",
    "SUBTASK_FIELDS",
    "TASK_FIELDS",
    "process_task",
]
