from __future__ import annotations

from typing import Any, Mapping

from asana_ingest.errors import AsanaNotFoundError


def task_payload(gid: str, name: str, **fields: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "gid": gid,
        "name": name,
        "notes": "",
        "assignee": None,
        "due_on": None,
        "completed": False,
        "permalink_url": f"https://app.asana.com/0/0/{gid}",
    }
    payload.update(fields)
    return payload


def comment(
    gid: str,
    text: str,
    *,
    author: str | None = "Ana",
    created_at: str = "2025-01-05T15:04:05.000Z",
) -> dict[str, Any]:
    return {
        "gid": gid,
        "created_at": created_at,
        "created_by": {"gid": f"u-{author}", "name": author} if author else None,
        "resource_subtype": "comment_added",
        "text": text,
        "type": "comment",
    }


def system_story(gid: str, text: str = "changed the due date") -> dict[str, Any]:
    return {
        "gid": gid,
        "created_at": "2025-01-04T09:00:00.000Z",
        "created_by": {"gid": "u-bot", "name": "Asana"},
        "resource_subtype": "due_date_changed",
        "text": text,
        "type": "system",
    }


class FakeAsana:
    """In-memory stand-in for the Asana API that records every read."""

    def __init__(self) -> None:
        self.tasks: dict[str, dict[str, Any]] = {}
        self.stories: dict[str, list[dict[str, Any]]] = {}
        self.children: dict[str, list[str]] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def add_task(
        self,
        gid: str,
        name: str,
        *,
        parent: str | None = None,
        stories: list[dict[str, Any]] | None = None,
        **fields: Any,
    ) -> None:
        self.tasks[gid] = task_payload(gid, name, **fields)
        self.stories[gid] = list(stories or [])
        self.children.setdefault(gid, [])
        if parent is not None:
            self.children.setdefault(parent, []).append(gid)

    def fail(self, path: str, error: Exception) -> None:
        self.failures[path] = error

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]

    async def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        self.calls.append((path, dict(params or {})))
        if path in self.failures:
            raise self.failures[path]

        segments = path.strip("/").split("/")
        gid = segments[1]
        if gid not in self.tasks:
            raise AsanaNotFoundError(
                f"Not Found: Resource at {path} does not exist or you lack access.",
                path=path,
            )
        if len(segments) == 2:
            return dict(self.tasks[gid])
        if segments[2] == "stories":
            return list(self.stories[gid])
        return [{"gid": child, "name": self.tasks[child]["name"]} for child in self.children[gid]]
