"""Caller-owned progress log for ingestion runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterator, Literal
from uuid import uuid4

LogLevel = Literal["info", "success", "error"]
LogSink = Callable[[str, LogLevel], None]

_progress_logger = logging.getLogger("asana_ingest.progress")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A single progress message."""

    id: str
    message: str
    level: LogLevel
    timestamp: datetime

    def as_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "message": self.message,
            "level": self.level,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(slots=True)
class LogBook:
    """Append-only log that can be handed to the engine as its sink.

    Entries are kept in emission order and mirrored to the standard library
    logger ``asana_ingest.progress``. ``on_entry`` is called with every new entry.
    """

    mirror: bool = True
    clock: Callable[[], datetime] = _utcnow
    on_entry: Callable[[LogEntry], None] | None = None
    _entries: list[LogEntry] = field(default_factory=list, init=False, repr=False)

    def __call__(self, message: str, level: LogLevel = "info") -> None:
        entry = LogEntry(
            id=uuid4().hex[:7],
            message=message,
            level=level,
            timestamp=self.clock(),
        )
        self._entries.append(entry)
        if self.mirror:
            _progress_logger.log(logging.ERROR if level == "error" else logging.INFO, message)
        if self.on_entry is not None:
            self.on_entry(entry)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def by_level(self, level: LogLevel) -> list[LogEntry]:
        return [entry for entry in self._entries if entry.level == level]

    def clear(self) -> None:
        self._entries.clear()


def discard(message: str, level: LogLevel = "info") -> None:
    """Sink that drops every message."""


__all__ = ["LogBook", "LogEntry", "LogLevel", "LogSink", "discard"]
