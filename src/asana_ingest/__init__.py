"""Flatten Asana task hierarchies into Markdown documents."""

from .asana import AsanaClient, EnrichedTask
from .errors import (
    AsanaApiError,
    AsanaAuthError,
    AsanaIngestError,
    AsanaNotFoundError,
    AsanaRateLimitError,
    AsanaResponseError,
    AsanaTransportError,
    InvalidTaskReferenceError,
)
from .ingest import LogBook, extract_task_gid, process_task, run_ingestion
from .render import render_markdown

__version__ = "0.1.0"

__all__ = [
    "AsanaApiError",
    "AsanaAuthError",
    "AsanaClient",
    "AsanaIngestError",
    "AsanaNotFoundError",
    "AsanaRateLimitError",
    "AsanaResponseError",
    "AsanaTransportError",
    "EnrichedTask",
    "InvalidTaskReferenceError",
    "LogBook",
    "__version__",
    "extract_task_gid",
    "process_task",
    "render_markdown",
    "run_ingestion",
]
