"""End-to-end ingestion: user input in, Markdown out."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from ..asana.client import AsanaClient, ResourceFetcher
from ..asana.models import EnrichedTask
from ..config import AsanaIngestSettings, get_settings
from ..errors import InvalidTaskReferenceError
from ..render import render_markdown
from .engine import process_task
from .logbook import LogSink, discard
from .references import require_task_gid


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Outcome of a successful ingestion run."""

    task_gid: str
    task: EnrichedTask
    markdown: str


def export_filename(now: datetime | None = None) -> str:
    """Default file name for a saved document, e.g. ``asana-ingest-1736071200000.md``."""

    moment = now or datetime.now(timezone.utc)
    return f"asana-ingest-{int(moment.timestamp() * 1000)}.md"


async def run_ingestion(
    reference: str,
    token: str | None,
    log: LogSink = discard,
    *,
    settings: AsanaIngestSettings | None = None,
    client: ResourceFetcher | None = None,
) -> IngestResult:
    """Resolve ``reference``, ingest the task tree and render it.

    Input problems raise :class:`InvalidTaskReferenceError` before any request
    is made. A failure while reading the root task is logged and re-raised with
    its message unchanged. ``client`` overrides the HTTP client built from
    ``settings``.
    """

    settings = settings or get_settings()
    token = (token or "").strip()
    if not token and client is None:
        raise InvalidTaskReferenceError("Please enter your Asana Personal Access Token.")

    task_gid = require_task_gid(reference)

    log("Starting ingestion process...", "info")
    log(f"Target Task ID: {task_gid}", "info")

    try:
        if client is not None:
            task = await process_task(task_gid, client, log, story_limit=settings.story_limit)
        else:
            async with AsanaClient(
                token,
                base_url=settings.api_base_url,
                timeout=settings.request_timeout,
            ) as http_client:
                task = await process_task(
                    task_gid,
                    http_client,
                    log,
                    story_limit=settings.story_limit,
                )
    except Exception as exc:
        log(f"Failed: {exc}", "error")
        raise

    log("Processing complete. Generating Markdown...", "success")
    markdown = render_markdown(task, tz=settings.tzinfo)
    return IngestResult(task_gid=task_gid, task=task, markdown=markdown)


__all__ = ["IngestResult", "export_filename", "run_ingestion"]
