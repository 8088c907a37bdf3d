"""Tool registration for the Asana ingest MCP server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from fastmcp import Context, FastMCP

from ..asana.client import ResourceFetcher
from ..asana.models import EnrichedTask
from ..config import AsanaIngestSettings
from ..ingest import LogBook, extract_task_gid, run_ingestion

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolHandles:
    ingest_task: Any
    resolve_task_reference: Any
    last_run: dict[str, Any]


def _summarize_tree(task: EnrichedTask) -> dict[str, int]:
    nodes = list(task.walk())
    return {
        "subtask_count": len(nodes) - 1,
        "skipped_subtasks": sum(node.skipped_subtasks for node in nodes),
        "comment_count": sum(len(node.stories) for node in nodes),
    }


def register_tools(
    server: FastMCP,
    *,
    settings: AsanaIngestSettings,
    client: ResourceFetcher | None = None,
) -> ToolHandles:
    """Register the ingestion tools on the server.

    ``client`` replaces the per-call HTTP client; it is meant for tests and for
    embedding the server behind a shared connection.
    """

    last_run: dict[str, Any] = {}

    async def _ingest_task(
        task_reference: str,
        access_token: str | None = None,
        include_log: bool = True,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Fetch an Asana task with all subtasks and comments and return it as Markdown."""

        token = (access_token or "").strip() or settings.token_value()
        book = LogBook()
        started_at = datetime.now(timezone.utc)

        try:
            result = await run_ingestion(
                task_reference,
                token,
                book,
                settings=settings,
                client=client,
            )
        except Exception as exc:
            last_run.clear()
            last_run.update(
                {
                    "status": "failed",
                    "reference": task_reference,
                    "error": str(exc),
                    "error_type": exc.__class__.__name__,
                    "started_at": started_at.isoformat(),
                }
            )
            await _emit_log(
                context,
                "error",
                "Ingestion failed",
                extra={"reference": task_reference, "error": str(exc)},
            )
            raise

        summary = _summarize_tree(result.task)
        last_run.clear()
        last_run.update(
            {
                "status": "completed",
                "task_gid": result.task_gid,
                "title": result.task.name,
                "started_at": started_at.isoformat(),
                "finished_at": datetime.now(timezone.utc).isoformat(),
                "error_entries": len(book.by_level("error")),
                **summary,
            }
        )

        await _emit_log(
            context,
            "info",
            "Ingested Asana task",
            extra={"task_gid": result.task_gid, **summary},
        )

        response: dict[str, Any] = {
            "task_gid": result.task_gid,
            "title": result.task.name,
            "subtask_count": summary["subtask_count"],
            "skipped_subtasks": summary["skipped_subtasks"],
            "markdown": result.markdown,
        }
        if include_log:
            response["log"] = [entry.as_dict() for entry in book]
        return response

    def _resolve_task_reference(task_reference: str) -> dict[str, Any]:
        """Extract the task id from a raw id or an Asana URL."""

        task_gid = extract_task_gid(task_reference)
        if task_gid is None:
            return {
                "task_gid": None,
                "error": "Invalid Asana URL. Could not extract Task ID.",
            }
        return {"task_gid": task_gid}

    tool_ingest = server.tool(
        name="ingest_task",
        description=(
            "Fetch an Asana task, its comments and its full subtask tree, and return "
            "a single Markdown document suitable for LLM context. Accepts a task id "
            "or any Asana task URL. Uses ASANA_ACCESS_TOKEN unless a token is given."
        ),
    )(_ingest_task)

    tool_resolve = server.tool(
        name="resolve_task_reference",
        description="Extract the Asana task id from a raw id or an Asana URL without calling the API.",
    )(_resolve_task_reference)

    return ToolHandles(
        ingest_task=tool_ingest,
        resolve_task_reference=tool_resolve,
        last_run=last_run,
    )


_MCP_LEVELS = {"debug", "info", "warning", "error"}


async def _emit_log(
    context: Context | None,
    level: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log locally and, when a request context is available, to the MCP client."""

    payload = extra or {}
    local = getattr(logger, level, logger.info)
    local(message, extra=payload)

    if context is None:
        return
    ctx_log = getattr(context, "log", None)
    if callable(ctx_log):
        await ctx_log(
            f"{message}: {payload}" if payload else message,
            level=level if level in _MCP_LEVELS else "info",
        )


__all__ = ["register_tools", "ToolHandles"]
