"""FastMCP server bootstrap for Asana ingestion."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastmcp import FastMCP

from . import __version__
from .asana.client import ResourceFetcher
from .config import AsanaIngestSettings, get_settings
from .tools import ToolHandles, register_tools


def configure_logging(level: str) -> None:
    """Configure root logging for the server and the command-line tools."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(getattr(logging, level, logging.INFO), logging.WARNING))


def build_status(settings: AsanaIngestSettings, handles: ToolHandles) -> dict[str, Any]:
    """Summarize configuration and the most recent ingestion run."""

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "server_version": __version__,
        "log_level": settings.log_level,
        "asana": {
            "api_base_url": settings.api_base_url,
            "token_configured": bool(settings.token_value()),
            "request_timeout": settings.request_timeout,
            "story_limit": settings.story_limit,
        },
        "display_timezone": settings.display_timezone,
        "last_run": dict(handles.last_run) or None,
    }


def create_server(
    settings: Optional[AsanaIngestSettings] = None,
    client: ResourceFetcher | None = None,
) -> FastMCP:
    """Instantiate the FastMCP server with the ingestion tools and a status resource."""

    settings = settings or get_settings()

    server = FastMCP(
        name="Asana Ingest",
        version=__version__,
        instructions=(
            "Asana Ingest turns an Asana task, its comments and its whole subtask "
            "tree into one Markdown document. Call ingest_task with a task id or URL."
        ),
    )

    handles = register_tools(server, settings=settings, client=client)

    @server.resource(
        "resource://asana-ingest/status",
        name="asana_ingest_status",
        description="Configuration summary and the outcome of the last ingestion run.",
        mime_type="application/json",
    )
    def status_resource() -> str:
        """Return a JSON string summarizing runtime state."""

        return json.dumps(build_status(settings, handles))

    setattr(server, "tool_handles", handles)
    setattr(server, "ingest_settings", settings)
    return server


def main() -> None:
    """Entry point for running the Asana ingest MCP server via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching Asana ingest MCP server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "token_configured": bool(settings.token_value()),
        },
    )
    server.run()


if __name__ == "__main__":
    main()
