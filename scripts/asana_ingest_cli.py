"""Export an Asana task tree as Markdown from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TextIO

from asana_ingest.config import AsanaIngestSettings
from asana_ingest.errors import AsanaApiError, InvalidTaskReferenceError
from asana_ingest.ingest import IngestResult, LogBook, LogEntry, export_filename, run_ingestion
from asana_ingest.server import configure_logging

EXIT_API_ERROR = 1
EXIT_INPUT_ERROR = 2

_LEVEL_MARKERS = {"info": "-", "success": "+", "error": "!"}


def load_settings() -> AsanaIngestSettings:
    """Construct settings from the environment."""

    return AsanaIngestSettings()


def _format_entry(entry: LogEntry) -> str:
    marker = _LEVEL_MARKERS.get(entry.level, "-")
    return f"[{entry.timestamp:%H:%M:%S}] {marker} {entry.message}"


def _echo_to(stream: TextIO):
    def _echo(entry: LogEntry) -> None:
        print(_format_entry(entry), file=stream, flush=True)

    return _echo


def ingest(args: argparse.Namespace) -> int:
    settings = load_settings()
    token = args.token or settings.token_value()
    log = LogBook(mirror=False, on_entry=None if args.quiet else _echo_to(sys.stderr))

    try:
        result: IngestResult = asyncio.run(run_ingestion(args.reference, token, log, settings=settings))
    except InvalidTaskReferenceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except AsanaApiError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_API_ERROR

    if args.json:
        output_text = json.dumps(result.task.model_dump(mode="json"), indent=2)
    else:
        output_text = result.markdown

    output_path: Path | None = None
    if args.output:
        output_path = Path(args.output)
    elif args.save:
        output_path = Path(export_filename())

    if output_path is not None:
        output_path.write_text(output_text, encoding="utf-8")
        if not args.quiet:
            print(f"Wrote {output_path}", file=sys.stderr)
    else:
        sys.stdout.write(output_text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert an Asana task and its subtask tree into a Markdown document."
    )
    parser.add_argument("reference", help="Asana task id or task URL")
    parser.add_argument(
        "--token",
        default=None,
        help="Personal access token (default: ASANA_ACCESS_TOKEN)",
    )
    destination = parser.add_mutually_exclusive_group()
    destination.add_argument("--output", help="Write the document to this path instead of stdout")
    destination.add_argument(
        "--save",
        action="store_true",
        help="Write the document to asana-ingest-<timestamp>.md in the current directory",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the enriched task tree as JSON instead of Markdown",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print progress messages")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(load_settings().log_level if not args.quiet else "WARNING")
    exit_code = ingest(args)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
