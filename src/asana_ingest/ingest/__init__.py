"""Task reference resolution, tree ingestion and the end-to-end pipeline."""

from .engine import process_task
from .logbook import LogBook, LogEntry, LogLevel, LogSink, discard
from .pipeline import IngestResult, export_filename, run_ingestion
from .references import extract_task_gid, require_task_gid

__all__ = [
    "IngestResult",
    "LogBook",
    "LogEntry",
    "LogLevel",
    "LogSink",
    "discard",
    "export_filename",
    "extract_task_gid",
    "process_task",
    "require_task_gid",
    "run_ingestion",
]
