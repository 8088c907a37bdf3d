"""Markdown rendering for enriched task trees."""

from .markdown import format_due_date, format_timestamp, render_markdown

__all__ = ["format_due_date", "format_timestamp", "render_markdown"]
