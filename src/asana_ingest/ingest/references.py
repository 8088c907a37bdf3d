"""Turn user supplied task references into Asana task ids."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from ..errors import InvalidTaskReferenceError

ASANA_DOMAIN = "asana.com"

_DIGITS = re.compile(r"[0-9]+")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_HOSTNAME = re.compile(r"[a-z0-9](?:[a-z0-9.-]*[a-z0-9])?")
# .../0/<project|inbox|search>/<task id>
_FALLBACK = re.compile(r"asana\.com/0/[^/]+/([0-9]+)")


def _split_url(value: str) -> tuple[str, str] | None:
    """Return ``(hostname, path)`` or ``None`` when ``value`` is not a usable URL."""

    candidate = value if _SCHEME.match(value) else f"https://{value}"
    try:
        parts = urlsplit(candidate)
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return None

    hostname = (parts.hostname or "").removesuffix(".")
    if not _HOSTNAME.fullmatch(hostname):
        return None
    return hostname, parts.path


def _is_asana_host(hostname: str) -> bool:
    return hostname == ASANA_DOMAIN or hostname.endswith(f".{ASANA_DOMAIN}")


def extract_task_gid(value: str | None) -> str | None:
    """Extract a task gid from a raw id or from any of the Asana URL shapes.

    Handles project, inbox, search and focused (``.../<gid>/f``) URLs by taking
    the last purely numeric path segment. Strings that do not parse as URLs are
    scanned for ``asana.com/0/<context>/<gid>``. Returns ``None`` when no id
    can be found.
    """

    if not value:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None

    if _DIGITS.fullmatch(cleaned):
        return cleaned

    split = _split_url(cleaned)
    if split is not None:
        hostname, path = split
        if not _is_asana_host(hostname):
            return None
        numeric = [segment for segment in path.split("/") if _DIGITS.fullmatch(segment)]
        if numeric:
            return numeric[-1]

    match = _FALLBACK.search(cleaned)
    if match:
        return match.group(1)
    return None


def require_task_gid(value: str | None) -> str:
    """Like :func:`extract_task_gid` but raise when nothing can be extracted."""

    gid = extract_task_gid(value)
    if gid is None:
        raise InvalidTaskReferenceError("Invalid Asana URL. Could not extract Task ID.")
    return gid


__all__ = ["ASANA_DOMAIN", "extract_task_gid", "require_task_gid"]
