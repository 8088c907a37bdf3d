"""Error taxonomy shared by the resolver, the API client and the ingestion engine."""

from __future__ import annotations


class AsanaIngestError(RuntimeError):
    """Base class for ingestion errors."""


class InvalidTaskReferenceError(AsanaIngestError):
    """Raised when user input cannot be turned into a task id or token.

    This is a user-correctable condition, not a fault.
    """


class AsanaApiError(AsanaIngestError):
    """Base class for failures reported while talking to the Asana API."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class AsanaAuthError(AsanaApiError):
    """Raised when the API rejects the access token (HTTP 401)."""


class AsanaNotFoundError(AsanaApiError):
    """Raised when a resource does not exist or is not visible to the token (HTTP 404)."""


class AsanaRateLimitError(AsanaApiError):
    """Raised when the API throttles the token (HTTP 429).

    The condition is surfaced to the caller; nothing retries automatically.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.retry_after = retry_after


class AsanaTransportError(AsanaApiError):
    """Raised for any other HTTP status or for network level failures."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.status_code = status_code


class AsanaResponseError(AsanaTransportError):
    """Raised when a response body does not have the expected shape."""


__all__ = [
    "AsanaApiError",
    "AsanaAuthError",
    "AsanaIngestError",
    "AsanaNotFoundError",
    "AsanaRateLimitError",
    "AsanaResponseError",
    "AsanaTransportError",
    "InvalidTaskReferenceError",
]
