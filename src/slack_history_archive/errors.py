from __future__ import annotations


class FetchError(Exception):
    """Base class for a failed page fetch."""


class RateLimitedError(FetchError):
    def __init__(self, retry_after: float | None = None):
        self.retry_after = retry_after
        hint = f" (retry after {retry_after:g}s)" if retry_after is not None else ""
        super().__init__(f"Rate limited by the Slack API{hint}")


class ApiError(FetchError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Error fetching data from the Slack API: {message}")


class TransportError(FetchError):
    def __init__(self, cause: Exception | str):
        self.cause = cause
        super().__init__(f"Transport error talking to the Slack API: {cause}")


TRANSIENT_ERRORS: tuple[type[FetchError], ...] = (RateLimitedError, TransportError)


class ArchiveError(Exception):
    """The single fatal outcome of an archive run."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
