from __future__ import annotations


class SignalistError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(SignalistError):
    """A required secret or URL is missing."""

    status_code = 500


class UpstreamError(SignalistError):
    """An external service answered with an error or could not be reached."""

    status_code = 502

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NewsFetchError(UpstreamError):
    pass


class UserNotFoundError(SignalistError):
    status_code = 404


class ValidationError(SignalistError):
    status_code = 400


class WatchlistConflictError(SignalistError):
    """The row was removed by a concurrent request before it could be read back."""

    status_code = 409
