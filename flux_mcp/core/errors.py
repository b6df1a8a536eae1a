"""Failure kinds raised by the request/response translation layer.

Propagation policy:
    - `ValidationError`, `UpstreamError`, `ExtractionError` and
      `DownloadError` abort a tool call and are rendered as failure envelopes.
    - `PathError` is recovered by the image handler and reported as a warning.
    - `ConfigError` is raised only at startup.

Every message carries the context needed to act on it without a traceback
(field name, HTTP status, path).
"""


class FluxError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(FluxError):
    """Required configuration is missing or malformed."""


class ValidationError(FluxError):
    """Caller input violates a declared constraint."""

    def __init__(self, field: str, constraint: str):
        self.field = field
        self.constraint = constraint
        super().__init__(f"Invalid parameter '{field}': {constraint}")


class UpstreamError(FluxError):
    """The generation endpoint answered with a failure (or not at all)."""

    def __init__(self, status_code: int | None, body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"API request failed: {body}"
        else:
            message = f"API request failed: {status_code} - {body}"
        super().__init__(message)


class ExtractionError(FluxError):
    """The upstream reply holds no recognizable image locator."""


class DownloadError(FluxError):
    """Fetching the generated image failed."""

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to fetch image: {status_code}"
        else:
            message = f"Failed to fetch image: {reason or 'unknown error'}"
        super().__init__(message)


class PathError(FluxError):
    """The save directory cannot be created or written to."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")
