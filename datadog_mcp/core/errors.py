"""Error types shared by the Datadog clients and tools."""

from typing import Any, Optional


class DatadogClientError(Exception):
    """Error produced by a domain client.

    Carries the human-readable message, the HTTP status code reported by
    Datadog (if any) and the original exception.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, cause: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code!r})"


class InputValidationError(DatadogClientError):
    """Caller input was missing or malformed; raised before any network call."""


class UpstreamError(DatadogClientError):
    """The Datadog API rejected the request."""


class FallbackExhausted(UpstreamError):
    """Both the preferred and the fallback upstream paths failed."""


class InvalidTimestamp(ValueError):
    """A value could not be read as an epoch timestamp or ISO-8601 string."""


class MissingEnvironmentVariable(RuntimeError):
    """A required environment variable is not set."""


class ToolNotFoundError(LookupError):
    """No tool is registered under the requested name."""


def upstream_error(exc: BaseException, error_cls: type = UpstreamError) -> DatadogClientError:
    """Convert an exception raised by the Datadog SDK into an ``UpstreamError``.

    ``datadog_api_client.exceptions.ApiException`` exposes ``status`` and
    ``reason``; other errors may carry ``status_code``. The status defaults to
    500 when neither is present.
    """
    if isinstance(exc, DatadogClientError):
        return exc

    status = getattr(exc, "status", None)
    if not isinstance(status, int):
        status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = 500

    reason = getattr(exc, "reason", None)
    detail = reason if isinstance(reason, str) and reason else str(exc)
    return error_cls(f"HTTP {status}: {detail}", status, exc)
