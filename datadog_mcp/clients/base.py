"""Shared behaviour of the domain clients.

Every public client method returns an ``Outcome`` and never raises: input
problems and SDK exceptions are both converted here.
"""

from typing import Any, Optional

from ..core.errors import InputValidationError, upstream_error
from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def to_plain(value: Any) -> Any:
    """Convert SDK model objects (anything with ``to_dict``) into plain data."""
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    # SDK enums (ModelSimple) carry their wire value on ``value``
    if hasattr(value, "value") and not isinstance(value, (str, int, float, bool)):
        return value.value
    return value


def clamp_page_size(requested: Optional[int], default: int = DEFAULT_PAGE_SIZE,
                    maximum: int = MAX_PAGE_SIZE) -> int:
    """``min(requested, maximum)`` with ``default`` when absent and a floor of 1."""
    size = default if requested is None else int(requested)
    return max(1, min(size, maximum))


def validate_range(from_: Any, to: Any) -> None:
    if from_ is None or to is None:
        raise InputValidationError("Both from and to are required")
    if from_ >= to:
        raise InputValidationError("Start time must be before end time")


def require(value: Any, message: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InputValidationError(message)


class BaseClient:
    """Common plumbing for the clients of one Datadog domain."""

    domain = "datadog"

    def __init__(self, logger: DatadogMcpLogger):
        self.logger = logger

    def _failure(self, action: str, exc: Exception) -> Outcome:
        error = upstream_error(exc)
        if isinstance(exc, InputValidationError):
            self.logger.debug(f"Rejected {action}: {error.message}", self.domain)
        else:
            self.logger.error(f"Failed to {action}: {error.message}", self.domain)
        return Outcome.failure(error)

    @staticmethod
    def _ok(data: Any) -> Outcome:
        return Outcome.success(to_plain(data))
