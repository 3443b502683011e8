"""Reply shaping for tool handlers.

Successful results are serialized as indented JSON text; failures are
rendered through ``format_tool_error`` so that the caller always gets a
readable message and at most one actionable hint.
"""

import json
from typing import Any, Iterable, List, Optional

from .models import TextContent, ToolReply

# Response size caps
MAX_METRIC_SERIES = 50
MAX_POINTS_PER_SERIES = 100
MAX_METRICS_LISTED = 1000
MAX_LOG_MESSAGE_LENGTH = 200
MAX_LOG_TAGS = 10
MAX_LOG_ATTRIBUTES = 15
MAX_ATTRIBUTE_LENGTH = 200
MAX_EVENTS = 50
MAX_EVENT_TEXT_LENGTH = 300
MAX_EVENT_TAGS = 5
MAX_MONITORS = 100
MAX_TRACES = 50
MAX_TRACE_RESOURCE_LENGTH = 150
MAX_SERVICES = 50
MAX_DEPENDENCIES = 100
MAX_MULTI_ENV_SERVICES = 20
MAX_ENDPOINTS = 200

HINT_CREDENTIALS = "Check DATADOG_API_KEY and DATADOG_APP_KEY and that the app key has the required scopes."
HINT_NOT_FOUND = "No resource found. Check the ID or query and try again."
HINT_RATE_LIMIT = "Datadog rate limit hit. Retry after a short delay or reduce request frequency."
HINT_TIME_RANGE = "Ensure 'from' is before 'to'."
HINT_TIMESTAMP_FORMAT = "Use Unix timestamp (seconds or ms) or ISO 8601 (e.g. 2021-01-01T00:00:00Z)."


def _hint_for(message: str, status_code: Optional[int]) -> Optional[str]:
    # First match wins; the order matters for messages matching several rules.
    if status_code in (401, 403):
        return HINT_CREDENTIALS
    if status_code == 404:
        return HINT_NOT_FOUND
    if status_code == 429:
        return HINT_RATE_LIMIT
    if "must be before" in message or "Start time" in message or ("from" in message and "to" in message):
        return HINT_TIME_RANGE
    if "Invalid" in message and "format" in message:
        return HINT_TIMESTAMP_FORMAT
    return None


def format_tool_error(message: str, status_code: Optional[int] = None) -> str:
    """Return ``Error: <message>`` followed by one hint, when one applies."""
    message = message or "Unknown error"
    text = f"Error: {message}"
    hint = _hint_for(message, status_code)
    if hint:
        text = f"{text}\n\nHint: {hint}"
    return text


def text_reply(text: str, is_error: bool = False) -> ToolReply:
    return ToolReply(is_error=is_error, content=[TextContent(text=text)])


def json_reply(payload: Any) -> ToolReply:
    """Successful reply whose text is the JSON rendering of ``payload``."""
    return text_reply(json.dumps(payload, indent=2, default=str))


def error_reply(message: str, status_code: Optional[int] = None) -> ToolReply:
    return text_reply(format_tool_error(message, status_code), is_error=True)


def truncate(value: Any, limit: int) -> Any:
    """Cut strings longer than ``limit`` characters; other values pass through."""
    if isinstance(value, str) and len(value) > limit:
        return value[:limit] + "..."
    return value


def cap(items: Optional[Iterable[Any]], limit: int) -> List[Any]:
    if not items:
        return []
    return list(items)[:limit]
