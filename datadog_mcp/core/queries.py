"""Query and filter construction for the Datadog query languages.

These helpers are the only places where caller-supplied strings reach a
Datadog query parser. Every rule is checked before any concatenation happens;
a violation raises ``InputValidationError``.
"""

import math
import re
from typing import Any, Dict, List, Optional, Sequence

from .errors import InputValidationError

MAX_TAG_LENGTH = 256
MAX_LOG_ID_LENGTH = 512

_LOG_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
_RESERVED_TAG_KEYWORDS = re.compile(r" AND | OR ", re.IGNORECASE)


def build_metric_query(metric_name: Any, scope: Optional[str] = None) -> str:
    """Return ``name{scope}``, or the bare name when no scope is given."""
    name = metric_name.strip() if isinstance(metric_name, str) else ""
    if not name:
        raise InputValidationError("metricName must be a non-empty string")

    scope = scope if isinstance(scope, str) else ""
    if "{" in scope or "}" in scope:
        raise InputValidationError(
            "filter must not contain { or } (invalid for metric query syntax)"
        )
    return f"{name}{{{scope}}}" if scope else name


def validate_tags(tags: Any) -> List[str]:
    """Return trimmed tags, rejecting anything that would change query semantics."""
    if not isinstance(tags, (list, tuple)) or not tags:
        raise InputValidationError("At least one tag is required")

    safe_tags = []
    for tag in tags:
        text = tag.strip() if isinstance(tag, str) else ""
        if not text or len(text) > MAX_TAG_LENGTH:
            raise InputValidationError(
                f"Each tag must be a non-empty string of at most {MAX_TAG_LENGTH} characters"
            )
        if _RESERVED_TAG_KEYWORDS.search(text):
            raise InputValidationError(
                "Tags must not contain ' AND ' or ' OR ' (reserved query syntax)"
            )
        safe_tags.append(text)
    return safe_tags


def build_tag_query(tags: Sequence[str]) -> str:
    """``["env:prod", "team:a"]`` -> ``tags:env:prod AND tags:team:a``."""
    return " AND ".join(f"tags:{tag}" for tag in validate_tags(tags))


def validate_log_id(log_id: Any) -> str:
    if not isinstance(log_id, str) or not log_id.strip():
        raise InputValidationError("Log ID is required")

    text = log_id.strip()
    if len(text) > MAX_LOG_ID_LENGTH or not _LOG_ID_PATTERN.match(text):
        raise InputValidationError(
            "Invalid log ID format: use only letters, numbers, hyphens, and underscores"
        )
    return text


def validate_monitor_id(monitor_id: Any) -> int:
    """Return the monitor ID as an int. ``0`` is a valid ID."""
    if monitor_id is None or (isinstance(monitor_id, str) and not monitor_id.strip()):
        raise InputValidationError("Monitor ID is required")
    if isinstance(monitor_id, bool):
        raise InputValidationError("Monitor ID must be a non-negative number")
    if isinstance(monitor_id, int):
        if monitor_id < 0:
            raise InputValidationError("Monitor ID must be a non-negative number")
        return monitor_id
    if isinstance(monitor_id, str):
        text = monitor_id.strip()
        # float() would lose precision above 2**53
        if text.isascii() and text.isdigit():
            return int(text)

    try:
        number = float(monitor_id)
    except (TypeError, ValueError):
        raise InputValidationError("Monitor ID must be a non-negative number") from None

    if not math.isfinite(number) or number < 0 or number != int(number):
        raise InputValidationError("Monitor ID must be a non-negative number")
    return int(number)


def build_log_filter(query: Optional[str], from_iso: Optional[str] = None,
                     to_iso: Optional[str] = None) -> Dict[str, str]:
    """Structured ``{query, from, to}`` filter for the logs and spans backends."""
    log_filter = {"query": query or ""}
    if from_iso is not None:
        log_filter["from"] = from_iso
    if to_iso is not None:
        log_filter["to"] = to_iso
    return log_filter


def build_span_query(service_name: Optional[str], filter_query: Optional[str] = None,
                     env: Optional[str] = None) -> str:
    """Space-joined span search query: ``service:<name> env:<env> <filter>``."""
    parts = []
    if service_name:
        parts.append(f"service:{service_name}")
    if env:
        parts.append(f"env:{env}")
    if filter_query and filter_query.strip():
        parts.append(filter_query.strip())
    return " ".join(parts)


def build_metric_scope(*terms: Optional[str]) -> str:
    """Comma-joined metric scope; each term is checked for braces."""
    scope = []
    for term in terms:
        if not term:
            continue
        if "{" in term or "}" in term:
            raise InputValidationError(
                "filter must not contain { or } (invalid for metric query syntax)"
            )
        scope.append(term.strip())
    return ",".join(t for t in scope if t)
