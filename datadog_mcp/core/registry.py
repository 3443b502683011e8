"""Immutable tool registry and the dispatcher that runs tools by name."""

import time
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import ToolNotFoundError
from .logger import DatadogMcpLogger
from .models import ToolDefinition, ToolReply

ToolRegistry = Mapping[str, ToolDefinition]


def build_registry(tools: Iterable[ToolDefinition]) -> ToolRegistry:
    """Key tools by name. Duplicate names are a programming error."""
    by_name: Dict[str, ToolDefinition] = {}
    for tool in tools:
        if tool.name in by_name:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        by_name[tool.name] = tool
    return MappingProxyType(by_name)


async def dispatch(registry: ToolRegistry, name: str, arguments: Optional[Dict[str, Any]],
                   logger: DatadogMcpLogger, slow_threshold_ms: int = 5000) -> ToolReply:
    """Run the tool registered as ``name`` and log its duration.

    Raises ``ToolNotFoundError`` for unknown names; handlers themselves never raise.
    """
    tool = registry.get(name)
    if tool is None:
        raise ToolNotFoundError(f"Unknown tool: {name}")

    started = time.perf_counter()
    reply = await tool.handler(arguments or {})
    duration_ms = (time.perf_counter() - started) * 1000

    logger.tool_completed(name, duration_ms, success=not reply.is_error,
                          slow=duration_ms > slow_threshold_ms)
    return reply
