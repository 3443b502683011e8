"""Tool definitions for every Datadog domain."""

from typing import List

from ..clients import DatadogClients
from ..core.config import Config
from ..core.logger import DatadogMcpLogger
from ..core.models import ALL_DOMAINS, ToolDefinition
from .apm_tools import get_apm_tools
from .events_tools import get_events_tools
from .logs_tools import get_logs_tools
from .metrics_tools import get_metrics_tools
from .monitors_tools import get_monitors_tools


def register_all_tools(clients: DatadogClients, config: Config, logger: DatadogMcpLogger) -> List[ToolDefinition]:
    """Collect the tools of every domain enabled in ``config``."""
    builders = {
        "metrics": lambda: get_metrics_tools(clients.metrics, logger),
        "logs": lambda: get_logs_tools(clients.logs, logger),
        "events": lambda: get_events_tools(clients.events, logger),
        "monitors": lambda: get_monitors_tools(clients.monitors, logger),
        "apm": lambda: get_apm_tools(clients.apm, clients.services, logger),
    }

    tools: List[ToolDefinition] = []
    for domain in ALL_DOMAINS:
        if domain not in config.enabled_domains:
            logger.domain_status(domain, "disabled", "not enabled in DATADOG_ENABLED_DOMAINS")
            continue
        domain_tools = builders[domain]()
        tools.extend(domain_tools)
        logger.domain_status(domain, "ready", f"{len(domain_tools)} tools")
    return tools


__all__ = [
    "register_all_tools", "get_apm_tools", "get_events_tools", "get_logs_tools",
    "get_metrics_tools", "get_monitors_tools",
]
