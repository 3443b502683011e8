"""Monitors client."""

from typing import Any, List, Optional

from datadog_api_client.v1.api.monitors_api import MonitorsApi

from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome
from ..core.queries import validate_monitor_id
from .base import BaseClient, clamp_page_size, require

# Tool-facing status names mapped to the monitor ``overall_state`` values
STATUS_STATES = {
    "triggered": "Alert",
    "OK": "OK",
    "degraded": "Warn",
}


class MonitorsClient(BaseClient):
    """Wraps ``MonitorsApi`` (v1). Monitor ID ``0`` is valid everywhere."""

    domain = "monitors"

    def __init__(self, api_client: Any, logger: DatadogMcpLogger, monitors_api: Optional[Any] = None):
        super().__init__(logger)
        self.monitors_api = monitors_api or MonitorsApi(api_client)

    async def list_monitors(self, name: Optional[str] = None, tags: Optional[List[str]] = None,
                            monitor_type: Optional[str] = None, status: Optional[str] = None,
                            page_size: Optional[int] = None) -> Outcome:
        """List monitors.

        ``name`` and ``tags`` are sent to Datadog; ``monitor_type`` and
        ``status`` are matched against the returned monitors.
        """
        try:
            kwargs = {}
            if name:
                kwargs["name"] = name
            if tags:
                kwargs["tags"] = ",".join(tags)
            if page_size is not None:
                # Datadog ignores page_size without page
                kwargs["page"] = 0
                kwargs["page_size"] = clamp_page_size(page_size)

            monitors = self._ok(await self.monitors_api.list_monitors(**kwargs)).data or []
            if monitor_type:
                monitors = [m for m in monitors if m.get("type") == monitor_type]
            if status:
                wanted = STATUS_STATES.get(status, status)
                monitors = [m for m in monitors if m.get("overall_state") == wanted]
            return Outcome.success(monitors)
        except Exception as e:
            return self._failure("list monitors", e)

    async def get_monitor_status(self, monitor_id: Any) -> Outcome:
        """Monitor with its current state and downtimes."""
        try:
            monitor_id = validate_monitor_id(monitor_id)
            response = await self.monitors_api.get_monitor(monitor_id, with_downtimes=True)
            return self._ok(response)
        except Exception as e:
            return self._failure("get monitor status", e)

    async def get_monitor(self, monitor_id: Any) -> Outcome:
        try:
            monitor_id = validate_monitor_id(monitor_id)
            response = await self.monitors_api.get_monitor(monitor_id)
            return self._ok(response)
        except Exception as e:
            return self._failure("get monitor", e)

    async def search_monitors(self, query: str) -> Outcome:
        try:
            require(query, "Search query is required")
            response = await self.monitors_api.search_monitors(query=query)
            return self._ok(response)
        except Exception as e:
            return self._failure("search monitors", e)

    async def get_monitor_groups(self, monitor_id: Any) -> Outcome:
        try:
            monitor_id = validate_monitor_id(monitor_id)
            response = await self.monitors_api.search_monitor_groups(query=f"monitor_id:{monitor_id}")
            return self._ok(response)
        except Exception as e:
            return self._failure("get monitor groups", e)
