"""Events client. Timestamps are Unix seconds."""

from typing import Any, List, Optional

from datadog_api_client.v1.api.events_api import EventsApi

from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome
from ..core.queries import build_tag_query, validate_monitor_id
from .base import BaseClient, clamp_page_size, require, validate_range


class EventsClient(BaseClient):
    """Wraps ``EventsApi`` (v1).

    The convenience searches only build a query string and delegate to
    ``search_events``, which owns range and page-size handling.
    """

    domain = "events"

    def __init__(self, api_client: Any, logger: DatadogMcpLogger, events_api: Optional[Any] = None):
        super().__init__(logger)
        self.events_api = events_api or EventsApi(api_client)

    async def search_events(self, query: Optional[str], from_: int, to: int,
                            page_size: Optional[int] = None) -> Outcome:
        try:
            validate_range(from_, to)
            limit = clamp_page_size(page_size)
            kwargs = {"start": from_, "end": to}
            if query:
                kwargs["tags"] = query
            response = self._ok(await self.events_api.list_events(**kwargs)).data
            if isinstance(response.get("events"), list):
                response["events"] = response["events"][:limit]
            return Outcome.success(response)
        except Exception as e:
            return self._failure("search events", e)

    async def get_event_details(self, event_id: Any) -> Outcome:
        """Fetch one event. ``0`` is a valid ID."""
        try:
            require(event_id, "Event ID is required")
            if isinstance(event_id, str) and event_id.strip().isdigit():
                event_id = int(event_id.strip())
            response = await self.events_api.get_event(event_id=event_id)
            return self._ok(response)
        except Exception as e:
            return self._failure("get event details", e)

    async def get_monitor_events(self, monitor_id: Any, from_: int, to: int,
                                 page_size: Optional[int] = None) -> Outcome:
        try:
            query = f"monitor_id:{validate_monitor_id(monitor_id)}"
        except Exception as e:
            return self._failure("get monitor events", e)
        return await self.search_events(query, from_, to, page_size)

    async def search_events_by_alert_type(self, alert_type: str, from_: int, to: int,
                                          page_size: Optional[int] = None) -> Outcome:
        try:
            require(alert_type, "Alert type is required")
        except Exception as e:
            return self._failure("search events by alert type", e)
        return await self.search_events(f"alert_type:{alert_type.strip()}", from_, to, page_size)

    async def search_events_by_tags(self, tags: List[str], from_: int, to: int,
                                    page_size: Optional[int] = None) -> Outcome:
        try:
            query = build_tag_query(tags)
        except Exception as e:
            return self._failure("search events by tags", e)
        return await self.search_events(query, from_, to, page_size)
