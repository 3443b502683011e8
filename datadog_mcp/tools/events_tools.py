"""Events tools."""

from typing import Any, Dict, List

from ..clients.events import EventsClient
from ..core.logger import DatadogMcpLogger
from ..core.models import (GetEventDetailsArgs, GetMonitorEventsArgs, SearchEventsArgs, SearchEventsByTagsArgs,
                           ToolDefinition)
from ..core.responses import MAX_EVENT_TAGS, MAX_EVENT_TEXT_LENGTH, MAX_EVENTS, cap, json_reply, truncate
from .common import describe_range, make_tool, time_range, unwrap


def summarize_event(event: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": event.get("id"),
        "title": event.get("title"),
        "text": truncate(event.get("text"), MAX_EVENT_TEXT_LENGTH),
        "priority": event.get("priority"),
        "alert_type": event.get("alert_type"),
        "tags": cap(event.get("tags"), MAX_EVENT_TAGS),
        "date_happened": event.get("date_happened"),
    }


def _events_reply(data: Dict[str, Any], from_: int, to: int, **extra: Any):
    events = data.get("events") or []
    return json_reply({
        **extra,
        "timeRange": describe_range(from_, to, "s"),
        "eventsCount": len(events),
        "events": [summarize_event(e) for e in cap(events, MAX_EVENTS)],
    })


def get_events_tools(client: EventsClient, logger: DatadogMcpLogger) -> List[ToolDefinition]:
    """Tool definitions for the events domain."""

    async def search_events(args: SearchEventsArgs):
        from_, to = time_range(args, "s")
        query = args.query or ""
        if args.priority:
            query = f"{query} priority:{args.priority}".strip()
        data = unwrap(await client.search_events(query, from_, to, args.limit))
        return _events_reply(data, from_, to, query=query or "all", priority=args.priority or "all")

    async def get_event_details(args: GetEventDetailsArgs):
        data = unwrap(await client.get_event_details(args.event_id))
        return json_reply({"eventId": args.event_id, "details": data})

    async def search_events_by_tags(args: SearchEventsByTagsArgs):
        from_, to = time_range(args, "s")
        data = unwrap(await client.search_events_by_tags(args.tags, from_, to, MAX_EVENTS))
        return _events_reply(data, from_, to, tags=args.tags)

    async def get_monitor_events(args: GetMonitorEventsArgs):
        from_, to = time_range(args, "s")
        data = unwrap(await client.get_monitor_events(args.monitor_id, from_, to, MAX_EVENTS))
        return _events_reply(data, from_, to, monitorId=args.monitor_id)

    return [
        make_tool(
            "search_events", "events",
            "Search Datadog events (deployments, alerts, configuration changes) over a time range, "
            "optionally filtered by query and priority.",
            SearchEventsArgs, search_events, logger,
        ),
        make_tool(
            "get_event_details", "events",
            "Get the full details of a single Datadog event by its ID.",
            GetEventDetailsArgs, get_event_details, logger,
        ),
        make_tool(
            "search_events_by_tags", "events",
            "Search events carrying all of the given tags over a time range.",
            SearchEventsByTagsArgs, search_events_by_tags, logger,
        ),
        make_tool(
            "get_monitor_events", "events",
            "List the events emitted by one monitor over a time range.",
            GetMonitorEventsArgs, get_monitor_events, logger,
        ),
    ]
