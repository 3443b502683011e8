"""Monitors tools."""

from typing import List

from ..clients.monitors import MonitorsClient
from ..core.logger import DatadogMcpLogger
from ..core.models import (GetMonitorGroupsArgs, GetMonitorStatusArgs, ListMonitorsArgs, SearchMonitorsArgs,
                           ToolDefinition)
from ..core.responses import MAX_MONITORS, cap, json_reply
from .common import make_tool, unwrap


def get_monitors_tools(client: MonitorsClient, logger: DatadogMcpLogger) -> List[ToolDefinition]:
    """Tool definitions for the monitors domain."""

    async def list_monitors(args: ListMonitorsArgs):
        monitors = unwrap(await client.list_monitors(
            name=args.name,
            tags=args.tags,
            monitor_type=args.monitor_type,
            status=args.status,
            page_size=args.page_size,
        ))
        return json_reply({
            "filters": {
                "status": args.status or "any",
                "tags": args.tags or [],
                "name": args.name,
                "monitorType": args.monitor_type,
            },
            "monitorsCount": len(monitors),
            "hasMore": len(monitors) > MAX_MONITORS,
            "monitors": cap(monitors, MAX_MONITORS),
        })

    async def get_monitor_status(args: GetMonitorStatusArgs):
        data = unwrap(await client.get_monitor_status(args.monitor_id))
        return json_reply({"monitorId": args.monitor_id, "status": data})

    async def search_monitors(args: SearchMonitorsArgs):
        data = unwrap(await client.search_monitors(args.query))
        results = data.get("monitors") or []
        if args.tags:
            results = [m for m in results if all(tag in (m.get("tags") or []) for tag in args.tags)]
        return json_reply({
            "query": args.query,
            "tags": args.tags or [],
            "monitorsCount": len(results),
            "monitors": cap(results, MAX_MONITORS),
        })

    async def get_monitor_groups(args: GetMonitorGroupsArgs):
        data = unwrap(await client.get_monitor_groups(args.monitor_id))
        groups = data.get("groups") or []
        return json_reply({
            "monitorId": args.monitor_id,
            "groupsCount": len(groups),
            "groups": cap(groups, MAX_MONITORS),
        })

    return [
        make_tool(
            "list_monitors", "monitors",
            "List Datadog monitors, optionally filtered by status, tags, name or monitor type.",
            ListMonitorsArgs, list_monitors, logger,
        ),
        make_tool(
            "get_monitor_status", "monitors",
            "Get the current status, configuration and downtimes of a monitor by its ID.",
            GetMonitorStatusArgs, get_monitor_status, logger,
        ),
        make_tool(
            "search_monitors", "monitors",
            "Search monitors by name and properties, optionally keeping only monitors with all given tags.",
            SearchMonitorsArgs, search_monitors, logger,
        ),
        make_tool(
            "get_monitor_groups", "monitors",
            "List the groups of a multi-alert monitor with their individual states.",
            GetMonitorGroupsArgs, get_monitor_groups, logger,
        ),
    ]
