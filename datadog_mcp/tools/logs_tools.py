"""Logs tools."""

from typing import Any, Dict, List

from ..clients.logs import LogsClient
from ..core.logger import DatadogMcpLogger
from ..core.models import AggregateLogsArgs, GetLogDetailsArgs, ListLogIndexesArgs, SearchLogsArgs, ToolDefinition
from ..core.responses import (MAX_ATTRIBUTE_LENGTH, MAX_LOG_ATTRIBUTES, MAX_LOG_MESSAGE_LENGTH, MAX_LOG_TAGS,
                              cap, json_reply, truncate)
from .common import describe_range, make_tool, time_range, unwrap

MAX_LOGS_PAGE = 100


def summarize_log(log: Dict[str, Any]) -> Dict[str, Any]:
    attrs = log.get("attributes") or {}
    return {
        "id": log.get("id"),
        "timestamp": attrs.get("timestamp"),
        "status": attrs.get("status"),
        "service": attrs.get("service"),
        "message": truncate(attrs.get("message"), MAX_LOG_MESSAGE_LENGTH),
        "host": attrs.get("host"),
    }


def get_logs_tools(client: LogsClient, logger: DatadogMcpLogger) -> List[ToolDefinition]:
    """Tool definitions for the logs domain."""

    async def search_logs(args: SearchLogsArgs):
        from_, to = time_range(args, "ms")
        data = unwrap(await client.search_logs(args.filter, from_, to, min(args.limit or MAX_LOGS_PAGE, MAX_LOGS_PAGE)))

        logs = data.get("data") or []
        after = ((data.get("meta") or {}).get("page") or {}).get("after")
        return json_reply({
            "filter": args.filter or "all",
            "timeRange": describe_range(from_, to, "ms"),
            "logsCount": len(logs),
            "logs": [summarize_log(log) for log in logs],
            "has_more": bool((data.get("links") or {}).get("next") or after),
            "next_cursor": after,
        })

    async def get_log_details(args: GetLogDetailsArgs):
        log = unwrap(await client.get_log_details(args.log_id))

        attrs = log.get("attributes") or {}
        extra = attrs.get("attributes") or {}
        return json_reply({
            "logId": args.log_id,
            "timestamp": attrs.get("timestamp"),
            "status": attrs.get("status"),
            "service": attrs.get("service"),
            "message": attrs.get("message"),
            "host": attrs.get("host"),
            "tags": cap(attrs.get("tags"), MAX_LOG_TAGS),
            "attributes": {
                key: truncate(value, MAX_ATTRIBUTE_LENGTH)
                for key, value in list(extra.items())[:MAX_LOG_ATTRIBUTES]
            },
        })

    async def aggregate_logs(args: AggregateLogsArgs):
        from_, to = time_range(args, "ms")
        data = unwrap(await client.aggregate_logs(args.filter, from_, to, args.aggregation_type, args.metric))
        return json_reply({
            "aggregationType": args.aggregation_type,
            "filter": args.filter or "all",
            "timeRange": describe_range(from_, to, "ms"),
            "result": data,
        })

    async def list_log_indexes(args: ListLogIndexesArgs):
        data = unwrap(await client.list_indexes())
        indexes = data.get("indexes") or []
        return json_reply({
            "indexesCount": len(indexes),
            "indexes": [
                {
                    "name": index.get("name"),
                    "filter": (index.get("filter") or {}).get("query"),
                    "num_retention_days": index.get("num_retention_days"),
                    "daily_limit": index.get("daily_limit"),
                }
                for index in indexes
            ],
        })

    return [
        make_tool(
            "search_logs", "logs",
            "Search Datadog logs with a filter query over a time range. "
            "Returns matching log entries, oldest first.",
            SearchLogsArgs, search_logs, logger,
        ),
        make_tool(
            "get_log_details", "logs",
            "Get the full details of a single log entry by its ID.",
            GetLogDetailsArgs, get_log_details, logger,
        ),
        make_tool(
            "aggregate_logs", "logs",
            "Aggregate log data for a time range using the specified aggregation type "
            "(count, cardinality, avg, min, max, sum, median or a percentile). "
            "Useful for statistical analysis of logs.",
            AggregateLogsArgs, aggregate_logs, logger,
        ),
        make_tool(
            "list_log_indexes", "logs",
            "List the log indexes of the Datadog organization with their filters and retention.",
            ListLogIndexesArgs, list_log_indexes, logger,
        ),
    ]
