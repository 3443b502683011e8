"""Metrics tools."""

from typing import List

from ..clients.metrics import MetricsClient
from ..core.logger import DatadogMcpLogger
from ..core.models import (GetMetricMetadataArgs, ListMetricsArgs, QueryMetricsArgs, ToolDefinition,
                           ValidateMetricQueryArgs)
from ..core.queries import build_metric_query
from ..core.responses import MAX_METRIC_SERIES, MAX_METRICS_LISTED, MAX_POINTS_PER_SERIES, cap, json_reply
from .common import describe_range, make_tool, time_range, unwrap


def get_metrics_tools(client: MetricsClient, logger: DatadogMcpLogger) -> List[ToolDefinition]:
    """Tool definitions for the metrics domain."""

    async def query_metrics(args: QueryMetricsArgs):
        from_, to = time_range(args, "s")
        query = build_metric_query(args.metric_name, args.filter)
        data = unwrap(await client.query_metrics(query, from_, to))

        series = data.get("series") or []
        limited = dict(data)
        limited["series"] = [
            {**s, "pointlist": cap(s.get("pointlist"), MAX_POINTS_PER_SERIES)}
            for s in cap(series, MAX_METRIC_SERIES)
        ]
        return json_reply({
            "metric": args.metric_name.strip(),
            "filter": args.filter or "none",
            "timeRange": describe_range(from_, to, "s"),
            "seriesCount": len(series),
            "data": limited,
        })

    async def get_metric_metadata(args: GetMetricMetadataArgs):
        build_metric_query(args.metric_name)
        data = unwrap(await client.get_metric_metadata(args.metric_name.strip()))
        return json_reply({"metric": args.metric_name.strip(), "metadata": data})

    async def list_metrics(args: ListMetricsArgs):
        limit = min(args.limit or 100, MAX_METRICS_LISTED)
        data = unwrap(await client.list_metrics(args.query or ""))

        results = data.get("results") or {}
        metrics = results.get("metrics") if isinstance(results, dict) else results
        metrics = metrics or []
        limited = metrics[:max(limit, 1)]
        return json_reply({
            "query": args.query or "all",
            "total": len(metrics),
            "returned": len(limited),
            "metrics": limited,
        })

    async def validate_metric_query(args: ValidateMetricQueryArgs):
        data = unwrap(await client.validate_query(args.query.strip()))
        result = data.get("result") or {}
        return json_reply({
            "query": data["query"],
            "valid": data["valid"],
            "seriesCount": len(result.get("series") or []),
        })

    return [
        make_tool(
            "query_metrics", "metrics",
            "Query Datadog metrics for a time range. Returns time series data "
            "with optional filtering by tags or scope.",
            QueryMetricsArgs, query_metrics, logger,
        ),
        make_tool(
            "get_metric_metadata", "metrics",
            "Get metadata about a Datadog metric (type, unit, description, per-unit).",
            GetMetricMetadataArgs, get_metric_metadata, logger,
        ),
        make_tool(
            "list_metrics", "metrics",
            "List available Datadog metrics, optionally filtered by a search query.",
            ListMetricsArgs, list_metrics, logger,
        ),
        make_tool(
            "validate_metric_query", "metrics",
            "Check that a full metric query is accepted by Datadog by running it over the last minute.",
            ValidateMetricQueryArgs, validate_metric_query, logger,
        ),
    ]
