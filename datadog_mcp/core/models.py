"""Data models for the Datadog MCP server."""

from typing import Any, Awaitable, Callable, Dict, List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from .errors import DatadogClientError


# Domain names
DomainType = Literal["metrics", "logs", "events", "monitors", "apm"]
ALL_DOMAINS = ("metrics", "logs", "events", "monitors", "apm")

# Loosely typed timestamp argument: Unix seconds, Unix milliseconds or ISO-8601
Timestamp = Union[StrictInt, StrictFloat, StrictStr]
Identifier = Union[StrictInt, StrictFloat, StrictStr]


class Outcome(NamedTuple):
    """Result of a client call: exactly one of ``data`` and ``error`` is set."""

    data: Any
    error: Optional[DatadogClientError]

    @classmethod
    def success(cls, data: Any) -> "Outcome":
        if data is None:
            raise ValueError("Outcome.success requires data")
        return cls(data, None)

    @classmethod
    def failure(cls, error: DatadogClientError) -> "Outcome":
        if error is None:
            raise ValueError("Outcome.failure requires an error")
        return cls(None, error)

    @property
    def is_ok(self) -> bool:
        return self.error is None


class TextContent(BaseModel):
    """Single text item of a tool reply."""

    type: Literal["text"] = "text"
    text: str


class ToolReply(BaseModel):
    """Reply returned by every tool handler."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_error: bool = Field(alias="isError")
    content: List[TextContent] = Field(min_length=1, max_length=1)

    @property
    def text(self) -> str:
        return self.content[0].text

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


ToolHandler = Callable[[Dict[str, Any]], Awaitable[ToolReply]]


class ToolDefinition(BaseModel):
    """A named tool with its advertised parameter schema and handler."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    domain: DomainType
    description: str
    parameter_schema: Dict[str, Any]
    handler: ToolHandler = Field(exclude=True)
    read_only: bool = True

    def to_mcp_dict(self) -> Dict[str, Any]:
        """Definition as listed over MCP (without the handler)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameter_schema,
            "annotations": {
                "readOnlyHint": self.read_only,
                "destructiveHint": False,
                "idempotentHint": True,
                "openWorldHint": True,
            },
        }


# Tool argument models

class ToolArgs(BaseModel):
    """Base for tool arguments; accepts camelCase aliases or field names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def parameter_schema(cls) -> Dict[str, Any]:
        schema = cls.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema


class TimeRangeArgs(ToolArgs):
    from_: Timestamp = Field(
        alias="from",
        description="Start time as Unix timestamp (seconds or ms) or ISO 8601 string "
                    "(e.g., 1609459200 or '2021-01-01T00:00:00Z')"
    )
    to: Timestamp = Field(
        description="End time as Unix timestamp (seconds or ms) or ISO 8601 string "
                    "(must be after 'from')"
    )


class QueryMetricsArgs(TimeRangeArgs):
    metric_name: StrictStr = Field(
        alias="metricName",
        description='Metric name to query (e.g., "system.cpu.user", "avg:system.memory.free")'
    )
    filter: Optional[StrictStr] = Field(
        default=None,
        description="Optional filter expression to scope the metric (e.g., 'host:web-1', 'env:prod')"
    )


class GetMetricMetadataArgs(ToolArgs):
    metric_name: StrictStr = Field(alias="metricName", description="Name of the metric to get metadata for")


class ListMetricsArgs(ToolArgs):
    query: Optional[StrictStr] = Field(
        default=None,
        description="Search query to filter metrics (e.g., 'system', 'app.request'). Partial matches are supported."
    )
    limit: Optional[int] = Field(
        default=100,
        description="Maximum number of metrics to return (default: 100, max: 1000)"
    )


class ValidateMetricQueryArgs(ToolArgs):
    query: StrictStr = Field(description='Full metric query to validate (e.g., "avg:system.cpu.user{env:prod}")')


class SearchLogsArgs(TimeRangeArgs):
    filter: StrictStr = Field(
        description='Log filter query (e.g., "service:api status:error", "host:prod-*"). Use Datadog query syntax.'
    )
    limit: Optional[int] = Field(default=100, description="Maximum number of logs to return (default: 100, max: 100)")


class GetLogDetailsArgs(ToolArgs):
    log_id: StrictStr = Field(alias="logId", description="Unique identifier of the log entry to retrieve")


LogAggregation = Literal[
    "count", "cardinality", "avg", "min", "max", "sum", "median",
    "pc75", "pc90", "pc95", "pc98", "pc99",
]


class AggregateLogsArgs(TimeRangeArgs):
    filter: StrictStr = Field(description='Log filter query (e.g., "status:error", "service:checkout")')
    aggregation_type: LogAggregation = Field(
        alias="aggregationType",
        description='Aggregation function to apply (e.g., "count" for log count, "avg" for the average of a numeric field)'
    )
    metric: Optional[StrictStr] = Field(
        default=None,
        description="Attribute to aggregate (e.g., '@duration'). Not used for 'count'."
    )


class ListLogIndexesArgs(ToolArgs):
    pass


class SearchEventsArgs(TimeRangeArgs):
    query: StrictStr = Field(
        description='Event search query (e.g., "priority:high", "monitor", "deployment"). Leave empty to search all events.'
    )
    priority: Optional[Literal["low", "normal", "high"]] = Field(
        default=None,
        description="Filter events by priority level (optional)"
    )
    limit: Optional[int] = Field(default=50, description="Maximum number of events to return (default: 50, max: 100)")


class GetEventDetailsArgs(ToolArgs):
    event_id: Identifier = Field(alias="eventId", description="Unique identifier of the event to retrieve")


class SearchEventsByTagsArgs(TimeRangeArgs):
    tags: List[Any] = Field(description='Tags that must all match (e.g., ["env:prod", "service:api"])')


class GetMonitorEventsArgs(TimeRangeArgs):
    monitor_id: Identifier = Field(alias="monitorId", description="Monitor whose events to return")


class ListMonitorsArgs(ToolArgs):
    status: Optional[Literal["triggered", "OK", "degraded"]] = Field(
        default=None,
        description="Filter monitors by status. 'triggered' shows active alerts, "
                    "'OK' shows healthy monitors, 'degraded' shows degraded monitors"
    )
    tags: Optional[List[StrictStr]] = Field(
        default=None,
        description='Filter monitors by tags (e.g., ["env:prod", "team:backend"]). '
                    "Only monitors with all specified tags are returned."
    )
    name: Optional[StrictStr] = Field(default=None, description="Filter monitors whose name contains this text")
    monitor_type: Optional[StrictStr] = Field(
        default=None,
        alias="monitorType",
        description='Filter by monitor type (e.g., "metric alert", "log alert")'
    )
    page_size: Optional[int] = Field(
        default=None,
        alias="pageSize",
        description="Number of monitors to request from Datadog (max: 100)"
    )


class GetMonitorStatusArgs(ToolArgs):
    monitor_id: Identifier = Field(alias="monitorId", description="Unique identifier of the monitor")


class SearchMonitorsArgs(ToolArgs):
    query: StrictStr = Field(
        description="Search query string to match against monitor names and properties (e.g., 'API latency', 'database')"
    )
    tags: Optional[List[StrictStr]] = Field(
        default=None,
        description='Optional tag filters (e.g., ["env:prod", "service:api"])'
    )


class GetMonitorGroupsArgs(ToolArgs):
    monitor_id: Identifier = Field(alias="monitorId", description="Monitor whose groups to return")


class QueryTracesArgs(TimeRangeArgs):
    service_name: StrictStr = Field(
        alias="serviceName",
        description='Name of the service to query traces for (e.g., "api", "web")'
    )
    filter: Optional[StrictStr] = Field(
        default=None,
        description='Optional trace filter (e.g., "status:error", "env:production"). Use Datadog trace query syntax.'
    )
    limit: Optional[int] = Field(default=100, description="Maximum number of spans to scan (default: 100, max: 100)")


class GetServiceHealthArgs(TimeRangeArgs):
    service_name: StrictStr = Field(alias="serviceName", description="Name of the service to get health metrics for")
    env: Optional[StrictStr] = Field(
        default=None,
        description="Optional environment to scope metrics (e.g. production, staging)"
    )


class ListServiceEndpointsArgs(TimeRangeArgs):
    service_name: StrictStr = Field(alias="serviceName", description="Service to list endpoints for")
    env: Optional[StrictStr] = Field(default=None, description='Optional environment tag (e.g. "production")')
    limit: Optional[int] = Field(default=500, description="Maximum number of spans to scan (default: 500, max: 1000)")


class ListApmServicesArgs(ToolArgs):
    pass


class GetServiceDependenciesArgs(ToolArgs):
    env: StrictStr = Field(description='The environment to query (e.g., "production", "staging", "development")')
    service_name: Optional[StrictStr] = Field(
        default=None,
        alias="serviceName",
        description="Optional: Filter dependencies by a specific service name. If not provided, returns all services."
    )


class GetServiceDependenciesMultiEnvArgs(ToolArgs):
    envs: List[StrictStr] = Field(
        min_length=1,
        description='Array of environments to query (e.g., ["production", "staging"])'
    )
