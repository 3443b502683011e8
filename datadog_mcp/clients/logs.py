"""Logs client.

Timestamps arrive as Unix milliseconds; the logs search endpoints want
ISO-8601 strings in the filter, so conversion happens here.
"""

from typing import Any, Optional

from datadog_api_client.v1.api.logs_indexes_api import LogsIndexesApi
from datadog_api_client.v2.api.logs_api import LogsApi
from datadog_api_client.v2.model.logs_aggregate_request import LogsAggregateRequest
from datadog_api_client.v2.model.logs_aggregation_function import LogsAggregationFunction
from datadog_api_client.v2.model.logs_compute import LogsCompute
from datadog_api_client.v2.model.logs_list_request import LogsListRequest
from datadog_api_client.v2.model.logs_list_request_page import LogsListRequestPage
from datadog_api_client.v2.model.logs_query_filter import LogsQueryFilter
from datadog_api_client.v2.model.logs_sort import LogsSort

from ..core.errors import InputValidationError, UpstreamError
from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome
from ..core.queries import build_log_filter, validate_log_id
from ..core.timestamps import to_iso
from .base import BaseClient, clamp_page_size, validate_range

AGGREGATIONS = (
    "count", "cardinality", "avg", "min", "max", "sum", "median",
    "pc75", "pc90", "pc95", "pc98", "pc99",
)
DEFAULT_AGGREGATION_METRIC = "@timestamp"


def _query_filter(query: Optional[str], from_ms: Optional[int] = None,
                  to_ms: Optional[int] = None) -> LogsQueryFilter:
    parts = build_log_filter(
        query or "*",
        to_iso(from_ms) if from_ms is not None else None,
        to_iso(to_ms) if to_ms is not None else None,
    )
    kwargs = {"query": parts["query"]}
    if "from" in parts:
        kwargs["_from"] = parts["from"]
    if "to" in parts:
        kwargs["to"] = parts["to"]
    return LogsQueryFilter(**kwargs)


class LogsClient(BaseClient):
    """Wraps the v2 ``LogsApi`` and the v1 ``LogsIndexesApi``."""

    domain = "logs"

    def __init__(self, api_client: Any, logger: DatadogMcpLogger,
                 logs_api: Optional[Any] = None, indexes_api: Optional[Any] = None):
        super().__init__(logger)
        self.logs_api = logs_api or LogsApi(api_client)
        self.indexes_api = indexes_api or LogsIndexesApi(api_client)

    async def search_logs(self, log_filter: Optional[str], from_: int, to: int,
                          page_size: Optional[int] = None) -> Outcome:
        """Search logs in ``[from_, to)``, oldest first."""
        try:
            validate_range(from_, to)
            body = LogsListRequest(
                filter=_query_filter(log_filter, from_, to),
                page=LogsListRequestPage(limit=clamp_page_size(page_size)),
                sort=LogsSort.TIMESTAMP_ASCENDING,
            )
            response = await self.logs_api.list_logs(body=body)
            return self._ok(response)
        except Exception as e:
            return self._failure("search logs", e)

    async def get_log_details(self, log_id: str) -> Outcome:
        """Fetch one log event by its ID. A missing log is a 404."""
        try:
            log_id = validate_log_id(log_id)
            body = LogsListRequest(
                filter=_query_filter(f"@_id:{log_id}"),
                page=LogsListRequestPage(limit=1),
            )
            response = self._ok(await self.logs_api.list_logs(body=body)).data
            logs = response.get("data") or []
            if not logs:
                raise UpstreamError(f"HTTP 404: Log {log_id} not found", 404)
            return Outcome.success(logs[0])
        except Exception as e:
            return self._failure("get log details", e)

    async def aggregate_logs(self, log_filter: Optional[str], from_: int, to: int,
                             aggregation_type: str, metric: Optional[str] = None) -> Outcome:
        """Compute one aggregate over the logs matching ``log_filter``.

        ``count`` takes no metric; the other functions default to ``@timestamp``.
        """
        try:
            if aggregation_type not in AGGREGATIONS:
                raise InputValidationError(
                    f"aggregationType must be one of: {', '.join(AGGREGATIONS)}"
                )
            validate_range(from_, to)

            compute = {"aggregation": LogsAggregationFunction(aggregation_type)}
            if aggregation_type != "count":
                compute["metric"] = metric or DEFAULT_AGGREGATION_METRIC
            body = LogsAggregateRequest(
                filter=_query_filter(log_filter, from_, to),
                compute=[LogsCompute(**compute)],
            )
            response = await self.logs_api.aggregate_logs(body=body)
            return self._ok(response)
        except Exception as e:
            return self._failure("aggregate logs", e)

    async def list_indexes(self) -> Outcome:
        try:
            response = await self.indexes_api.list_log_indexes()
            return self._ok(response)
        except Exception as e:
            return self._failure("list log indexes", e)
