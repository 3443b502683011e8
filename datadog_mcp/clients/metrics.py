"""Metrics client. Timestamps are Unix seconds."""

import time
from typing import Any, Optional

from datadog_api_client.v1.api.metrics_api import MetricsApi

from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome
from .base import BaseClient, require, validate_range

VALIDATION_WINDOW_SECONDS = 60


class MetricsClient(BaseClient):
    """Wraps ``MetricsApi`` (v1)."""

    domain = "metrics"

    def __init__(self, api_client: Any, logger: DatadogMcpLogger, metrics_api: Optional[Any] = None):
        super().__init__(logger)
        self.metrics_api = metrics_api or MetricsApi(api_client)

    async def query_metrics(self, query: str, from_: int, to: int) -> Outcome:
        """Run a metric query over ``[from_, to)``."""
        try:
            require(query, "Metric query is required")
            validate_range(from_, to)
            response = await self.metrics_api.query_metrics(_from=from_, to=to, query=query)
            return self._ok(response)
        except Exception as e:
            return self._failure("query metrics", e)

    async def get_metric_metadata(self, metric_name: str) -> Outcome:
        try:
            require(metric_name, "Metric name is required")
            response = await self.metrics_api.get_metric_metadata(metric_name=metric_name)
            return self._ok(response)
        except Exception as e:
            return self._failure("get metric metadata", e)

    async def list_metrics(self, query: str = "") -> Outcome:
        """Search metric names; an empty query matches everything."""
        try:
            response = await self.metrics_api.list_metrics(q=query or "*")
            return self._ok(response)
        except Exception as e:
            return self._failure("list metrics", e)

    async def validate_query(self, query: str) -> Outcome:
        """Check that Datadog accepts ``query`` by running it over the last minute."""
        try:
            require(query, "Metric query is required")
            now = int(time.time())
            response = await self.metrics_api.query_metrics(
                _from=now - VALIDATION_WINDOW_SECONDS, to=now, query=query
            )
            return Outcome.success({"valid": True, "query": query, "result": self._ok(response).data})
        except Exception as e:
            return self._failure("validate metric query", e)
