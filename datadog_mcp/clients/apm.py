"""APM client: traces, service health, endpoints and service discovery.

Timestamps arrive as Unix milliseconds. The spans endpoint takes ISO-8601
strings and the trace metrics take seconds; both conversions happen here.
"""

import asyncio
import re
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from datadog_api_client.v1.api.metrics_api import MetricsApi
from datadog_api_client.v2.api.spans_api import SpansApi

from ..core.errors import FallbackExhausted, UpstreamError, upstream_error
from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome
from ..core.queries import build_metric_scope, build_span_query
from ..core.timestamps import to_iso
from .base import BaseClient, clamp_page_size, require, validate_range, to_plain

SOURCE_SPANS = "spans"
SOURCE_METRICS = "metrics"

DEFAULT_ENDPOINT_SPAN_LIMIT = 500
MAX_ENDPOINT_SPAN_LIMIT = 1000
SERVICE_DISCOVERY_WINDOW_SECONDS = 3600

# Integration families reporting trace.<family>.request.* metrics
HEALTH_FAMILIES = ("http", "servlet", "rack")

_SERVICE_IN_SCOPE = re.compile(r"service:([^,}]+)")


def _span_attributes(span: Dict[str, Any]) -> Dict[str, Any]:
    return span.get("attributes") or span


def _span_duration(attrs: Dict[str, Any]) -> Optional[float]:
    """Span duration from the attributes, the custom attributes, or the timestamps."""
    if attrs.get("duration") is not None:
        return attrs["duration"]
    custom = attrs.get("custom") or {}
    if custom.get("duration") is not None:
        return custom["duration"]
    start, end = attrs.get("start_timestamp"), attrs.get("end_timestamp")
    if isinstance(start, datetime) and isinstance(end, datetime):
        return int((end - start).total_seconds() * 1_000_000_000)
    return None


def group_spans_into_traces(spans: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Group spans by trace ID; a trace lasts as long as its longest span."""
    traces: Dict[str, Dict[str, Any]] = {}
    for span in spans:
        attrs = _span_attributes(span)
        trace_id = attrs.get("trace_id")
        if not trace_id:
            continue

        duration = _span_duration(attrs)
        trace = traces.get(trace_id)
        if trace is None:
            trace = traces[trace_id] = {
                "trace_id": trace_id,
                "span_count": 0,
                "duration": duration,
                "status": attrs.get("status") or (attrs.get("custom") or {}).get("status"),
                "service": attrs.get("service"),
                "resource": attrs.get("resource_name") or attrs.get("resource"),
            }
        trace["span_count"] += 1
        if duration is not None and (trace["duration"] is None or duration > trace["duration"]):
            trace["duration"] = duration
    return list(traces.values())


class ApmClient(BaseClient):
    """Wraps ``SpansApi`` (v2) and the trace metrics of ``MetricsApi`` (v1)."""

    domain = "apm"

    def __init__(self, api_client: Any, logger: DatadogMcpLogger,
                 spans_api: Optional[Any] = None, metrics_api: Optional[Any] = None):
        super().__init__(logger)
        self.spans_api = spans_api or SpansApi(api_client)
        self.metrics_api = metrics_api or MetricsApi(api_client)

    async def _list_spans(self, query: str, from_: int, to: int, limit: int) -> List[Dict[str, Any]]:
        response = to_plain(await self.spans_api.list_spans_get(
            filter_query=query,
            filter_from=to_iso(from_),
            filter_to=to_iso(to),
            page_limit=limit,
        ))
        data = response.get("data") if isinstance(response, dict) else None
        return data if isinstance(data, list) else []

    async def _query_metric_series(self, query: str, from_: int, to: int) -> List[Dict[str, Any]]:
        response = to_plain(await self.metrics_api.query_metrics(
            _from=from_ // 1000, to=to // 1000, query=query
        ))
        return (response or {}).get("series") or []

    async def query_traces(self, filter_query: Optional[str], from_: int, to: int,
                           service_name: Optional[str] = None,
                           page_size: Optional[int] = None) -> Outcome:
        """Traces for ``service_name``, from spans when possible, else from trace metrics.

        ``source`` in the result names the path that produced it and
        ``message`` describes it.
        """
        try:
            validate_range(from_, to)
            limit = clamp_page_size(page_size)
        except Exception as e:
            return self._failure("query traces", e)

        if service_name:
            try:
                spans = await self._list_spans(
                    build_span_query(service_name, filter_query), from_, to, limit
                )
                traces = group_spans_into_traces(spans)
                return Outcome.success({
                    "traces": traces,
                    "tracesCount": len(traces),
                    "source": SOURCE_SPANS,
                    "message": "Trace list from Spans API" if traces else "No traces in range (Spans API)",
                })
            except Exception as e:
                self.logger.warning(
                    f"Span listing failed, falling back to trace metrics: {upstream_error(e).message}",
                    self.domain,
                )

        return await self._query_traces_from_metrics(filter_query, from_, to, service_name, limit)

    async def _query_traces_from_metrics(self, filter_query: Optional[str], from_: int, to: int,
                                         service_name: Optional[str], limit: int) -> Outcome:
        try:
            scope = build_metric_scope(
                f"service:{service_name}" if service_name else None, filter_query
            )
            query = f"trace.*{{{scope}}}" if scope else "trace.*"
            series = await self._query_metric_series(query, from_, to)
        except Exception as e:
            # With a service name the span path already failed
            error_cls = FallbackExhausted if service_name else UpstreamError
            return self._failure("query trace metrics", upstream_error(e, error_cls))

        traces = []
        for item in series[:limit]:
            tag_set = item.get("tag_set") or []
            traces.append({
                "trace_id": item.get("scope") or f"series-{'-'.join(tag_set) or 'unknown'}",
                "span_count": len(item.get("pointlist") or []),
                "scope": item.get("scope"),
            })
        return Outcome.success({
            "traces": traces,
            "tracesCount": len(traces),
            "source": SOURCE_METRICS,
            "message": "Trace metrics available (metrics fallback; per-trace detail is not available)",
        })

    async def get_service_health(self, service_name: str, from_: int, to: int,
                                 env: Optional[str] = None) -> Outcome:
        """Request, error and latency series for a service.

        A family whose query fails contributes no series.
        """
        try:
            require(service_name, "Service name is required")
            scope = build_metric_scope(f"service:{service_name}", f"env:{env}" if env else None)
            validate_range(from_, to)

            queries = {
                "requests": [f"trace.{family}.request.hits{{{scope}}}" for family in HEALTH_FAMILIES],
                "errors": [f"trace.{family}.request.errors{{{scope}}}" for family in HEALTH_FAMILIES],
                "latency": [f"avg:trace.{family}.request.duration{{{scope}}}" for family in HEALTH_FAMILIES],
            }
            health: Dict[str, Any] = {"service": service_name}
            for kind, kind_queries in queries.items():
                results = await asyncio.gather(
                    *(self._query_metric_series(q, from_, to) for q in kind_queries),
                    return_exceptions=True,
                )
                health[kind] = []
                for query, result in zip(kind_queries, results):
                    if isinstance(result, Exception):
                        self.logger.debug(f"No series for {query}: {upstream_error(result).message}", self.domain)
                        continue
                    health[kind].extend(result)
            return Outcome.success(health)
        except Exception as e:
            return self._failure("get service health", e)

    async def list_service_endpoints(self, service_name: str, from_: int, to: int,
                                     env: Optional[str] = None,
                                     page_limit: Optional[int] = None) -> Outcome:
        """Unique ``(service, resource)`` pairs seen in the service's spans."""
        try:
            require(service_name, "Service name is required")
            validate_range(from_, to)
            limit = clamp_page_size(page_limit, DEFAULT_ENDPOINT_SPAN_LIMIT, MAX_ENDPOINT_SPAN_LIMIT)

            spans = await self._list_spans(build_span_query(service_name, env=env), from_, to, limit)
            seen = set()
            endpoints = []
            for span in spans:
                attrs = _span_attributes(span)
                service = attrs.get("service") or service_name
                resource = attrs.get("resource_name") or attrs.get("resource")
                if not isinstance(resource, str) or (service, resource) in seen:
                    continue
                seen.add((service, resource))
                endpoints.append({"service": service, "resource": resource})
            return Outcome.success({"endpoints": endpoints})
        except Exception as e:
            return self._failure("list service endpoints", e)

    async def list_services(self) -> Outcome:
        """Services reporting trace metrics during the last hour."""
        try:
            now_ms = int(time.time()) * 1000
            series = await self._query_metric_series(
                "trace.*", now_ms - SERVICE_DISCOVERY_WINDOW_SECONDS * 1000, now_ms
            )
            services = []
            for item in series:
                match = _SERVICE_IN_SCOPE.search(item.get("scope") or "")
                if match and match.group(1) not in services:
                    services.append(match.group(1))
            return Outcome.success([{"service": name} for name in services])
        except Exception as e:
            return self._failure("list APM services", e)
