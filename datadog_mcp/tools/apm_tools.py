"""APM tools: traces, service health, endpoints and the service map."""

from typing import List

from ..clients.apm import ApmClient
from ..clients.services import ServicesClient
from ..core.logger import DatadogMcpLogger
from ..core.models import (GetServiceDependenciesArgs, GetServiceDependenciesMultiEnvArgs, GetServiceHealthArgs,
                           ListApmServicesArgs, ListServiceEndpointsArgs, QueryTracesArgs, ToolDefinition)
from ..core.responses import (MAX_DEPENDENCIES, MAX_ENDPOINTS, MAX_MULTI_ENV_SERVICES, MAX_SERVICES, MAX_TRACES,
                              MAX_TRACE_RESOURCE_LENGTH, cap, json_reply, truncate)
from .common import describe_range, make_tool, time_range, unwrap

MAX_TRACE_SPANS_PAGE = 100


def get_apm_tools(apm_client: ApmClient, services_client: ServicesClient,
                  logger: DatadogMcpLogger) -> List[ToolDefinition]:
    """Tool definitions for the APM domain."""

    async def query_traces(args: QueryTracesArgs):
        from_, to = time_range(args, "ms")
        limit = min(args.limit or MAX_TRACE_SPANS_PAGE, MAX_TRACE_SPANS_PAGE)
        data = unwrap(await apm_client.query_traces(
            args.filter, from_, to, service_name=args.service_name, page_size=limit
        ))

        traces = data.get("traces") or []
        return json_reply({
            "serviceName": args.service_name,
            "filter": args.filter or "all",
            "timeRange": describe_range(from_, to, "ms"),
            "source": data.get("source"),
            "message": data.get("message"),
            "tracesCount": len(traces),
            "traces": [
                {
                    "trace_id": t.get("trace_id"),
                    "duration": t.get("duration"),
                    "status": t.get("status"),
                    "resource": truncate(t.get("resource"), MAX_TRACE_RESOURCE_LENGTH),
                    "service": t.get("service"),
                    "span_count": t.get("span_count"),
                }
                for t in cap(traces, MAX_TRACES)
            ],
        })

    async def get_service_health(args: GetServiceHealthArgs):
        from_, to = time_range(args, "ms")
        data = unwrap(await apm_client.get_service_health(args.service_name, from_, to, env=args.env))
        return json_reply({
            "serviceName": args.service_name,
            "timeRange": describe_range(from_, to, "ms"),
            "health": data,
        })

    async def list_service_endpoints(args: ListServiceEndpointsArgs):
        from_, to = time_range(args, "ms")
        data = unwrap(await apm_client.list_service_endpoints(
            args.service_name, from_, to, env=args.env, page_limit=args.limit
        ))
        endpoints = data.get("endpoints") or []
        return json_reply({
            "serviceName": args.service_name,
            "env": args.env or "all",
            "timeRange": describe_range(from_, to, "ms"),
            "endpointsCount": len(endpoints),
            "endpoints": cap(endpoints, MAX_ENDPOINTS),
        })

    async def list_apm_services(args: ListApmServicesArgs):
        services = unwrap(await apm_client.list_services())
        return json_reply({
            "servicesCount": len(services),
            "services": cap(services, MAX_SERVICES),
        })

    async def get_service_dependencies(args: GetServiceDependenciesArgs):
        data = unwrap(await services_client.get_service_dependencies(args.env, service_name=args.service_name))

        services = data.get("services") or []
        dependencies = data.get("dependencies") or []
        summary = {
            "environment": args.env,
            "serviceName": args.service_name or "all",
            "serviceCount": len(services),
            "dependencyCount": len(dependencies),
        }
        if data.get("message"):
            summary["message"] = data["message"]
        summary["services"] = [
            {"name": s.get("name"), "type": s.get("type")} for s in cap(services, MAX_SERVICES)
        ]
        summary["dependencies"] = [
            {"from": d.get("from"), "to": d.get("to")} for d in cap(dependencies, MAX_DEPENDENCIES)
        ]
        return json_reply(summary)

    async def get_service_dependencies_multi_env(args: GetServiceDependenciesMultiEnvArgs):
        data = unwrap(await services_client.get_service_dependencies_multi_env(args.envs))

        results = {}
        for env in args.envs:
            env_data = data.get(env) or {}
            if env_data.get("error") is not None:
                results[env] = {"status": "error", "message": env_data["error"].message}
                continue
            services = env_data.get("services") or []
            results[env] = {
                "status": "success",
                "serviceCount": len(services),
                "dependencyCount": len(env_data.get("dependencies") or []),
                "services": [s.get("name") for s in cap(services, MAX_MULTI_ENV_SERVICES)],
            }
        return json_reply({"environments": args.envs, "results": results})

    return [
        make_tool(
            "query_traces", "apm",
            "Query APM traces for a service over a time range. Uses span data when available "
            "and falls back to trace metrics; 'source' and 'message' tell which path was used.",
            QueryTracesArgs, query_traces, logger,
        ),
        make_tool(
            "get_service_health", "apm",
            "Get request, error and latency metrics for an APM service over a time range.",
            GetServiceHealthArgs, get_service_health, logger,
        ),
        make_tool(
            "list_service_endpoints", "apm",
            "List the unique endpoints (resources) of an APM service seen in its spans.",
            ListServiceEndpointsArgs, list_service_endpoints, logger,
        ),
        make_tool(
            "list_apm_services", "apm",
            "List services that reported APM trace metrics during the last hour.",
            ListApmServicesArgs, list_apm_services, logger,
        ),
        make_tool(
            "get_service_dependencies", "apm",
            "Get the APM service map for an environment: which services call which. "
            "Optionally narrowed to one service's callers and callees.",
            GetServiceDependenciesArgs, get_service_dependencies, logger,
        ),
        make_tool(
            "get_service_dependencies_multi_env", "apm",
            "Get a summary of the APM service map for several environments at once.",
            GetServiceDependenciesMultiEnvArgs, get_service_dependencies_multi_env, logger,
        ),
    ]
