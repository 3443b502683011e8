"""APM service map client.

The service dependencies endpoint has no SDK wrapper, so it is called over
plain HTTP with ``requests`` (run in a worker thread to keep the event loop
free).
"""

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ..core.errors import InputValidationError, UpstreamError
from ..core.logger import DatadogMcpLogger
from ..core.models import Outcome
from .auth import DatadogAuth
from .base import BaseClient, require

REQUEST_TIMEOUT_SECONDS = 30

UNAVAILABLE_MESSAGE = (
    "Service Dependencies API not available or insufficient permissions. "
    "This feature may require APM and the apm_read scope in your Datadog org."
)


def normalize_all_services(raw: Any) -> Dict[str, List[Dict[str, str]]]:
    """``{"svc": {"calls": [...]}, ...}`` -> services and edges."""
    services, dependencies = [], []
    if isinstance(raw, dict):
        for name, entry in raw.items():
            if isinstance(entry, dict) and isinstance(entry.get("calls"), list):
                services.append({"name": name, "type": "service"})
                dependencies.extend({"from": name, "to": callee} for callee in entry["calls"])
    return {"services": services, "dependencies": dependencies}


def normalize_one_service(raw: Any) -> Dict[str, List[Dict[str, str]]]:
    """``{"name": ..., "calls": [...], "called_by": [...]}`` -> services and edges."""
    services, dependencies = [], []
    if isinstance(raw, dict):
        name = raw.get("name") or ""
        calls = raw.get("calls") if isinstance(raw.get("calls"), list) else []
        called_by = raw.get("called_by") if isinstance(raw.get("called_by"), list) else []

        for service in dict.fromkeys([name, *calls, *called_by]):
            if service:
                services.append({"name": service, "type": "service"})
        dependencies.extend({"from": name, "to": callee} for callee in calls)
        dependencies.extend({"from": caller, "to": name} for caller in called_by)
    return {"services": services, "dependencies": dependencies}


class ServicesClient(BaseClient):
    """Reads ``/api/v1/service_dependencies``."""

    domain = "apm"

    def __init__(self, auth: DatadogAuth, logger: DatadogMcpLogger,
                 session: Optional[requests.Session] = None):
        super().__init__(logger)
        self.auth = auth
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        response = self.session.get(
            f"{self.auth.api_base_url}/api/v1{path}",
            headers=self.auth.get_auth_headers(),
            params=params,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        if response.status_code >= 400:
            raise UpstreamError(
                f"HTTP {response.status_code}: {response.reason or response.text}",
                response.status_code,
            )
        return response.json()

    async def get_service_dependencies(self, env: str, service_name: Optional[str] = None,
                                       primary_tag: Optional[str] = None,
                                       start: Optional[int] = None,
                                       end: Optional[int] = None) -> Outcome:
        """Dependency graph for ``env``, or the neighbours of ``service_name``.

        403 and 404 mean the service map is not available to this org and
        yield empty lists with an explanatory ``message``.
        """
        try:
            require(env, "Environment (env) is required")
            params = {"env": env}
            if primary_tag:
                params["primary_tag"] = primary_tag
            if start is not None:
                params["start"] = str(start)
            if end is not None:
                params["end"] = str(end)
            path = f"/service_dependencies/{quote(service_name, safe='')}" if service_name \
                else "/service_dependencies"

            self.logger.debug(f"Requesting service dependencies {path}", self.domain,
                              {"env": env, "serviceName": service_name or "none"})
            try:
                raw = await asyncio.to_thread(self._get, path, params)
            except UpstreamError as e:
                if e.status_code in (403, 404):
                    self.logger.warning(f"Service map unavailable: {e.message}", self.domain)
                    return Outcome.success({"services": [], "dependencies": [], "message": UNAVAILABLE_MESSAGE})
                raise

            normalized = normalize_one_service(raw) if service_name else normalize_all_services(raw)
            return Outcome.success(normalized)
        except Exception as e:
            return self._failure("get service dependencies", e)

    async def get_service_dependencies_multi_env(self, envs: List[str]) -> Outcome:
        """One lookup per environment; each gets its data or its error."""
        if not isinstance(envs, (list, tuple)) or not envs:
            return self._failure(
                "get service dependencies", InputValidationError("At least one environment is required")
            )

        results: Dict[str, Any] = {}
        for env in envs:
            data, error = await self.get_service_dependencies(env)
            results[env] = {"error": error} if error else data
        return Outcome.success(results)
