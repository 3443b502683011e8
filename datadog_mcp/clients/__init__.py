"""Datadog domain clients."""

from typing import NamedTuple

from ..core.logger import DatadogMcpLogger
from .apm import ApmClient
from .auth import DatadogAuth
from .events import EventsClient
from .logs import LogsClient
from .metrics import MetricsClient
from .monitors import MonitorsClient
from .services import ServicesClient


class DatadogClients(NamedTuple):
    """One client per domain, all sharing the same API client."""

    metrics: MetricsClient
    logs: LogsClient
    events: EventsClient
    monitors: MonitorsClient
    apm: ApmClient
    services: ServicesClient


def create_clients(auth: DatadogAuth, logger: DatadogMcpLogger) -> DatadogClients:
    """Build every domain client from an initialized ``DatadogAuth``."""
    api_client = auth.get_api_client()
    return DatadogClients(
        metrics=MetricsClient(api_client, logger),
        logs=LogsClient(api_client, logger),
        events=EventsClient(api_client, logger),
        monitors=MonitorsClient(api_client, logger),
        apm=ApmClient(api_client, logger),
        services=ServicesClient(auth, logger),
    )


__all__ = [
    "ApmClient", "DatadogAuth", "DatadogClients", "EventsClient", "LogsClient",
    "MetricsClient", "MonitorsClient", "ServicesClient", "create_clients",
]
