import pytest
from unittest.mock import AsyncMock, MagicMock

from datadog_mcp.clients import (ApmClient, DatadogClients, EventsClient, LogsClient, MetricsClient,
                                 MonitorsClient, ServicesClient)
from datadog_mcp.core.logger import setup_logger

TEST_API_KEY = "test_api_key"
TEST_APP_KEY = "test_app_key"

# 2023-11-14T22:13:20Z
START_SECONDS = 1700000000
END_SECONDS = 1700003600
START_MS = START_SECONDS * 1000
END_MS = END_SECONDS * 1000


class FakeApiException(Exception):
    """Shaped like ``datadog_api_client.exceptions.ApiException``."""

    def __init__(self, status, reason):
        super().__init__(f"({status}) Reason: {reason}")
        self.status = status
        self.reason = reason


@pytest.fixture
def env_vars(monkeypatch):
    monkeypatch.setenv("DATADOG_API_KEY", TEST_API_KEY)
    monkeypatch.setenv("DATADOG_APP_KEY", TEST_APP_KEY)
    monkeypatch.delenv("DATADOG_SITE", raising=False)
    monkeypatch.delenv("DATADOG_ENABLED_DOMAINS", raising=False)


@pytest.fixture
def logger():
    return setup_logger("datadog_mcp_tests", "DEBUG")


@pytest.fixture
def metrics_api():
    return AsyncMock()


@pytest.fixture
def logs_api():
    return AsyncMock()


@pytest.fixture
def indexes_api():
    return AsyncMock()


@pytest.fixture
def events_api():
    return AsyncMock()


@pytest.fixture
def monitors_api():
    return AsyncMock()


@pytest.fixture
def spans_api():
    return AsyncMock()


@pytest.fixture
def http_session():
    return MagicMock()


@pytest.fixture
def auth():
    mock_auth = MagicMock()
    mock_auth.api_base_url = "https://api.datadoghq.com"
    mock_auth.get_auth_headers.return_value = {
        "DD-API-KEY": TEST_API_KEY,
        "DD-APPLICATION-KEY": TEST_APP_KEY,
    }
    return mock_auth


@pytest.fixture
def metrics_client(metrics_api, logger):
    return MetricsClient(None, logger, metrics_api=metrics_api)


@pytest.fixture
def logs_client(logs_api, indexes_api, logger):
    return LogsClient(None, logger, logs_api=logs_api, indexes_api=indexes_api)


@pytest.fixture
def events_client(events_api, logger):
    return EventsClient(None, logger, events_api=events_api)


@pytest.fixture
def monitors_client(monitors_api, logger):
    return MonitorsClient(None, logger, monitors_api=monitors_api)


@pytest.fixture
def apm_client(spans_api, metrics_api, logger):
    return ApmClient(None, logger, spans_api=spans_api, metrics_api=metrics_api)


@pytest.fixture
def services_client(auth, http_session, logger):
    return ServicesClient(auth, logger, session=http_session)


@pytest.fixture
def clients(metrics_client, logs_client, events_client, monitors_client, apm_client, services_client):
    return DatadogClients(
        metrics=metrics_client,
        logs=logs_client,
        events=events_client,
        monitors=monitors_client,
        apm=apm_client,
        services=services_client,
    )


def http_response(status_code=200, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.text = ""
    response.json.return_value = payload if payload is not None else {}
    return response
