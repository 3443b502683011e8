import json

import pytest

from datadog_mcp.tools.monitors_tools import get_monitors_tools

from .conftest import FakeApiException


def make_monitors(count, **fields):
    return [
        {"id": i, "name": f"Monitor {i}", "type": "metric alert", "overall_state": "OK", "tags": [], **fields}
        for i in range(count)
    ]


@pytest.fixture
def tools(monitors_client, logger):
    return {tool.name: tool for tool in get_monitors_tools(monitors_client, logger)}


@pytest.mark.asyncio
async def test_list_monitors_forwards_server_side_filters(monitors_client, monitors_api):
    monitors_api.list_monitors.return_value = make_monitors(2)

    data, error = await monitors_client.list_monitors(name="cpu", tags=["env:prod", "team:a"], page_size=1000)

    assert error is None
    assert len(data) == 2
    monitors_api.list_monitors.assert_awaited_once_with(name="cpu", tags="env:prod,team:a", page=0, page_size=100)


@pytest.mark.asyncio
async def test_list_monitors_without_filters(monitors_client, monitors_api):
    monitors_api.list_monitors.return_value = []

    data, error = await monitors_client.list_monitors()

    assert data == []
    monitors_api.list_monitors.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_list_monitors_filters_status_and_type(monitors_client, monitors_api):
    monitors_api.list_monitors.return_value = [
        {"id": 1, "type": "metric alert", "overall_state": "Alert"},
        {"id": 2, "type": "log alert", "overall_state": "Alert"},
        {"id": 3, "type": "metric alert", "overall_state": "OK"},
        {"id": 4, "type": "metric alert", "overall_state": "Warn"},
    ]

    triggered, _ = await monitors_client.list_monitors(status="triggered", monitor_type="metric alert")
    degraded, _ = await monitors_client.list_monitors(status="degraded")

    assert [m["id"] for m in triggered] == [1]
    assert [m["id"] for m in degraded] == [4]


@pytest.mark.asyncio
@pytest.mark.parametrize("count,has_more,returned", [(3, False, 3), (150, True, 100)])
async def test_list_monitors_tool_counts(tools, monitors_api, count, has_more, returned):
    monitors_api.list_monitors.return_value = make_monitors(count)

    reply = await tools["list_monitors"].handler({})

    body = json.loads(reply.text)
    assert body["monitorsCount"] == count
    assert body["hasMore"] is has_more
    assert len(body["monitors"]) == returned


@pytest.mark.asyncio
async def test_list_monitors_tool_rejects_unknown_status(tools, monitors_api):
    reply = await tools["list_monitors"].handler({"status": "exploded"})

    assert reply.is_error is True
    assert "status" in reply.text
    monitors_api.list_monitors.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_monitor_status_accepts_zero(tools, monitors_api):
    monitors_api.get_monitor.return_value = {"id": 0, "overall_state": "OK", "matching_downtimes": []}

    reply = await tools["get_monitor_status"].handler({"monitorId": 0})

    assert reply.is_error is False
    assert json.loads(reply.text)["status"]["overall_state"] == "OK"
    monitors_api.get_monitor.assert_awaited_once_with(0, with_downtimes=True)


@pytest.mark.asyncio
@pytest.mark.parametrize("monitor_id", [-1, "abc", 1.5])
async def test_get_monitor_status_rejects_invalid_ids(tools, monitors_api, monitor_id):
    reply = await tools["get_monitor_status"].handler({"monitorId": monitor_id})

    assert reply.is_error is True
    assert "non-negative number" in reply.text
    monitors_api.get_monitor.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_monitor_without_downtimes(monitors_client, monitors_api):
    monitors_api.get_monitor.return_value = {"id": 7}

    data, _ = await monitors_client.get_monitor("7")

    assert data == {"id": 7}
    monitors_api.get_monitor.assert_awaited_once_with(7)


@pytest.mark.asyncio
async def test_get_monitor_status_reports_not_found(tools, monitors_api):
    monitors_api.get_monitor.side_effect = FakeApiException(404, "Not Found")

    reply = await tools["get_monitor_status"].handler({"monitorId": 12345})

    assert reply.is_error is True
    assert "HTTP 404: Not Found" in reply.text


@pytest.mark.asyncio
async def test_search_monitors_tool_filters_tags(tools, monitors_api):
    monitors_api.search_monitors.return_value = {
        "monitors": [
            {"id": 1, "tags": ["env:prod", "team:a"]},
            {"id": 2, "tags": ["env:prod"]},
            {"id": 3},
        ]
    }

    reply = await tools["search_monitors"].handler({"query": "cpu", "tags": ["env:prod", "team:a"]})

    body = json.loads(reply.text)
    assert body["monitorsCount"] == 1
    assert body["monitors"][0]["id"] == 1
    monitors_api.search_monitors.assert_awaited_once_with(query="cpu")


@pytest.mark.asyncio
async def test_search_monitors_requires_query(monitors_client, monitors_api):
    _, error = await monitors_client.search_monitors("  ")

    assert error.message == "Search query is required"
    monitors_api.search_monitors.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_monitor_groups_tool(tools, monitors_api):
    monitors_api.search_monitor_groups.return_value = {
        "groups": [{"group": "host:web-1", "status": "Alert"}, {"group": "host:web-2", "status": "OK"}]
    }

    reply = await tools["get_monitor_groups"].handler({"monitorId": "0"})

    body = json.loads(reply.text)
    assert body["groupsCount"] == 2
    monitors_api.search_monitor_groups.assert_awaited_once_with(query="monitor_id:0")


@pytest.mark.asyncio
async def test_list_monitors_tool_page_size_requests_first_page(tools, monitors_api):
    monitors_api.list_monitors.return_value = make_monitors(5)

    await tools["list_monitors"].handler({"pageSize": 5})

    monitors_api.list_monitors.assert_awaited_once_with(page=0, page_size=5)


@pytest.mark.asyncio
async def test_get_monitor_status_keeps_large_ids_exact(tools, monitors_api):
    monitors_api.get_monitor.return_value = {"id": 12345678901234567890}

    await tools["get_monitor_status"].handler({"monitorId": "12345678901234567890"})

    monitors_api.get_monitor.assert_awaited_once_with(12345678901234567890, with_downtimes=True)
