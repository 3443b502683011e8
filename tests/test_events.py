import json

import pytest

from datadog_mcp.tools.events_tools import get_events_tools

from .conftest import END_MS, END_SECONDS, START_SECONDS, FakeApiException


def make_events(count):
    return {
        "events": [
            {
                "id": i,
                "title": f"Deploy {i}",
                "text": "t" * 400,
                "priority": "normal",
                "alert_type": "info",
                "tags": [f"tag:{n}" for n in range(8)],
                "date_happened": START_SECONDS + i,
            }
            for i in range(count)
        ],
        "status": "ok",
    }


@pytest.fixture
def tools(events_client, logger):
    return {tool.name: tool for tool in get_events_tools(events_client, logger)}


@pytest.mark.asyncio
async def test_search_events_passes_range_and_query(events_client, events_api):
    events_api.list_events.return_value = make_events(2)

    data, error = await events_client.search_events("deploy", START_SECONDS, END_SECONDS)

    assert error is None
    assert len(data["events"]) == 2
    events_api.list_events.assert_awaited_once_with(start=START_SECONDS, end=END_SECONDS, tags="deploy")


@pytest.mark.asyncio
async def test_search_events_without_query_sends_no_tags(events_client, events_api):
    events_api.list_events.return_value = make_events(0)

    await events_client.search_events(None, START_SECONDS, END_SECONDS)

    events_api.list_events.assert_awaited_once_with(start=START_SECONDS, end=END_SECONDS)


@pytest.mark.asyncio
async def test_search_events_trims_to_page_size(events_client, events_api):
    events_api.list_events.return_value = make_events(30)

    data, _ = await events_client.search_events("", START_SECONDS, END_SECONDS, 5)
    assert [e["id"] for e in data["events"]] == [0, 1, 2, 3, 4]

    data, _ = await events_client.search_events("", START_SECONDS, END_SECONDS)
    assert len(data["events"]) == 10


@pytest.mark.asyncio
async def test_search_events_rejects_inverted_range(events_client, events_api):
    data, error = await events_client.search_events("", END_SECONDS, START_SECONDS)

    assert data is None
    assert error.message == "Start time must be before end time"
    events_api.list_events.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_monitor_events_accepts_zero(events_client, events_api):
    events_api.list_events.return_value = make_events(1)

    _, error = await events_client.get_monitor_events(0, START_SECONDS, END_SECONDS)

    assert error is None
    assert events_api.list_events.await_args.kwargs["tags"] == "monitor_id:0"


@pytest.mark.asyncio
async def test_get_monitor_events_rejects_negative_id(events_client, events_api):
    _, error = await events_client.get_monitor_events(-1, START_SECONDS, END_SECONDS)

    assert "non-negative" in error.message
    events_api.list_events.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_events_by_alert_type(events_client, events_api):
    events_api.list_events.return_value = make_events(0)

    await events_client.search_events_by_alert_type(" error ", START_SECONDS, END_SECONDS)

    assert events_api.list_events.await_args.kwargs["tags"] == "alert_type:error"


@pytest.mark.asyncio
async def test_search_events_by_tags_joins_with_and(events_client, events_api):
    events_api.list_events.return_value = make_events(0)

    await events_client.search_events_by_tags(["env:prod", "service:api"], START_SECONDS, END_SECONDS)

    assert events_api.list_events.await_args.kwargs["tags"] == "tags:env:prod AND tags:service:api"


@pytest.mark.asyncio
@pytest.mark.parametrize("tags", [["env:prod AND service:*"], ["a OR b"], []])
async def test_search_events_by_tags_tool_rejects_before_calling_sdk(tools, events_api, tags):
    reply = await tools["search_events_by_tags"].handler({"tags": tags, "from": START_SECONDS, "to": END_SECONDS})

    assert reply.is_error is True
    events_api.list_events.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_events_tool_summarizes(tools, events_api):
    events_api.list_events.return_value = make_events(3)

    reply = await tools["search_events"].handler(
        {"query": "deploy", "priority": "normal", "from": START_SECONDS, "to": END_MS, "limit": 3}
    )

    assert reply.is_error is False
    body = json.loads(reply.text)
    assert body["query"] == "deploy priority:normal"
    assert body["eventsCount"] == 3
    assert body["events"][0]["text"] == "t" * 300 + "..."
    assert len(body["events"][0]["tags"]) == 5
    assert events_api.list_events.await_args.kwargs["end"] == END_SECONDS


@pytest.mark.asyncio
async def test_get_event_details_tool_converts_numeric_ids(tools, events_api):
    events_api.get_event.return_value = {"event": {"id": 123, "title": "Deploy"}}

    reply = await tools["get_event_details"].handler({"eventId": "123"})

    body = json.loads(reply.text)
    assert body["details"]["event"]["title"] == "Deploy"
    events_api.get_event.assert_awaited_once_with(event_id=123)


@pytest.mark.asyncio
async def test_get_event_details_tool_reports_not_found(tools, events_api):
    events_api.get_event.side_effect = FakeApiException(404, "Not Found")

    reply = await tools["get_event_details"].handler({"eventId": 999})

    assert reply.is_error is True
    assert "HTTP 404: Not Found" in reply.text
    assert "Hint:" in reply.text


@pytest.mark.asyncio
async def test_get_monitor_events_tool(tools, events_api):
    events_api.list_events.return_value = make_events(2)

    reply = await tools["get_monitor_events"].handler({"monitorId": "42", "from": START_SECONDS, "to": END_SECONDS})

    body = json.loads(reply.text)
    assert body["monitorId"] == "42"
    assert body["eventsCount"] == 2
    assert events_api.list_events.await_args.kwargs["tags"] == "monitor_id:42"


@pytest.mark.asyncio
@pytest.mark.parametrize("from_,to", [(START_SECONDS, START_SECONDS), (END_SECONDS, START_SECONDS)])
@pytest.mark.parametrize("call", [
    lambda client, from_, to: client.get_monitor_events(42, from_, to),
    lambda client, from_, to: client.search_events_by_tags(["env:prod"], from_, to),
    lambda client, from_, to: client.search_events_by_alert_type("error", from_, to),
])
async def test_event_searches_reject_bad_ranges(events_client, events_api, call, from_, to):
    data, error = await call(events_client, from_, to)

    assert data is None
    assert error.message == "Start time must be before end time"
    events_api.list_events.assert_not_awaited()
