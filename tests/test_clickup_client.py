"""
Tests for the ClickUp client and the due-today window.
"""

import datetime
import httpx
import pytest

from focushud.infra.clickup_client import ClickUpClient, DueWindow
from focushud.infra.http import SyncError

DAY = datetime.date(2026, 3, 2)


def local_millis(day: datetime.date) -> int:
    """Epoch milliseconds of local midnight starting ``day``"""
    return int(datetime.datetime.combine(day, datetime.time.min).astimezone().timestamp() * 1000)


def make_client(handler) -> ClickUpClient:
    return ClickUpClient("pk_raw_token", transport=httpx.MockTransport(handler))


class TestDueWindow:

    def test_bounds_span_one_local_day(self):
        window = DueWindow.for_day(DAY)
        assert window.start == local_millis(DAY)
        assert window.end == local_millis(DAY + datetime.timedelta(days=1)) - 1

    def test_due_at_local_midnight_is_included(self):
        window = DueWindow.for_day(DAY)
        assert window.contains(local_millis(DAY))

    def test_last_millisecond_of_day_is_included(self):
        window = DueWindow.for_day(DAY)
        assert window.contains(local_millis(DAY + datetime.timedelta(days=1)) - 1)

    def test_due_after_next_midnight_is_excluded(self):
        window = DueWindow.for_day(DAY)
        assert not window.contains(local_millis(DAY + datetime.timedelta(days=1)) + 1)

    def test_due_before_midnight_is_excluded(self):
        window = DueWindow.for_day(DAY)
        assert not window.contains(local_millis(DAY) - 1)

    def test_params_are_exclusive_bounds(self):
        window = DueWindow.for_day(DAY)
        assert window.as_params() == {
            "due_date_gt": window.start - 1,
            "due_date_lt": window.end + 1,
        }


@pytest.mark.asyncio
async def test_fetch_tasks_query_and_auth():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"tasks": []})

    client = make_client(handler)
    await client.fetch_tasks("901", due_today_only=False)

    request = seen[0]
    assert request.headers["Authorization"] == "pk_raw_token"
    assert request.url.path == "/api/v2/list/901/task"
    params = request.url.params
    assert params["archived"] == "false"
    assert params["include_closed"] == "false"
    assert params["order_by"] == "updated"
    assert params["reverse"] == "true"
    assert "due_date_gt" not in params
    assert "due_date_lt" not in params
    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_tasks_due_today_sends_window():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"tasks": []})

    client = make_client(handler)
    await client.fetch_tasks("901", due_today_only=True, today=DAY)

    window = DueWindow.for_day(DAY)
    params = seen[0].url.params
    assert int(params["due_date_gt"]) == window.start - 1
    assert int(params["due_date_lt"]) == window.end + 1
    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_tasks_parses_in_server_order():
    due = local_millis(DAY) + 3600 * 1000

    def handler(request):
        return httpx.Response(200, json={"tasks": [
            {"id": "86a1", "name": "Fix login bug", "due_date": str(due),
             "status": {"status": "in progress", "color": "#4194f6"},
             "url": "https://app.clickup.com/t/86a1"},
            {"id": "86a2", "name": "Plan sprint", "due_date": None, "status": None},
        ]})

    client = make_client(handler)
    tasks = await client.fetch_tasks("901")

    assert [t.id for t in tasks] == ["86a1", "86a2"]
    assert tasks[0].status == "in progress"
    assert int(tasks[0].due_date.timestamp() * 1000) == due
    assert tasks[1].due_date is None
    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_tasks_empty_on_failure():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    client = make_client(handler)
    assert await client.fetch_tasks("901", due_today_only=True, today=DAY) == []
    assert client.last_error is SyncError.TRANSPORT
    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_tasks_empty_on_unauthorized():
    client = make_client(lambda request: httpx.Response(401, json={"err": "Token invalid"}))
    assert await client.fetch_tasks("901") == []
    assert client.last_error is SyncError.HTTP_STATUS
    await client.aclose()


@pytest.mark.asyncio
async def test_fetch_tasks_missing_tasks_key():
    client = make_client(lambda request: httpx.Response(200, json={"something": "else"}))
    assert await client.fetch_tasks("901") == []
    assert client.last_error is None
    await client.aclose()


@pytest.mark.asyncio
async def test_try_fetch_tasks_tells_failure_from_empty_list():
    def handler(request):
        if request.url.path.endswith("/list/empty/task"):
            return httpx.Response(200, json={"tasks": []})
        return httpx.Response(503)

    client = make_client(handler)

    assert await client.try_fetch_tasks("empty") == []
    assert await client.try_fetch_tasks("901") is None
    await client.aclose()
