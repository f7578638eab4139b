"""
Reports client against a mocked reporting backend.
"""

import json

import httpx
import pytest

from flashdash.apps.access.session import SessionContext
from flashdash.apps.reports.client import ReportsClient
from flashdash.apps.reports.notices import NoticeBoard
from flashdash.apps.reports.schemas import ComparisonDataset, SectionDataset

pytestmark = pytest.mark.asyncio


def make_client(handler, role: str = "admin") -> ReportsClient:
    return ReportsClient(
        base_url="https://reports.test",
        session=SessionContext(token="tok", role=role),
        notices=NoticeBoard(),
        transport=httpx.MockTransport(handler),
    )


async def test_sections_load_concurrently_and_fail_independently():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, request.url.params.get("range")))
        assert request.headers["authorization"] == "Bearer tok"
        if request.url.path.endswith("/intake"):
            return httpx.Response(500, json={"message": "boom"})
        if request.url.path.endswith("/comparison"):
            return httpx.Response(200, json={"agents": [{"name": "Olive", "value": 3}]})
        return httpx.Response(200, json={"rows": [{"agent": "Olive", "received": 5}]})

    datasets = await make_client(handler).fetch_reports("admin", "this_week")

    assert set(datasets) == {"company", "opener", "intake", "comparison"}
    assert {range_ for _, range_ in seen} == {"this_week"}
    assert datasets["opener"].rows[0]["received"] == 5
    assert isinstance(datasets["intake"], SectionDataset)
    assert datasets["intake"].rows[0]["agent"] == "—"
    assert isinstance(datasets["comparison"], ComparisonDataset)
    assert datasets["comparison"].agents == [{"name": "Olive", "value": 3}]


async def test_role_limits_sections():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json=[])

    datasets = await make_client(handler, role="opener").fetch_reports("opener")
    assert sorted(datasets) == ["comparison", "opener"]
    assert sorted(paths) == ["/api/reports/comparison", "/api/reports/opener"]


async def test_fallback_payload_raises_notice_not_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "fallback", "totalLeads": 12})

    client = make_client(handler)
    summary = await client.fetch_dashboard_summary("intake")

    assert summary.totalLeads == 12
    assert summary.pendingLabel == "Enrolled Leads"
    assert client.notices.fallback_notice().message == "Cached data displayed"
    # GETs stay quiet on the ribbon unless asked.
    assert client.notices.status_ribbon() is None


async def test_summary_failure_returns_fallback():
    client = make_client(lambda request: httpx.Response(503))
    summary = await client.fetch_dashboard_summary("opener")
    assert summary.totalLeads == 0
    assert summary.pendingLabel == "Transferred Leads"


async def test_non_get_requests_report_on_the_ribbon():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            assert json.loads(request.content) == {"forthUserId": "F-1"}
            return httpx.Response(200, json={"message": "Mapping deleted"})
        return httpx.Response(400, json={"message": "Nope"})

    client = make_client(handler)
    await client.request("POST", "/api/forthcrm/mapping/delete", json={"forthUserId": "F-1"})
    assert client.notices.status_ribbon().kind == "success"
    assert client.notices.status_ribbon().message == "Mapping deleted"

    with pytest.raises(httpx.HTTPStatusError):
        await client.request("GET", "/api/forthcrm/mapping", notify=True)
    assert client.notices.status_ribbon().kind == "error"
    assert client.notices.status_ribbon().message == "Nope"


async def test_silent_requests_skip_the_ribbon():
    client = make_client(lambda request: httpx.Response(200, json={"ok": True}))
    await client.request("PUT", "/admin/employees/x", json={}, silent=True)
    assert client.notices.status_ribbon() is None


async def test_sync_status_keeps_last_success_on_error():
    responses = iter([
        httpx.Response(200, json={"active": True, "last_successful_sync": "2024-05-01T10:00:00Z"}),
        httpx.Response(502),
    ])
    client = make_client(lambda request: next(responses))

    first = await client.fetch_sync_status()
    assert first.active is True
    assert first.error is False

    second = await client.fetch_sync_status()
    assert second.active is False
    assert second.error is True
    assert second.last_success == "2024-05-01T10:00:00Z"


async def test_non_json_section_falls_back_alone():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/opener"):
            return httpx.Response(200, text="<html>gateway</html>")
        return httpx.Response(200, json={"rows": [{"agent": "Ivy", "received": 4}]})

    datasets = await make_client(handler).fetch_reports("admin")

    assert set(datasets) == {"company", "opener", "intake", "comparison"}
    assert datasets["opener"].rows[0]["agent"] == "—"
    assert datasets["intake"].rows[0]["received"] == 4


async def test_unexpected_shape_falls_back_alone():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/comparison"):
            return httpx.Response(200, json={"trend": {"mon": 1}})
        return httpx.Response(200, json={"rows": [{"agent": "Ivy", "received": 4}]})

    datasets = await make_client(handler).fetch_reports("intake")

    assert datasets["comparison"] == ComparisonDataset()
    assert datasets["intake"].rows[0]["received"] == 4


async def test_unreadable_summary_and_sync_status_fall_back():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/dashboard/summary":
            return httpx.Response(200, json={"weeklyPerformance": [1, 2, 3]})
        return httpx.Response(200, text="maintenance")

    client = make_client(handler)
    summary = await client.fetch_dashboard_summary("opener")
    assert summary.pendingLabel == "Transferred Leads"
    assert [p["label"] for p in summary.weeklyPerformance][0] == "Mon"

    status = await client.fetch_sync_status()
    assert status.error is True
    assert status.active is False


async def test_non_json_reply_to_a_write_reports_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ValueError):
        await client.request("POST", "/api/forthcrm/mapping/set", json={})
    assert client.notices.status_ribbon().kind == "error"
