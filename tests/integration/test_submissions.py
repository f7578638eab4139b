from urllib.parse import parse_qs

import httpx
import pytest
from httpx import AsyncClient

from flashdash.apps.submissions.models import Submission
from flashdash.core.dependencies import get_forth_client

from main import app

pytestmark = pytest.mark.asyncio


def valid_lead(**overrides):
    lead = {
        "Fname": "Jane",
        "Lname": "Doe",
        "phone": "5551234567",
        "email": "jane@example.test",
        "address": "1 Main St",
        "city": "Austin",
        "state": "TX",
        "zip": "73301",
        "DOB": "1980-01-01",
        "SSN": "123-45-6789",
        "monthly_income": 4200,
        "total_unsecured_debt": 18000,
        "consent": True,
    }
    lead.update(overrides)
    return lead


async def _submissions(session_factory):
    async with session_factory() as session:
        return await Submission.find_many(db=session)


async def test_missing_fields_are_listed_and_not_stored(
    async_client: AsyncClient, forth_stub, session_factory
):
    lead = valid_lead(phone="   ", SSN=None)
    del lead["zip"]

    resp = await async_client.post("/submissions/submit-lead", json=lead)

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["missing"] == ["phone", "zip", "SSN"]
    assert "phone" in body["message"]
    assert forth_stub.requests == []
    assert await _submissions(session_factory) == []


async def test_success_returns_file_number_and_records(
    async_client: AsyncClient, forth_stub, session_factory
):
    resp = await async_client.post(
        "/submissions/submit-lead", json=valid_lead(Fname="  Jane  ")
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["forth_response"] == "Success:123456"
    assert body["file_number"] == "123456"

    assert len(forth_stub.requests) == 1
    sent = forth_stub.requests[0]
    assert sent.headers["content-type"] == "application/x-www-form-urlencoded"
    form = parse_qs(sent.content.decode())
    assert form["Fname"] == ["Jane"]
    assert form["consent"] == ["true"]
    assert form["monthly_income"] == ["4200"]

    records = await _submissions(session_factory)
    assert len(records) == 1
    assert records[0].forth_status == "success"
    assert records[0].payload["Fname"] == "Jane"
    assert records[0].employee_id is None


async def test_submission_is_tagged_with_caller(
    async_client: AsyncClient, agent, agent_headers, session_factory
):
    resp = await async_client.post(
        "/submissions/submit-lead", json=valid_lead(), headers=agent_headers
    )
    assert resp.status_code == 200

    records = await _submissions(session_factory)
    assert records[0].employee_id == agent.id


async def test_json_response_with_file_number(async_client: AsyncClient, forth_stub):
    forth_stub.handler = lambda request: httpx.Response(
        200, json={"status": "ok", "message": "Success:987"}
    )
    resp = await async_client.post("/submissions/submit-lead", json=valid_lead())
    assert resp.json()["file_number"] == "987"
    assert resp.json()["forth_response"]["status"] == "ok"


async def test_timeout_records_error_and_returns_502(
    async_client: AsyncClient, forth_stub, session_factory
):
    def timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    forth_stub.handler = timeout

    resp = await async_client.post("/submissions/submit-lead", json=valid_lead())

    assert resp.status_code == 502
    body = resp.json()
    assert body["message"] == "Failed to submit to Forth"
    assert "timeout" in body["error"]["details"]

    records = await _submissions(session_factory)
    assert len(records) == 1
    assert records[0].forth_status == "error"
    assert "timeout" in records[0].forth_response


async def test_upstream_error_body_is_surfaced(
    async_client: AsyncClient, forth_stub, session_factory
):
    forth_stub.handler = lambda request: httpx.Response(422, json={"error": "bad state"})

    resp = await async_client.post("/submissions/submit-lead", json=valid_lead())

    assert resp.status_code == 502
    assert resp.json()["error"]["details"] == {"error": "bad state"}
    records = await _submissions(session_factory)
    assert records[0].forth_response == {"error": "bad state"}


async def test_storage_failure_does_not_change_response(
    async_client: AsyncClient, forth_stub, monkeypatch
):
    async def broken_create(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(Submission, "create", broken_create)

    ok = await async_client.post("/submissions/submit-lead", json=valid_lead())
    assert ok.status_code == 200
    assert ok.json()["file_number"] == "123456"

    forth_stub.handler = lambda request: httpx.Response(500, text="boom")
    failed = await async_client.post("/submissions/submit-lead", json=valid_lead())
    assert failed.status_code == 502
    assert failed.json()["error"]["details"] == "boom"


async def test_missing_forth_url_is_500(async_client: AsyncClient, forth_stub):
    app.dependency_overrides[get_forth_client] = lambda: forth_stub.client(url="")
    resp = await async_client.post("/submissions/submit-lead", json=valid_lead())
    assert resp.status_code == 500
    assert forth_stub.requests == []


async def test_zero_is_not_missing(async_client: AsyncClient):
    resp = await async_client.post(
        "/submissions/submit-lead", json=valid_lead(monthly_income=0)
    )
    assert resp.status_code == 200



async def test_redirect_records_error_and_returns_502(
    async_client: AsyncClient, forth_stub, session_factory
):
    forth_stub.handler = lambda request: httpx.Response(
        302, headers={"Location": "https://forth.test/login"}
    )

    resp = await async_client.post("/submissions/submit-lead", json=valid_lead())

    assert resp.status_code == 502
    assert resp.json()["error"]["details"] == "HTTP 302"
    records = await _submissions(session_factory)
    assert [r.forth_status for r in records] == ["error"]
