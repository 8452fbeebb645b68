import asyncio
import json
import httpx
import pytest
from core.stream_session import open_stream
from model.api import ClaimEvent, DoneEvent
from stream_fixtures import (
    claim_record,
    done_record,
    eventually,
    gated_body,
    make_client,
    ndjson,
)


class Recorder:
    def __init__(self):
        self.events = []
        self.errors = []
        self.decode_errors = []

    def on_event(self, evt):
        self.events.append(evt)

    def on_error(self, message):
        self.errors.append(message)

    def on_decode_error(self, err):
        self.decode_errors.append(err)


def _open(client, rec, job_id="job-1", key="sk-test"):
    return open_stream(
        client,
        job_id,
        key,
        rec.on_event,
        rec.on_error,
        on_decode_error=rec.on_decode_error,
    )


@pytest.mark.asyncio
async def test_delivers_events_in_order_and_sends_credential_in_body():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content), dict(request.headers)))
        return httpx.Response(
            200, content=ndjson(claim_record("c1"), claim_record("c2"), done_record())
        )

    rec = Recorder()
    session = _open(make_client(handler), rec)
    await session.wait()

    assert [type(e) for e in rec.events] == [ClaimEvent, ClaimEvent, DoneEvent]
    assert [e.payload.id for e in rec.events[:2]] == ["c1", "c2"]
    assert rec.errors == []
    path, body, headers = seen[0]
    assert path == "/api/v1/stream-claim"
    assert body == {"jobId": "job-1", "apiKey": "sk-test"}
    assert "x-api-key" not in headers
    assert session.finished and not session.failed


@pytest.mark.asyncio
async def test_rate_limited_start_reports_structured_message_once():
    def handler(request):
        return httpx.Response(
            429, json={"error": "rate_limited", "message": "Too many requests"}
        )

    rec = Recorder()
    session = _open(make_client(handler), rec)
    await session.wait()

    assert rec.errors == ["Too many requests"]
    assert rec.events == []
    assert session.failed


@pytest.mark.asyncio
async def test_success_without_body_is_a_transport_error():
    rec = Recorder()
    session = _open(make_client(lambda request: httpx.Response(204)), rec)
    await session.wait()
    assert rec.errors == ["No response body"]
    assert rec.events == []


@pytest.mark.asyncio
async def test_network_failure_reported_once():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    rec = Recorder()
    session = _open(make_client(handler), rec)
    await session.wait()
    assert rec.errors == ["connection refused"]
    assert rec.events == []


@pytest.mark.asyncio
async def test_failure_mid_body_keeps_earlier_events():
    async def body():
        yield ndjson(claim_record("c1"))
        raise httpx.ReadError("peer closed connection")

    rec = Recorder()
    session = _open(make_client(lambda request: httpx.Response(200, content=body())), rec)
    await session.wait()
    assert [e.payload.id for e in rec.events] == ["c1"]
    assert rec.errors == ["peer closed connection"]


@pytest.mark.asyncio
async def test_malformed_line_is_soft():
    body = ndjson(claim_record("c1")) + b"oops\n" + ndjson(claim_record("c2"))
    rec = Recorder()
    session = _open(make_client(lambda request: httpx.Response(200, content=body)), rec)
    await session.wait()
    assert [e.payload.id for e in rec.events] == ["c1", "c2"]
    assert rec.errors == []
    assert len(rec.decode_errors) == 1
    assert rec.decode_errors[0].line == "oops"


@pytest.mark.asyncio
async def test_cancel_discards_late_reads_and_is_idempotent():
    gate = asyncio.Event()

    def handler(request):
        return httpx.Response(
            200,
            content=gated_body(
                ndjson(claim_record("c1")), gate, ndjson(claim_record("c2"), done_record())
            ),
        )

    rec = Recorder()
    session = _open(make_client(handler), rec)
    await eventually(lambda: len(rec.events) == 1)

    session.cancel()
    session.cancel()
    gate.set()
    await session.wait()

    assert [e.payload.id for e in rec.events] == ["c1"]
    assert rec.errors == []
    assert session.cancelled
    session.cancel()


@pytest.mark.asyncio
async def test_cancel_before_first_read():
    rec = Recorder()
    session = _open(
        make_client(lambda request: httpx.Response(200, content=ndjson(claim_record("c1")))),
        rec,
    )
    session.cancel()
    await session.wait()
    assert rec.events == []
    assert rec.errors == []


@pytest.mark.asyncio
async def test_cancel_after_finish_is_noop():
    rec = Recorder()
    session = _open(
        make_client(lambda request: httpx.Response(200, content=ndjson(done_record()))),
        rec,
    )
    await session.wait()
    session.cancel()
    assert len(rec.events) == 1
    assert rec.errors == []


@pytest.mark.asyncio
async def test_done_callback_runs_on_completion_only():
    closed = []
    rec = Recorder()
    session = _open(
        make_client(lambda request: httpx.Response(200, content=ndjson(done_record()))),
        rec,
    )
    session.add_done_callback(closed.append)
    await session.wait()
    assert closed == [session]

    gate = asyncio.Event()
    other = _open(
        make_client(lambda request: httpx.Response(200, content=gated_body(b"", gate))),
        Recorder(),
    )
    other.add_done_callback(closed.append)
    other.cancel()
    await other.wait()
    assert closed == [session]
