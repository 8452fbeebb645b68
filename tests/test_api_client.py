import httpx
import pytest
from stream_fixtures import make_client
from util.errors import TransportError, ValidationError
from util.functions import extract_error_message, join_url


def _resp(status, **kw):
    return httpx.Response(status, request=httpx.Request("POST", "http://t/x"), **kw)


@pytest.mark.parametrize(
    "response, expected",
    [
        (_resp(400, json={"detail": "Unknown or expired jobId"}), "Unknown or expired jobId"),
        (_resp(400, json={"detail": {"message": "bad pdf"}}), "bad pdf"),
        (_resp(413, json={"ok": False, "error": "file_too_large", "maxMb": 20}), "File exceeds 20 MB."),
        (_resp(413, json={"ok": False, "error": "file_too_large"}), "File exceeds 10 MB."),
        (
            _resp(429, json={"error": "rate_limited", "message": "Too many requests"}),
            "Too many requests",
        ),
        (
            _resp(429, json={"error": "rate_limited"}, headers={"Retry-After": "60"}),
            "Too many requests. Try again in 60s.",
        ),
        (_resp(401, json={"error": "invalid_api_key"}), "invalid_api_key"),
        (_resp(500, text="<html>oops</html>"), "500 Internal Server Error"),
    ],
)
def test_extract_error_message(response, expected):
    assert extract_error_message(response) == expected


def test_join_url():
    assert join_url("http://h:8000/", "/api/v1", "/stream-claim") == "http://h:8000/api/v1/stream-claim"
    assert join_url("http://h", "", "x/") == "http://h/x"


@pytest.mark.asyncio
async def test_upload_returns_job_id():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"jobId": "job-42"})

    client = make_client(handler)
    assert await client.upload_paper("paper.pdf", b"%PDF", "sk") == "job-42"
    assert seen[0].url.path == "/api/v1/upload-paper"
    assert b'name="apiKey"' in seen[0].content
    assert "x-api-key" not in seen[0].headers


@pytest.mark.asyncio
async def test_upload_preflight():
    def handler(request):
        raise AssertionError("no request expected")

    client = make_client(handler)
    with pytest.raises(ValidationError):
        await client.upload_paper("paper.pdf", b"", "sk")
    with pytest.raises(ValidationError):
        await client.upload_paper("paper.pdf", b"%PDF", "   ")


@pytest.mark.asyncio
async def test_upload_failure_uses_structured_message():
    client = make_client(
        lambda request: httpx.Response(413, json={"ok": False, "error": "file_too_large", "maxMb": 10})
    )
    with pytest.raises(TransportError) as exc:
        await client.upload_paper("paper.pdf", b"%PDF", "sk")
    assert exc.value.message == "File exceeds 10 MB."


@pytest.mark.asyncio
async def test_upload_network_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(TransportError) as exc:
        await make_client(handler).upload_paper("paper.pdf", b"%PDF", "sk")
    assert exc.value.message == "timed out"


@pytest.mark.asyncio
async def test_validate_key():
    def handler(request):
        if b"good" in request.content:
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(401, json={"detail": "Invalid API key."})

    client = make_client(handler)
    assert (await client.validate_key("good")).ok is True
    bad = await client.validate_key("bad")
    assert (bad.ok, bad.status, bad.error) == (False, 401, "Invalid API key.")
    empty = await client.validate_key("  ")
    assert (empty.ok, empty.status, empty.error) == (False, 0, "Empty API key.")


@pytest.mark.asyncio
async def test_suggest_citations_accepts_plain_list():
    client = make_client(
        lambda request: httpx.Response(
            200, json=[{"title": "CNN vs GNN survey", "url": "https://example.org/survey", "venue": "TPAMI", "year": 2020}]
        )
    )
    items = await client.suggest_citations("GNNs dominate CNNs")
    assert items[0].venue == "TPAMI"
    assert await client.suggest_citations("   ") == []
