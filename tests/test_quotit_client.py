"""Tests for the Quotit HTTP client against in-process and local socket upstreams."""

import asyncio
import time

import httpx
import pytest

from quotit_relay.error_handler import UpstreamUnavailable
from quotit_relay.integrations.clients.real_http.quotit import DEFAULT_ACCEPT, QuotitClient
from quotit_relay.integrations.contracts import Environment


def _client(settings, handler):
    return QuotitClient(settings, transport=httpx.MockTransport(handler))


def test_urls(settings):
    client = QuotitClient(settings.model_copy(update={"stg_base_url": "https://stg.example/ActWS/"}))
    assert client.actws_url(Environment.STAGING, "GetFamily") == "https://stg.example/ActWS/GetFamily"
    assert client.submit_drugs_url().endswith("/ACA/v2/SubmitMemberDrugs")
    assert client.save_prescriptions_url().endswith("SubmitMemberDrugs?_method=SaveMemberPrescriptions&_session=rw")


@pytest.mark.asyncio
async def test_post_form_sends_accept_and_form_content_type(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(202, text="queued", headers={"content-type": "text/plain"})

    reply = await _client(settings, handler).post_form("https://upstream.test/lead", {"a": "1", "b": "x y"})

    assert reply.status_code == 202
    assert reply.text == "queued"
    assert reply.content_type == "text/plain"
    request = seen["request"]
    assert request.headers["accept"] == DEFAULT_ACCEPT
    assert request.headers["content-type"] == "application/x-www-form-urlencoded; charset=UTF-8"
    assert request.content == b"a=1&b=x+y"


@pytest.mark.asyncio
async def test_non_2xx_is_returned_not_raised(settings):
    reply = await _client(settings, lambda r: httpx.Response(401, text="bad key")).post_json(
        "https://upstream.test/x", {"a": 1}
    )
    assert reply.status_code == 401
    assert reply.text == "bad key"


@pytest.mark.asyncio
async def test_transport_error_is_redacted(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused for key 1A2B3C4D-5E6F-7A8B", request=request)

    with pytest.raises(UpstreamUnavailable) as exc:
        await _client(settings, handler).post_json("https://upstream.test/x", {})

    assert exc.value.status_code == 502
    assert "1A2B3C4D" not in exc.value.message
    assert "****" in exc.value.message


@pytest.mark.asyncio
async def test_timeout_is_upstream_unavailable(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(UpstreamUnavailable, match="timed out after 30s"):
        await _client(settings, handler).post_form("https://upstream.test/x", {})


async def _drip_reply(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Answer with headers at once, then one body byte every 0.2s."""
    await reader.readuntil(b"\r\n\r\n")
    writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 40\r\n\r\n")
    try:
        for _ in range(40):
            if writer.is_closing():
                break
            writer.write(b"x")
            await writer.drain()
            await asyncio.sleep(0.2)
    except ConnectionError:
        pass
    finally:
        writer.close()


@pytest.mark.asyncio
async def test_slow_body_is_bounded_by_total_deadline(settings):
    server = await asyncio.start_server(_drip_reply, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    client = QuotitClient(
        settings.model_copy(update={"upstream_timeout_seconds": 0.5}),
        transport=httpx.AsyncHTTPTransport(),
    )

    started = time.monotonic()
    try:
        with pytest.raises(UpstreamUnavailable, match="timed out after 0.5s") as exc:
            await client.post_form(f"http://127.0.0.1:{port}/lead", {"a": "1"})
    finally:
        server.close()
        await server.wait_closed()

    assert exc.value.status_code == 502
    assert time.monotonic() - started < 2.0
