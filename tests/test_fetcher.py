"""Tests for the getMonitors client."""

from urllib.parse import parse_qs

import httpx
import pytest

from conftest import monitor_payload
from uptime_checker.exceptions import ApiError, TransportError
from uptime_checker.fetcher import MonitorFetcher, build_request_params
from uptime_checker.models import MonitorStatus

API_URL = "https://api.example.test/v2/getMonitors"


def make_fetcher(handler) -> MonitorFetcher:
    """Create a fetcher whose client is served by handler."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MonitorFetcher(API_URL, timeout_seconds=5.0, client=client)


def test_build_request_params():
    """Test the form parameters sent to getMonitors."""
    assert build_request_params("ur123") == {
        "api_key": "ur123",
        "logs": "1",
        "logs_limit": "10",
        "response_times": "1",
        "response_times_limit": "10",
        "custom_uptime_ratios": "30",
    }


@pytest.mark.asyncio
async def test_fetch_success():
    """Test a successful fetch and the shape of the request."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"stat": "ok", "monitors": [monitor_payload(1), monitor_payload(2, "API", status=9)]},
        )

    fetcher = make_fetcher(handler)
    monitors = await fetcher.fetch("ur123")
    await fetcher.close()

    assert [m.id for m in monitors] == [1, 2]
    assert monitors[1].status == MonitorStatus.DOWN

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == API_URL
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
    assert form == build_request_params("ur123")


@pytest.mark.asyncio
async def test_fetch_http_error():
    """Test that a non-success status maps to ApiError."""
    fetcher = make_fetcher(lambda request: httpx.Response(500, text="Internal Server Error"))

    with pytest.raises(ApiError) as exc_info:
        await fetcher.fetch("ur123")

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_fetch_api_level_failure():
    """Test that stat=fail in a 200 response maps to ApiError."""
    body = {"stat": "fail", "error": {"type": "invalid_parameter", "message": "api_key is invalid."}}
    fetcher = make_fetcher(lambda request: httpx.Response(200, json=body))

    with pytest.raises(ApiError, match="api_key is invalid"):
        await fetcher.fetch("bad-token")


@pytest.mark.asyncio
async def test_fetch_malformed_body():
    """Test that a non-JSON body maps to ApiError."""
    fetcher = make_fetcher(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(ApiError):
        await fetcher.fetch("ur123")


@pytest.mark.asyncio
async def test_fetch_connection_error():
    """Test that connection failures map to TransportError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    fetcher = make_fetcher(handler)

    with pytest.raises(TransportError):
        await fetcher.fetch("ur123")


@pytest.mark.asyncio
async def test_fetch_timeout():
    """Test that timeouts map to TransportError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = make_fetcher(handler)

    with pytest.raises(TransportError, match="timed out"):
        await fetcher.fetch("ur123")


@pytest.mark.asyncio
async def test_fetch_does_not_retry():
    """Test that a failed request is attempted exactly once."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    fetcher = make_fetcher(handler)

    with pytest.raises(ApiError):
        await fetcher.fetch("ur123")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_fetch_undecodable_body():
    """Test that a body that cannot be decoded maps to TransportError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

    fetcher = make_fetcher(handler)

    with pytest.raises(TransportError):
        await fetcher.fetch("ur123")
