import json

import httpx
import pytest

from application.service import TaxonomyResolutionService
from domain.errors import ServiceError, ServiceUnavailable, TransportFailure
from infrastructure.config.models import ServiceConfig
from infrastructure.transport.http import HttpTransport

BASE_URL = "https://taxonomy.example.test/taxonomy-service"


class RecordingWait:
    """Stands in for the interruptible delay; never actually sleeps."""

    def __init__(self, interrupted: bool = False) -> None:
        self.delays: list[float] = []
        self.interrupted = interrupted

    def __call__(self, delay: float) -> bool:
        self.delays.append(delay)
        return self.interrupted


def _envelope(data) -> httpx.Response:
    return httpx.Response(200, json={"data": data, "returnCode": "OK"})


def _refusing(times: int, then):
    """Handler refusing `times` connections, then delegating to `then`."""
    state = {"calls": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"] += 1
        if state["calls"] <= times:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        return then(request)

    handler.state = state  # type: ignore[attr-defined]
    return handler


def _transport(handler, *, wait: RecordingWait, max_retries: int = 5, retry_delay_s: float = 10.0) -> HttpTransport:
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpTransport(
        base_url=BASE_URL,
        client=client,
        max_retries=max_retries,
        retry_delay_s=retry_delay_s,
        wait=wait,
    )


def test_get_sends_accept_header_under_base_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _envelope({"id": 12, "version": "5.1.1.2"})

    t = _transport(handler, wait=RecordingWait())
    body = t.get("/attributes/public/byID/1001", params={"taxonomyId": 12})

    assert json.loads(body)["data"]["version"] == "5.1.1.2"
    (req,) = seen
    assert req.method == "GET"
    assert req.url.path == "/taxonomy-service/attributes/public/byID/1001"
    assert req.url.params["taxonomyId"] == "12"
    assert req.headers["accept"] == "application/json"


def test_post_sends_json_body_and_content_type() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _envelope([])

    t = _transport(handler, wait=RecordingWait())
    t.post("/attributes/public/byIDs", {"attributeIdentifiers": [1001], "taxonomyId": 12})

    (req,) = seen
    assert req.method == "POST"
    assert req.headers["content-type"] == "application/json"
    assert req.headers["accept"] == "application/json"
    assert json.loads(req.content) == {"attributeIdentifiers": [1001], "taxonomyId": 12}


def test_refused_connection_is_retried_with_fixed_delay(caplog) -> None:
    handler = _refusing(3, lambda r: _envelope({"ok": True}))
    wait = RecordingWait()
    t = _transport(handler, wait=wait)

    with caplog.at_level("WARNING"):
        body = t.get("/tree/public/")

    assert json.loads(body)["data"] == {"ok": True}
    assert wait.delays == [10.0, 10.0, 10.0]
    assert handler.state["calls"] == 4
    assert caplog.text.count("Attempting again in") == 3


def test_gives_up_after_max_retries() -> None:
    handler = _refusing(100, lambda r: _envelope(None))
    wait = RecordingWait()
    t = _transport(handler, wait=wait)

    with pytest.raises(ServiceUnavailable) as excinfo:
        t.get("/version/public/")

    assert excinfo.value.attempts == 6
    assert handler.state["calls"] == 6
    assert len(wait.delays) == 5
    assert isinstance(excinfo.value, TransportFailure)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_zero_retries_fails_on_first_refusal() -> None:
    handler = _refusing(1, lambda r: _envelope(None))
    wait = RecordingWait()
    t = _transport(handler, wait=wait, max_retries=0)

    with pytest.raises(ServiceUnavailable):
        t.get("/version/public/")

    assert wait.delays == []


def test_non_200_fails_immediately_without_retry(caplog) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, text="maintenance")

    wait = RecordingWait()
    t = _transport(handler, wait=wait)

    with caplog.at_level("ERROR"), pytest.raises(ServiceError) as excinfo:
        t.get("/tree/public/")

    assert excinfo.value.status_code == 503
    assert len(calls) == 1
    assert wait.delays == []
    assert "Received status 503" in caplog.text


def test_read_timeout_is_not_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    wait = RecordingWait()
    t = _transport(handler, wait=wait)

    with pytest.raises(TransportFailure) as excinfo:
        t.get("/tree/public/")

    assert not isinstance(excinfo.value, ServiceUnavailable)
    assert len(calls) == 1
    assert wait.delays == []


def test_unreachable_host_is_retried() -> None:
    state = {"calls": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"] += 1
        if state["calls"] <= 3:
            raise httpx.ConnectTimeout("timed out while connecting", request=request)
        return _envelope({"id": 12, "version": "5.1.1.2"})

    wait = RecordingWait()
    t = _transport(handler, wait=wait)

    body = t.get("/version/public/")

    assert json.loads(body)["data"]["version"] == "5.1.1.2"
    assert state["calls"] == 4
    assert wait.delays == [10.0, 10.0, 10.0]


@pytest.mark.parametrize("exc_type", [httpx.WriteTimeout, httpx.PoolTimeout])
def test_timeouts_after_connecting_are_not_retried(exc_type) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise exc_type("timed out", request=request)

    wait = RecordingWait()
    t = _transport(handler, wait=wait)

    with pytest.raises(TransportFailure) as excinfo:
        t.get("/tree/public/")

    assert not isinstance(excinfo.value, ServiceUnavailable)
    assert len(calls) == 1
    assert wait.delays == []


def test_interrupted_wait_aborts_retrying() -> None:
    handler = _refusing(100, lambda r: _envelope(None))
    wait = RecordingWait(interrupted=True)
    t = _transport(handler, wait=wait)

    with pytest.raises(ServiceUnavailable, match="aborted"):
        t.get("/version/public/")

    assert handler.state["calls"] == 1
    assert wait.delays == [10.0]


def test_close_interrupts_default_wait() -> None:
    handler = _refusing(100, lambda r: _envelope(None))
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    t = HttpTransport(base_url=BASE_URL, client=client, max_retries=5, retry_delay_s=3600.0)
    t._closed.set()  # already closed: the first wait returns immediately

    with pytest.raises(ServiceUnavailable, match="aborted"):
        t.get("/version/public/")


def test_from_cfg_uses_configured_policy() -> None:
    cfg = ServiceConfig(base_url=BASE_URL + "/", timeout_s=5, max_retries=2, retry_delay_s=1.5)

    t = HttpTransport.from_cfg(cfg)
    try:
        assert t.base_url == BASE_URL
        assert t.max_retries == 2
        assert t.retry_delay_s == 1.5
        assert t.client.timeout.connect == 5
    finally:
        t.close()


def test_service_survives_three_refused_connections() -> None:
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/version/public/"):
            return _envelope({"id": 12, "version": "5.1.1.2"})
        return _envelope({"id": 1, "tc": 24, "type": "E", "label": "Occurrence"})

    handler = _refusing(3, respond)
    wait = RecordingWait()
    service = TaxonomyResolutionService(_transport(handler, wait=wait))

    assert service.get_taxonomy_version() == "5.1.1.2"
    assert wait.delays == [10.0, 10.0, 10.0]
