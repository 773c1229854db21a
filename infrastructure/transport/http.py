"""HTTP transport with fixed-delay retry on connection failures."""

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from domain.errors import ServiceError, ServiceUnavailable, TransportFailure
from infrastructure.config.models import ServiceConfig

from .base import JSON_MEDIA_TYPE, Transport

logger = logging.getLogger(__name__)

# Returns True when the wait was interrupted and retrying should stop
WaitFn = Callable[[float], bool]


class HttpTransport(Transport):
    """
    Taxonomy service transport backed by an `httpx.Client`.

    Retry policy:
    - Only connection-establishment failures are retried: refused connections
      (`httpx.ConnectError`) and unreachable hosts (`httpx.ConnectTimeout`)
    - Fixed delay between attempts, no backoff growth, no jitter
    - At most `max_retries` retries, then ServiceUnavailable
    - Non-200 responses fail immediately with ServiceError
    - Other transport errors (read/write/pool timeouts, protocol errors) fail immediately

    The delay is an interruptible wait: `close()` wakes any thread waiting
    between attempts and that request fails with ServiceUnavailable.
    """

    def __init__(
        self,
        *,
        base_url: str,
        client: httpx.Client,
        max_retries: int = 5,
        retry_delay_s: float = 10.0,
        wait: WaitFn | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.base_url = base_url
        self.client = client
        self.max_retries = max_retries
        self.retry_delay_s = retry_delay_s
        self._closed = threading.Event()
        self._wait: WaitFn = wait or self._closed.wait

    @classmethod
    def from_cfg(cls, cfg: ServiceConfig, *, wait: WaitFn | None = None) -> "HttpTransport":
        client = httpx.Client(
            base_url=cfg.base_url,
            timeout=cfg.timeout_s,
            headers={"Accept": JSON_MEDIA_TYPE},
        )
        return cls(
            base_url=cfg.base_url,
            client=client,
            max_retries=cfg.max_retries,
            retry_delay_s=cfg.retry_delay_s,
            wait=wait,
        )

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
    ) -> str:
        method = method.upper()
        headers = {"Accept": JSON_MEDIA_TYPE}
        request_kwargs: dict[str, Any] = {}
        if params:
            request_kwargs["params"] = dict(params)
        if method == "POST":
            headers["Content-Type"] = JSON_MEDIA_TYPE
            request_kwargs["json"] = body if body is not None else {}

        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.client.request(method, path, headers=headers, **request_kwargs)
            except (httpx.ConnectError, httpx.ConnectTimeout) as e:
                retries_done = attempt - 1
                if retries_done >= self.max_retries:
                    raise ServiceUnavailable(
                        f"Unable to connect to {self.base_url} for {method} {path} after {attempt} attempts.",
                        attempts=attempt,
                    ) from e
                logger.warning(
                    "Failed to get response for %s %s due to %s. Attempting again in %ss (retry %d/%d).",
                    method,
                    path,
                    e,
                    self.retry_delay_s,
                    retries_done + 1,
                    self.max_retries,
                )
                if self._wait(self.retry_delay_s):
                    raise ServiceUnavailable(
                        f"Retry of {method} {path} aborted: transport closed.",
                        attempts=attempt,
                    ) from e
                continue
            except httpx.TransportError as e:
                raise TransportFailure(f"Unable to get response for {method} {path}: {e}") from e

            if resp.status_code != 200:
                logger.error(
                    "Failed to get response for %s %s. Received status %d.",
                    method,
                    resp.url,
                    resp.status_code,
                )
                raise ServiceError(resp.status_code, str(resp.url))

            logger.debug("%s %s -> %d (%d bytes, attempt %d)", method, path, resp.status_code, len(resp.content), attempt)
            return resp.text

    def close(self) -> None:
        self._closed.set()
        self.client.close()
