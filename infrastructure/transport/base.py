"""Base transport interface for the taxonomy service."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class Transport(ABC):
    """
    Abstract base class for taxonomy service transports.

    A transport performs one logical request and returns the raw response
    body. It knows nothing about the response envelope or taxonomy semantics.

    All concrete transports must implement:
    - send(): Issue a GET or POST and return the body text
    """

    base_url: str

    def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> str:
        return self.send("GET", path, params=params)

    def post(self, path: str, body: Any) -> str:
        return self.send("POST", path, body=body)

    @abstractmethod
    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
    ) -> str:
        """Send a request and return the response body.

        Args:
            method: "GET" or "POST"
            path: Endpoint path relative to the service root, e.g. "/tree/public/"
            params: Optional query parameters
            body: JSON-serializable request body (POST only)

        Returns:
            Response body text

        Raises:
            TransportFailure: If no response could be obtained
            ServiceError: If the service answered with a non-200 status
        """

        raise NotImplementedError

    def close(self) -> None:
        """Release resources. Default: nothing to release."""

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
