"""Fixture-backed transport for offline runs and tests."""

import json
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from domain.errors import ServiceError

from .base import Transport

logger = logging.getLogger(__name__)

# A fixture is either the envelope `data` payload itself or a callable
# computing it from the request body (used for POST endpoints).
Fixture = Any


def request_key(path: str, params: Mapping[str, Any] | None = None) -> str:
    """Canonical fixture key: path plus sorted query string."""
    if not params:
        return path
    return f"{path}?{urlencode(sorted((str(k), str(v)) for k, v in params.items()))}"


class FixtureTransport(Transport):
    """Transport answering from in-memory fixtures (no real network calls).

    Every request is recorded in `calls` as (method, key, body) so callers can
    assert on how many remote round trips an operation needed.
    """

    def __init__(
        self,
        fixtures: Mapping[tuple[str, str], Fixture] | None = None,
        *,
        base_url: str = "mock://taxonomy-service",
    ) -> None:
        self.base_url = base_url
        self.fixtures: dict[tuple[str, str], Fixture] = dict(fixtures if fixtures is not None else sample_fixtures())
        self.calls: list[tuple[str, str, Any]] = []
        logger.info("Initialized fixture transport (no real API calls will be made)")

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
    ) -> str:
        method = method.upper()
        key = request_key(path, params)
        self.calls.append((method, key, body))

        if (method, key) not in self.fixtures:
            logger.error("Failed to get response for %s %s. Received status %d.", method, key, 404)
            raise ServiceError(404, f"{self.base_url}{key}")

        fixture = self.fixtures[(method, key)]
        data = fixture(body) if callable(fixture) else fixture
        logger.debug("Fixture response for %s %s", method, key)
        return json.dumps({"data": data, "returnCode": "OK", "errorDetails": None})

    def count(self, method: str, path_prefix: str = "") -> int:
        """Number of recorded calls with the given method whose key starts with path_prefix."""
        method = method.upper()
        return sum(1 for m, key, _ in self.calls if m == method and key.startswith(path_prefix))


# ---------------------------------------------------------------------------
# Sample taxonomy
# ---------------------------------------------------------------------------

SAMPLE_VERSION = {"id": 12, "version": "5.1.1.2"}

SAMPLE_TREE = {
    "id": 0,
    "label": "ECCAIRS Aviation",
    "children": [
        {
            "id": 1,
            "tc": 24,
            "type": "E",
            "label": "Occurrence",
            "xsdTag": "Occurrence",
            "children": [
                {"id": 1001, "tc": 431, "type": "A", "label": "Event phase", "xsdTag": "Event_Phase"},
                {"id": 1002, "tc": 430, "type": "A", "label": "Occurrence class", "xsdTag": "Occurrence_Class"},
                {
                    "id": 3,
                    "tc": 14,
                    "type": "E",
                    "label": "Events",
                    "xsdTag": "Events",
                    "children": [
                        {"id": 1004, "tc": 390, "type": "A", "label": "Event type", "xsdTag": "Event_Type"},
                    ],
                },
                {
                    "id": 4,
                    "tc": 4,
                    "type": "E",
                    "label": "Aircraft",
                    "xsdTag": "Aircraft",
                    "children": [
                        {"id": 1003, "tc": 32, "type": "A", "label": "Aircraft category", "xsdTag": "Aircraft_Category"},
                    ],
                },
            ],
        }
    ],
}

_ATTRIBUTE_PARENTS = {
    1001: {"id": 1001, "tc": 431, "label": "Event phase", "entity": {"id": 1, "tc": 24, "label": "Occurrence", "xsdTag": "Occurrence"}},
    1002: {"id": 1002, "tc": 430, "label": "Occurrence class", "entity": {"id": 1, "tc": 24, "label": "Occurrence", "xsdTag": "Occurrence"}},
    1003: {"id": 1003, "tc": 32, "label": "Aircraft category", "entity": {"id": 4, "tc": 4, "label": "Aircraft", "xsdTag": "Aircraft"}},
    1004: {"id": 1004, "tc": 390, "label": "Event type", "entity": {"id": 3, "tc": 14, "label": "Events", "xsdTag": "Events"}},
}


def _value(internal_id: int, identifier: int, description: str, level: int, has_child: bool) -> dict[str, Any]:
    return {
        "id": internal_id,
        "identifier": identifier,
        "description": description,
        "detailed": f"{description} (detailed)",
        "explanation": "",
        "level": str(level),
        "hasChild": has_child,
    }


def _attributes_by_ids(body: Any) -> list[dict[str, Any]]:
    ids = (body or {}).get("attributeIdentifiers") or []
    return [_ATTRIBUTE_PARENTS[i] for i in ids if i in _ATTRIBUTE_PARENTS]


def sample_fixtures() -> dict[tuple[str, str], Fixture]:
    """Small but structurally realistic slice of the ECCAIRS taxonomy."""
    version_id = SAMPLE_VERSION["id"]
    return {
        ("GET", "/version/public/"): SAMPLE_VERSION,
        ("GET", "/tree/public/"): SAMPLE_TREE,
        # Attribute metadata
        ("GET", request_key("/attributes/public/byID/1001", {"taxonomyId": version_id})): {
            "id": 1001,
            "attributeValueList": {"levels": 3},
        },
        ("GET", request_key("/attributes/public/byID/1002", {"taxonomyId": version_id})): {
            "id": 1002,
            "attributeValueList": {"levels": 1},
        },
        ("GET", request_key("/attributes/public/byID/1003", {"taxonomyId": version_id})): {
            "id": 1003,
            "attributeValueList": {"levels": 2},
        },
        ("GET", request_key("/attributes/public/byID/1004", {"taxonomyId": version_id})): {"id": 1004},
        # Value lists
        ("GET", request_key("/attributes/public/showFirstLevelValues", {"attributesList": 1001})): {
            "map": {
                "1001": [
                    _value(5001, 100, "Accident", 1, False),
                    _value(5002, 200, "Serious incident", 1, False),
                    _value(5003, 300, "Occurrence with No Flight Intended", 1, True),
                ]
            }
        },
        ("GET", "/listofvalue/public/childrenLov/5003"): {
            "list": [
                _value(5101, 301, "Maintenance", 2, True),
                _value(5102, 302, "Parked", 2, False),
            ]
        },
        ("GET", "/listofvalue/public/childrenLov/5101"): {
            "list": [
                _value(5201, 3011, "Engine run-up", 3, False),
            ]
        },
        ("GET", request_key("/attributes/public/showFirstLevelValues", {"attributesList": 1002})): {
            "map": {
                "1002": [
                    _value(6001, 100, "Accident", 1, False),
                    _value(6002, 300, "Incident", 1, False),
                ]
            }
        },
        ("POST", "/attributes/public/byIDs"): _attributes_by_ids,
    }
