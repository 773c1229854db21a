"""
Error taxonomy for taxonomy-service lookups.

- TransportFailure: the request never produced an HTTP response
- ServiceUnavailable: connection refused/unreachable after all retries
- ServiceError: the service answered with a non-200 status
- MalformedResponse: envelope or expected field missing from a response
- NotFound: code does not exist in the loaded tree for the requested kind
- AmbiguousCode: more than one tree node matches a code + kind pair
- ConfigError: client configuration is missing or invalid
"""

from typing import Any


class TaxonomyServiceError(Exception):
    """Base class for every failure raised by the taxonomy client."""


class TransportFailure(TaxonomyServiceError):
    """Network-level failure while talking to the taxonomy service."""


class ServiceUnavailable(TransportFailure):
    """Connection could not be established within the retry budget."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class ServiceError(TaxonomyServiceError):
    """Taxonomy service returned a non-success HTTP status."""

    def __init__(self, status_code: int, url: str = "") -> None:
        super().__init__(f"Unable to retrieve response from {url or 'taxonomy service'}. Got status {status_code}")
        self.status_code = status_code
        self.url = url


class MalformedResponse(TaxonomyServiceError):
    """Response body does not have the expected shape."""


class NotFound(TaxonomyServiceError, LookupError):
    """Taxonomy code is not present in the currently loaded tree."""

    def __init__(self, code: int, kind: Any) -> None:
        kind_name = getattr(kind, "name", str(kind)).lower()
        super().__init__(f"{kind_name.capitalize()} with taxonomy code '{code}' not found in the taxonomy tree")
        self.code = code
        self.kind = kind


class AmbiguousCode(TaxonomyServiceError):
    """Taxonomy tree holds several nodes for one code + kind pair."""

    def __init__(self, code: int, kind: Any, matches: list[int]) -> None:
        kind_name = getattr(kind, "name", str(kind)).lower()
        super().__init__(
            f"Taxonomy code '{code}' ({kind_name}) matches {len(matches)} tree nodes {matches}; expected exactly one"
        )
        self.code = code
        self.kind = kind
        self.matches = matches


class ConfigError(ValueError):
    """Configuration loading/validation error."""
