"""
Taxonomy service transports.

Implements the adapter pattern for the request channel:
- HTTP (httpx, fixed-delay retry on refused connections)
- Fixture (in-memory, for offline runs and tests)

All transports implement the Transport interface; responses are unwrapped
with decode_envelope().
"""

from infrastructure.transport.base import Transport
from infrastructure.transport.envelope import TaxonomyServiceResponse, decode_envelope, select
from infrastructure.transport.factory import make_transport
from infrastructure.transport.http import HttpTransport
from infrastructure.transport.mock import FixtureTransport, request_key, sample_fixtures

__all__ = [
    # Abstract base
    "Transport",
    # Concrete implementations
    "HttpTransport",
    "FixtureTransport",
    # Factory (most commonly used)
    "make_transport",
    # Envelope
    "TaxonomyServiceResponse",
    "decode_envelope",
    "select",
    # Fixtures
    "request_key",
    "sample_fixtures",
]
