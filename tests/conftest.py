import logging

import pytest

from application.service import TaxonomyResolutionService
from infrastructure.transport.mock import FixtureTransport, sample_fixtures


@pytest.fixture
def fixtures():
    return sample_fixtures()


@pytest.fixture
def transport(fixtures):
    return FixtureTransport(fixtures)


@pytest.fixture
def service(transport):
    return TaxonomyResolutionService(transport)


@pytest.fixture
def restore_root_logging():
    """configure_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
