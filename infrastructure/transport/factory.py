"""Factory for creating taxonomy service transports."""

import logging

from infrastructure.config.models import ServiceConfig

from .base import Transport
from .http import HttpTransport, WaitFn
from .mock import Fixture, FixtureTransport

logger = logging.getLogger(__name__)


def make_transport(
    cfg: ServiceConfig,
    *,
    use_mock: bool = False,
    mock_fixtures: dict[tuple[str, str], Fixture] | None = None,
    wait: WaitFn | None = None,
) -> Transport:
    """
    Factory function to create the appropriate transport.
    Args:
        cfg: Service configuration (URL, timeout, retry policy)
        use_mock: If True, use the FixtureTransport regardless of cfg
        mock_fixtures: Optional fixtures for the FixtureTransport (defaults to the bundled sample)
        wait: Optional replacement for the interruptible retry delay
    Returns:
        A Transport instance.
    """
    if use_mock:
        return FixtureTransport(mock_fixtures, base_url=cfg.base_url)

    logger.debug("Creating HTTP transport for %s", cfg.base_url)
    return HttpTransport.from_cfg(cfg, wait=wait)
