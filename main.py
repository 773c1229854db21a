"""
CLI entrypoint for ECCAIRS taxonomy lookups.

This script performs the following steps:
- loads .env (if present) and configs/taxonomy_service.yaml
- configures console (and optional rotating file) logging
- builds the taxonomy resolution service (HTTP, or fixtures with --mock)
- runs one lookup sub-command against the current taxonomy version
- prints the result as JSON (and optionally saves it to --output)
"""

import argparse
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from application import TaxonomyResolutionService, count_values, dump_result
from domain.errors import ConfigError, TaxonomyServiceError
from infrastructure.config import load_service_config
from infrastructure.constants import SERVICE_CONFIG_FILE
from infrastructure.observability import configure_logging, set_log_context

logger = logging.getLogger(__name__)

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Query the ECCAIRS taxonomy service")
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to the service config YAML (default: {SERVICE_CONFIG_FILE} if present)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded when it exists (default: .env)",
    )
    p.add_argument(
        "--mock",
        action="store_true",
        help="Answer from the bundled sample taxonomy instead of calling the real service.",
    )
    p.add_argument(
        "--output",
        type=str,
        default=None,
        help="Also write the JSON result to this file.",
    )
    p.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional rotating log file (DEBUG level).",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=LEVELS,
        help="Console log level",
    )

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("version", help="Current taxonomy version label and id")
    for name, help_text in (
        ("hierarchical", "Whether the attribute's value list has several levels"),
        ("values", "Value list of the attribute (hierarchical)"),
        ("parent-entity", "Entity owning the attribute"),
        ("attribute", "Attribute record by taxonomy code"),
        ("entity", "Entity record by taxonomy code"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("code", type=int, help="ECCAIRS taxonomy code, e.g. 431 for A-431")

    return p.parse_args(argv)


def _values(service: TaxonomyResolutionService, code: int) -> Any:
    values = service.get_value_list(code)
    logger.info("Attribute %d: %d top-level values, %d in total", code, len(values), count_values(values))
    return values


COMMANDS: dict[str, Callable[[TaxonomyResolutionService, argparse.Namespace], Any]] = {
    "version": lambda s, a: {"version": s.get_taxonomy_version(), "id": s.get_taxonomy_version_id()},
    "hierarchical": lambda s, a: {"code": a.code, "hierarchical": s.has_hierarchical_value_list(a.code)},
    "values": lambda s, a: _values(s, a.code),
    "parent-entity": lambda s, a: s.get_parent_entity(a.code),
    "attribute": lambda s, a: s.get_attribute(a.code),
    "entity": lambda s, a: s.get_entity(a.code),
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    configure_logging(
        log_file=Path(args.log_file) if args.log_file else None,
        console_level=getattr(logging, args.console_level),
    )

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        logger.debug("No environment file at %s", env_file)

    try:
        cfg = load_service_config(Path(args.config) if args.config else None)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    set_log_context(base_url=cfg.base_url)
    logger.info("Taxonomy service: %s%s", cfg.base_url, " (mock)" if args.mock else "")

    with TaxonomyResolutionService.from_cfg(cfg, use_mock=bool(args.mock)) as service:
        try:
            result = COMMANDS[args.command](service, args)
        except TaxonomyServiceError as e:
            logger.error("Command '%s' failed: %s", args.command, e)
            return 1

    print(dump_result(result, Path(args.output) if args.output else None))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
