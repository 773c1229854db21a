"""
Logging setup with contextvars-based metadata injection.

- Adds the taxonomy version and the current operation into every log line (via contextvars).
- Supports console-only logging OR console + rotating file logs.
- Tunes noisy third-party library loggers (httpx, httpcore).
"""

import contextvars
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Context variables for dynamic log metadata
cv_version = contextvars.ContextVar("taxonomy_version", default="-")
cv_operation = contextvars.ContextVar("operation", default="-")

# Optional: kept in context for metadata (not printed every line)
cv_base_url = contextvars.ContextVar("base_url", default="-")


class ContextInjectFilter(logging.Filter):
    """Inject context variables into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.version = cv_version.get() or "-"
        record.op = cv_operation.get() or "-"
        return True


def set_log_context(
    *,
    version: str | None = None,
    operation: str | None = None,
    base_url: str | None = None,
) -> None:
    """Update logging context (thread-safe via contextvars)."""
    if version is not None:
        cv_version.set(str(version))
    if operation is not None:
        cv_operation.set(str(operation))
    if base_url is not None:
        cv_base_url.set(str(base_url))


def get_log_context() -> dict[str, str]:
    """Return the current context in a convenient dict form."""
    return {
        "version": str(cv_version.get() or "-"),
        "operation": str(cv_operation.get() or "-"),
        "base_url": str(cv_base_url.get() or "-"),
    }


def clear_operation_context() -> None:
    """Reset operation context to default (keep version info)."""
    cv_operation.set("-")


def clear_version_context() -> None:
    cv_version.set("-")


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application logging with contextvars support.

    Args:
        log_file: Path to log file (console only when None)
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
    """
    # Clear existing handlers to avoid duplicate logs if called multiple times
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # keep root permissive; handlers enforce levels

    # Formatter includes context fields injected by ContextInjectFilter
    console_fmt = "%(asctime)s [%(levelname)s] v=%(version)s op=%(op)s | %(message)s"
    file_fmt = "%(asctime)s [%(levelname)s] %(name)s | v=%(version)s op=%(op)s | %(message)s"

    console_formatter = logging.Formatter(console_fmt, datefmt="%H:%M:%S")
    file_formatter = logging.Formatter(file_fmt, datefmt="%Y-%m-%d %H:%M:%S")

    ctx_filter = ContextInjectFilter()

    # Console handler (stderr, so JSON results on stdout stay clean)
    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(console_formatter)
    ch.addFilter(ctx_filter)
    root.addHandler(ch)

    # File handler (detailed, DEBUG+, with rotation)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        fh.setLevel(file_level)
        fh.setFormatter(file_formatter)
        fh.addFilter(ctx_filter)
        root.addHandler(fh)

    # Reduce noise from HTTP libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        str(log_file) if log_file is not None else "None",
    )
