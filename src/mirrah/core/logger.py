import logging
import sys
from typing import Optional

LOGGER_NAMESPACE = "mirrah"


class _MirrahHandlerMarker(logging.Filter):
    """Marks the handler installed by :func:`configure_logging` so it is only added once."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``mirrah`` logger and return it.

    Only the mirrah namespace gets a handler; the root logger and other
    libraries are left alone.

    Args:
        level: Log level for mirrah logs (DEBUG, INFO, WARNING, ERROR).
               ``None`` keeps the current level (INFO on first configuration).

    Safe to call multiple times; it will not duplicate handlers (idempotent).
    """
    package_logger = logging.getLogger(LOGGER_NAMESPACE)

    for h in package_logger.handlers:
        if any(isinstance(f, _MirrahHandlerMarker) for f in h.filters):
            # Already configured; just update the level
            if level is not None:
                package_logger.setLevel(_level(level))
            return package_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_MirrahHandlerMarker())
    package_logger.addHandler(handler)
    package_logger.setLevel(_level(level or "INFO"))
    return package_logger


def get_logger(name: str = LOGGER_NAMESPACE, level: Optional[str] = None) -> logging.Logger:
    """
    Get a module-specific logger under the configured ``mirrah`` namespace.
    """
    configure_logging(level)
    # Child loggers inherit the namespace level; rely on its handler
    return logging.getLogger(name)
