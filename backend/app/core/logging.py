"""Application-wide logging configuration."""

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_format: str | None = None) -> None:
    """Configure the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        log_format: Custom format string; defaults to ``DEFAULT_FORMAT``.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Engine echo is controlled by DEBUG, keep the library logger quiet otherwise
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
