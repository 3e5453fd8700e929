"""Process-wide logging setup driven by LoggingConfig."""

import logging

from batchembed.core.config import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    """Install a stderr handler on the root logger using the configured level and format."""
    level = getattr(logging, config.level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.level}")

    logging.basicConfig(level=level, format=config.format, force=True)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
