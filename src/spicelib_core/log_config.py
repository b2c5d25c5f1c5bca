# src/spicelib_core/log_config.py
import logging
import os
import sys
from typing import Optional, Union

LOG_LEVEL_ENV_VAR = "SPICELIB_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"


def resolve_log_level(level: Optional[Union[int, str]] = None) -> int:
    """
    Picks the effective level: an explicit argument wins, then the
    SPICELIB_LOG_LEVEL environment variable, then INFO.
    Unknown level names fall back to INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, logging.INFO)
    if isinstance(level, str):
        named = logging.getLevelName(level.strip().upper())
        return named if isinstance(named, int) else logging.INFO
    return int(level)


def setup_logging(level: Optional[Union[int, str]] = None):
    """Configures a single stdout handler on the root logger."""
    effective_level = resolve_log_level(level)
    root_logger = logging.getLogger()

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.setLevel(effective_level)
    root_logger.addHandler(console_handler)
    logging.debug("Logging configured at level %s.", logging.getLevelName(effective_level))
