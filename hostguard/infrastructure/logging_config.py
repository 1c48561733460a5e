"""
Centralized logging configuration for hostguard entry points.
Installs a single stdout handler and keeps repeated sampler warnings quiet.
"""

import logging
import os
import sys


def setup_logging(log_level: str | None = None) -> None:
    """
    Configure logging for a hostguard process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to HOSTGUARD_LOG_LEVEL or INFO
    """
    if log_level is None:
        log_level = os.getenv("HOSTGUARD_LOG_LEVEL", "INFO")
    log_level = log_level.upper()

    # Clear any existing handlers
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    # Create single stream handler
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(name)s] %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )

    root.setLevel(log_level)
    root.addHandler(handler)

    sampler_logger = logging.getLogger("hostguard.infrastructure.psutil_sampler")
    for existing in sampler_logger.filters[:]:
        if isinstance(existing, RepeatedMessageFilter):
            sampler_logger.removeFilter(existing)

    if log_level == "DEBUG":
        sampler_logger.setLevel(logging.NOTSET)
    else:
        # The sampler warns on every failed counter read; once per problem is enough
        sampler_logger.setLevel(logging.WARNING)
        sampler_logger.addFilter(RepeatedMessageFilter())


class RepeatedMessageFilter(logging.Filter):
    """Drop a record whose message is identical to the previous one."""

    def __init__(self) -> None:
        super().__init__()
        self._last_message: str | None = None

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if message == self._last_message:
            return False
        self._last_message = message
        return True
