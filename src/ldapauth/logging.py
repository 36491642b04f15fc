"""Configure logging for ldapauth.

Standard output is reserved for data printed by hooks for the calling
program, so all log messages go to standard error.
"""

from __future__ import annotations

import logging
import sys

import structlog
from safir.logging import LogLevel, Profile, add_log_severity
from structlog.types import Processor

__all__ = ["configure_logging"]


def configure_logging(
    *,
    name: str = "ldapauth",
    profile: Profile = Profile.development,
    log_level: LogLevel = LogLevel.INFO,
) -> None:
    """Configure structlog to log to standard error.

    This follows the structure of `safir.logging.configure_logging`, which
    cannot be used directly since it logs to standard output.

    Parameters
    ----------
    name
        Name of the logger to configure.
    profile
        ``development`` renders human-readable lines, ``production`` renders
        JSON with a ``severity`` key.
    log_level
        Minimum level of messages to log.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(stream_handler)
    logger.setLevel(log_level.value)
    logger.propagate = False

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if profile == Profile.production:
        processors.extend(
            [
                add_log_severity,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
