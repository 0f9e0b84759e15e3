"""
Centralized application-specific logging using Loguru.

This module provides a function-based logging mechanism (`LOG`) that dynamically
respects the `beQuiet` flag from application settings.

Usage:
- Use `LOG` for token store and replacer debug logging.
- The `beQuiet` flag controls whether logs are displayed.

Example:
    from nbtoken.lib.log import LOG
    LOG("Token store reset to defaults")

Environment:
- Set `NBT_BEQUIET=True` to suppress detailed logging output.
"""

from loguru import logger
from typing import Any
import sys

# Distinct logger instance for nbtoken
app_logger = logger.bind(app="NBTOKEN")

logger_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<yellow>{name: >28}</yellow>::"
    "<cyan>{function: <24}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

app_logger.remove()
app_logger.add(sys.stderr, format=logger_format)


def LOG(*args: Any, **kwargs: Any) -> None:
    """
    Application-specific logging function.

    Logs the message at debug level unless `beQuiet` is set in `appsettings`.

    :param args: Positional arguments for the log message.
    :param kwargs: Keyword arguments for additional log metadata.
    """
    try:
        from nbtoken.config.settings import appsettings

        if not appsettings.beQuiet:
            app_logger.debug(*args, **kwargs)
    except Exception as e:
        print(f"Logging error: {e}")
