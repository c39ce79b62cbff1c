"""
Logger configuration for streambench.

This module provides a flexible logging configuration using the loguru library.
It supports console and file logging with options to configure via environment
variables or direct function calls. The configuration is applied once on import
from the application settings.

Environment Variables:
    - STREAMBENCH__LOGGING__DISABLED: Disable logging (default: false).
    - STREAMBENCH__LOGGING__CLEAR_LOGGERS: Clear existing loggers
      from loguru (default: true).
    - STREAMBENCH__LOGGING__CONSOLE_LOG_LEVEL: Log level for console logging
      (default: WARNING, options: DEBUG, INFO, WARNING, ERROR, CRITICAL).
    - STREAMBENCH__LOGGING__LOG_FILE: Path to the log file for file logging
      (default: streambench.log if log file level is set).
    - STREAMBENCH__LOGGING__LOG_FILE_LEVEL: Log level for file logging
      (default: INFO if log file is set).

Usage:
::
    from streambench import logger, configure_logger, LoggingSettings

    # Configure metrics with default settings
    configure_logger(
        config=LoggingSettings(
            disabled=False,
            clear_loggers=True,
            console_log_level="DEBUG",
            log_file=None,
            log_file_level=None,
        )
    )

    logger.debug("This is a debug message")
    logger.info("This is an info message")
"""

from __future__ import annotations

import sys

from loguru import logger

from streambench.settings import LoggingSettings, settings

__all__ = ["configure_logger", "logger"]


def configure_logger(config: LoggingSettings = settings.logging):
    """
    Configure the logger for streambench.
    This function sets up the console and file logging
    as per the specified or default parameters.

    Note: Environment variables take precedence over the function parameters.

    :param config: The configuration for the logger to use.
    :type config: LoggingSettings
    """

    if config.disabled:
        logger.disable("streambench")
        return

    logger.enable("streambench")

    if config.clear_loggers:
        logger.remove()

    # log as a human readable string with the time, function, level, and message
    if config.console_log_level:
        logger.add(
            sys.stderr,
            level=config.console_log_level.upper(),
            format="{time} | {function} | {level} - {message}",
        )

    if config.log_file or config.log_file_level:
        log_file = config.log_file or "streambench.log"
        log_file_level = config.log_file_level or "INFO"
        # log as json to the file for easier parsing
        logger.add(log_file, level=log_file_level.upper(), serialize=True)


configure_logger(config=settings.logging)
