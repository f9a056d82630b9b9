"""Logger factory shared by every module of the service."""

import logging
import os
import sys

import colorlog

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

loggers: dict[str, logging.Logger] = {}


def get_logger(
    name: str,
    log_handler: str = "stdout",
    log_level: str | None = None,
    log_color: bool | None = None,
) -> logging.Logger:
    """Return the logger for ``name``, configuring it on first use.

    Level and colour fall back to the LOG_LEVEL (default INFO) and LOG_COLOR
    environment variables; only the ``stdout`` handler exists.

    Raises:
        ValueError: If invalid handler or log level is provided.
    """
    if name in loggers:
        return loggers[name]

    if log_handler != "stdout":
        err_msg = f"Invalid handler: {log_handler}"
        raise ValueError(err_msg)

    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if level not in LOG_LEVELS:
        err_msg = f"Invalid log level: {level}"
        raise ValueError(err_msg)

    if log_color is None:
        log_color = os.getenv("LOG_COLOR", "false").lower() == "true"

    if log_color:
        logger = colorlog.getLogger(name)
        handler: logging.Handler = colorlog.StreamHandler(sys.stdout)
        handler.setFormatter(
            colorlog.ColoredFormatter(f"%(log_color)s {LOG_FORMAT}", log_colors=LOG_COLORS)
        )
    else:
        logger = logging.getLogger(name)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.setLevel(level)
    handler.setLevel(level)
    logger.addHandler(handler)

    loggers[name] = logger
    return logger
