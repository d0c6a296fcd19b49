"""Logging configuration for the bus system server."""

import logging
import sys

from loguru import logger

# Standard library loggers whose records are forwarded to loguru
FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "asyncio", "bus_system")
SQLALCHEMY_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.engine.base", "sqlalchemy.dialects", "sqlalchemy.pool")


class InterceptHandler(logging.Handler):
    """Intercept standard logging messages toward loguru."""

    def emit(self, record):
        # Get corresponding loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _intercept(logger_names: tuple[str, ...]) -> None:
    for name in logger_names:
        logging_logger = logging.getLogger(name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False


def setup_logging(log_level: str) -> None:
    """Configure loguru logging for the entire application.

    Args:
        log_level: Log level to use (from settings, which handles env vars and CLI args).
    """
    log_level = log_level.upper()

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        level=log_level,
        colorize=True,
    )

    logger.info(f"Log level set to: {log_level}")

    # Redirect all standard logging to loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    _intercept(FORWARDED_LOGGERS)

    # One setting controls application and third-party verbosity; stdlib has no TRACE
    stdlib_level = "DEBUG" if log_level == "TRACE" else log_level
    for name in FORWARDED_LOGGERS:
        logging.getLogger(name).setLevel(stdlib_level)


def setup_sqlalchemy_logging() -> None:
    """Configure SQLAlchemy logging to use loguru."""
    _intercept(SQLALCHEMY_LOGGERS)
