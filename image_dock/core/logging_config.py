"""Structured logging for the image service.

Every log line carries the request id set by ``CorrelationIdMiddleware``, so
one upload can be followed from form parsing through the S3 write to the
catalog insert. ``LOG_FORMAT=json`` renders one JSON object per line;
anything else renders key-value console output.

Usage:
    from image_dock.core.logging_config import setup_logging
    setup_logging()  # once, before the app is built
"""

import importlib.util
import logging
import sys
from typing import Any

import structlog
from asgi_correlation_id import correlation_id

from image_dock.main_config import LoggingConfig, logging_config

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
AWS_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def get_request_id(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    """Add request_id from asgi-correlation-id contextvar to log events."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    # rich is a dev extra; plain output without it
    return structlog.dev.ConsoleRenderer(colors=importlib.util.find_spec("rich") is not None)


def _library_levels(config: LoggingConfig) -> dict[str, str]:
    """Per-logger levels for the libraries that talk to Postgres, S3 and clients."""
    levels = {
        "sqlalchemy.engine": config.level_sqlalchemy,
        "uvicorn": config.level,
        "uvicorn.error": config.level,
        "uvicorn.access": config.level_uvicorn_access,
    }
    levels.update(dict.fromkeys(AWS_LOGGERS, config.level_botocore))
    return {name: level.upper() for name, level in levels.items()}


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Args:
        config: Logging settings; defaults to the process-wide ``LOG_*`` config
    """
    config = config or logging_config
    log_level = config.level.upper()

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        get_request_id,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(config.format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # uvicorn installs its own handlers unless log_config=None; replace them
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.propagate = False

    for name, level in _library_levels(config).items():
        logging.getLogger(name).setLevel(level)

    structlog.get_logger(__name__).info("logging_configured", log_format=config.format, log_level=log_level)
