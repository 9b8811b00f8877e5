"""Structured logging for the storefront API.

Every record, from our modules, uvicorn or a library, goes through the same
structlog processor chain and is rendered once, on stdout:

- ``LOG_FORMAT=json``: one JSON object per line (production)
- ``LOG_FORMAT=console``: key-value console output (local development)

Each event carries the service name, the deployment environment and, inside a
request, the ``request_id`` set by ``CorrelationIdMiddleware``.

Usage:
    from app.core.logging_config import setup_logging
    setup_logging()  # once, before the app is created

    logger = structlog.get_logger(__name__)
    logger.info("product_created", product_id=product_id)
"""

import importlib.util
import logging
import sys
from typing import Any

import structlog
from asgi_correlation_id import correlation_id

from app.main_config import LoggingConfig, logging_config, settings

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def get_request_id(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    """Add request_id from asgi-correlation-id contextvar to log events."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_context(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("env", settings.env.value)
    return event_dict


def _renderer(config: LoggingConfig) -> Any:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    # rich is a dev extra
    return structlog.dev.ConsoleRenderer(colors=importlib.util.find_spec("rich") is not None)


def _library_levels(config: LoggingConfig) -> dict[str, str]:
    level = config.log_level.upper()
    return {
        "sqlalchemy.engine": config.log_level_sqlalchemy.upper(),
        "httpx": config.log_level_httpx.upper(),
        "httpcore": config.log_level_httpx.upper(),
        "uvicorn": level,
        "uvicorn.error": level,
        "uvicorn.access": config.log_level_uvicorn_access.upper(),
    }


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure structlog and stdlib logging for the whole process.

    Args:
        config: Logging settings; defaults to the ``LOG_*`` environment
    """
    config = config or logging_config
    log_level = config.log_level.upper()

    shared_processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        get_request_id,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if config.log_format == "json":
        # Console renderer prints tracebacks itself
        shared_processors.append(structlog.processors.format_exc_info)

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
            processor=_renderer(config),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(log_level)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers[:] = [handler]
        uvicorn_logger.propagate = False

    for name, level in _library_levels(config).items():
        logging.getLogger(name).setLevel(level)

    structlog.get_logger(__name__).info(
        "logging_configured", log_format=config.log_format, log_level=log_level
    )
