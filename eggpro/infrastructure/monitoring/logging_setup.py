import logging
import sys
import time
import uuid
from datetime import datetime
from typing import Dict, Any

from fastapi import Request
from pythonjsonlogger import jsonlogger
from starlette.middleware.base import BaseHTTPMiddleware

from eggpro.core.config import settings

SERVICE_NAME = "eggpro-backend"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.fromtimestamp(record.created).isoformat()
        log_record['level'] = record.levelname
        log_record['service'] = SERVICE_NAME
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID and structured logging with performance tracking."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        logger = get_logger(__name__)
        logger.info("Incoming request", extra={
            'request_id': request_id,
            'method': request.method,
            'path': request.url.path,
            'user_agent': request.headers.get('user-agent'),
            'remote_addr': request.client.host if request.client else None,
        })

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        logger.info("Outgoing response", extra={
            'request_id': request_id,
            'status_code': response.status_code,
            'duration_ms': round(duration * 1000, 2),
            'endpoint': request.url.path,
        })
        log_performance(
            logger,
            operation=f"{request.method} {request.url.path}",
            duration=duration,
            resource="api_endpoint",
            extra_data={'status_code': response.status_code},
        )

        response.headers["X-Request-ID"] = request_id
        return response


def setup_logging():
    """Setup structured logging configuration."""
    logger = logging.getLogger()
    logger.handlers.clear()
    logger.setLevel(logging.INFO if not settings.DEBUG else logging.DEBUG)

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        '%(timestamp)s %(level)s %(service)s %(module)s %(function)s %(line)d %(message)s'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    logger = logging.getLogger(name)

    # Ensure the root logger has the proper configuration
    if not logging.getLogger().handlers:
        setup_logging()

    return logger


def log_performance(
    logger: logging.Logger,
    operation: str,
    duration: float,
    resource: str = None,
    extra_data: Dict[str, Any] = None
):
    """Log performance metrics."""
    log_data = {
        'event': 'performance',
        'operation': operation,
        'duration_ms': round(duration * 1000, 2),
        'resource': resource,
    }

    if extra_data:
        log_data.update(extra_data)

    logger.info("Performance metric", extra=log_data)
