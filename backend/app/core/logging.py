"""
Logging configuration.

Configures the root logger once at application startup.
"""

import logging
import sys

from backend.app.core.config import settings
from backend.app.core.observability import CorrelationIdFilter


class ContextFormatter(logging.Formatter):
    """Formatter that appends request context passed through ``extra``."""

    context_fields = ("method", "path", "status_code", "duration_ms", "ip")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            field: getattr(record, field)
            for field in self.context_fields
            if hasattr(record, field)
        }
        if context:
            message = f"{message} {context}"
        return message


def configure_logging() -> None:
    """
    Configure global logging settings.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        ContextFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"
        )
    )
    
    # Remove existing handlers to avoid duplication
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
