"""
Structured logging configuration for schemasupport

Usage:
    import logging

    from schemasupport.utils.logging import setup_logging

    setup_logging(level="INFO", json_format=True)
    logger = logging.getLogger(__name__)
    logger.info("Applying change file", extra={"path": "sql/0000000001_init.sql"})
"""

from .config import setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
