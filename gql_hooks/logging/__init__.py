"""
Logging support for gql_hooks.

Modules log through ``logging.getLogger(__name__)``; ``setup_logging`` attaches
console and rotating file handlers to the package logger.
"""

from .filters import ComponentFilter, SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter
from .manager import LoggingManager, cleanup_logging, get_logger, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "get_logger",
    "cleanup_logging",
    "StructuredFormatter",
    "ColoredFormatter",
    "SensitiveDataFilter",
    "ComponentFilter",
]
