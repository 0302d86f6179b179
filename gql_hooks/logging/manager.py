"""
Handler setup for the gql_hooks logger hierarchy.

Library modules only create loggers; nothing is emitted anywhere until an
application (or the CLI) calls ``setup_logging``.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from ..config.models import LoggingConfig, LogLevel
from .filters import ComponentFilter, SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter

PACKAGE_LOGGER = "gql_hooks"


def _level(level: LogLevel) -> int:
    return logging.getLevelName(level.value)


class LoggingManager:
    """
    Owns the handlers attached to one logger, ``gql_hooks`` by default.

    Component levels may name a full logger (``gql_hooks.client.fetch``) or a
    component below the managed logger (``client``, ``hooks.source``).
    """

    def __init__(self, logger_name: str = PACKAGE_LOGGER) -> None:
        self.logger_name = logger_name
        self._handlers: Dict[str, logging.Handler] = {}
        self._components: Dict[str, int] = {}
        self._configured = False

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(self.logger_name)

    def component_name(self, component: str) -> str:
        """Resolve a short component name to its logger name."""
        if component == self.logger_name or component.startswith(f"{self.logger_name}."):
            return component
        return f"{self.logger_name}.{component}"

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Replace any previous setup with one built from ``config``.

        Args:
            config: Logging configuration
        """
        self.cleanup()
        level = _level(config.level)
        self.logger.setLevel(level)

        if config.enable_console:
            console_formatter: logging.Formatter = (
                StructuredFormatter() if config.enable_structured else ColoredFormatter(config.format)
            )
            self._install("console", logging.StreamHandler(sys.stderr), console_formatter, level)

        if config.enable_file and config.file_path:
            log_path = Path(config.file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_formatter = (
                StructuredFormatter() if config.enable_structured else logging.Formatter(config.format)
            )
            self._install("file", file_handler, file_formatter, level)

        for component, component_level in config.component_levels.items():
            self.set_level(component_level, component)

        self._configured = True
        self.logger.debug(f"Logging configured: level={config.level.value}, handlers={sorted(self._handlers)}")

    def _install(
        self, name: str, handler: logging.Handler, formatter: logging.Formatter, level: int
    ) -> None:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        # Operation logs can carry headers and variables.
        handler.addFilter(SensitiveDataFilter())
        self.add_handler(name, handler)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def set_level(self, level: LogLevel, component: Optional[str] = None) -> None:
        """
        Change a level after setup.

        Without ``component`` the managed logger and all of its handlers
        change; otherwise only the component's logger does.
        """
        if component:
            name = self.component_name(component)
            logging.getLogger(name).setLevel(_level(level))
            self._components[name] = _level(level)
            return

        self.logger.setLevel(_level(level))
        for handler in self._handlers.values():
            handler.setLevel(_level(level))

    def restrict_to(self, component: str) -> None:
        """Only let records from ``component`` reach the installed handlers."""
        component_filter = ComponentFilter(self.component_name(component))
        for handler in self._handlers.values():
            handler.addFilter(component_filter)

    def add_handler(self, name: str, handler: logging.Handler) -> None:
        self.remove_handler(name)
        self.logger.addHandler(handler)
        self._handlers[name] = handler

    def remove_handler(self, name: str) -> None:
        handler = self._handlers.pop(name, None)
        if handler is None:
            return
        self.logger.removeHandler(handler)
        handler.close()

    def cleanup(self) -> None:
        """Detach and close every installed handler and reset component levels."""
        for name in list(self._handlers):
            self.remove_handler(name)
        for name in self._components:
            logging.getLogger(name).setLevel(logging.NOTSET)
        self._components.clear()
        self._configured = False

    def is_configured(self) -> bool:
        return self._configured


_manager = LoggingManager()


def setup_logging(config: LoggingConfig) -> LoggingManager:
    """Configure the package logger and return its manager."""
    _manager.setup_logging(config)
    return _manager


def get_logger(name: str) -> logging.Logger:
    return _manager.get_logger(name)


def cleanup_logging() -> None:
    _manager.cleanup()
