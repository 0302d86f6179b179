"""
Logging filters for gql_hooks.

Operation logs may include request headers and variables; the sensitive data
filter masks credentials before records reach a handler.
"""

import logging
import re
from typing import List, Optional, Pattern, Set, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # Bearer tokens
            (re.compile(r"(bearer\s+)([a-zA-Z0-9._~+/=-]{8,})", re.IGNORECASE), r"\1***MASKED***"),
            # Authorization headers in dict reprs and header lines
            (
                re.compile(r"""(['"]?authorization['"]?\s*[:=]\s*['"]?)(?!bearer\s)([^'",\s}]+)""", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            # API keys, tokens and secrets
            (
                re.compile(r"""((?:api[_-]?key|token|secret)['"]?\s*[:=]\s*['"]?)([a-zA-Z0-9._~+/=-]{8,})""", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            # Passwords
            (
                re.compile(r"""((?:password|passwd|pwd)['"]?\s*[:=]\s*['"]?)([^\s'",}]+)""", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            # URLs with credentials
            (re.compile(r"(https?://[^:/\s]+):([^@/\s]+)@", re.IGNORECASE), r"\1:***MASKED***@"),
        ]

    def mask(self, message: str) -> str:
        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data; the record is always let through."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True

        record.msg = self.mask(message)
        record.args = ()
        return True


class ComponentFilter(logging.Filter):
    """Filter for component-specific logging."""

    def __init__(self, component: str, allowed_levels: Optional[Set[str]] = None) -> None:
        """
        Initialize component filter.

        Args:
            component: Logger name prefix to let through
            allowed_levels: Set of allowed log levels
        """
        super().__init__()
        self.component = component
        self.allowed_levels = allowed_levels or {
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        }

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(self.component):
            return False
        return record.levelname in self.allowed_levels
