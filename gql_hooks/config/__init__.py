"""
Configuration for gql_hooks.

Client and logging settings as pydantic models, loaded from files,
environment variables and explicit overrides.
"""

from .loader import ConfigLoader, load_config
from .models import ClientConfig, LoggingConfig, LogLevel

__all__ = [
    "ClientConfig",
    "LoggingConfig",
    "LogLevel",
    "ConfigLoader",
    "load_config",
]
