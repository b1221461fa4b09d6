"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides constants, enums and logging utilities used across
the domain, application, infrastructure and main layers.

Following Clean Architecture principles:
- Shared module contains only *cross-cutting concerns*
- It must not depend on Infrastructure or Frameworks
"""

from .consts import EnumEnvironment, EnumLogLevel, EnumOutputFormat
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumOutputFormat",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
