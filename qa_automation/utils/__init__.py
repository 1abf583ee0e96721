"""Utility modules for qa-automation.

Provides:
- Structured logging configuration
"""

from .logging import LogContext, configure_logging, get_logger, log_operation

__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
    "log_operation",
]
