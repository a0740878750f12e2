"""
Shared utilities for logging and timeout handling.
"""

from src.core.utils.logging import configure_logging, log_operation
from src.core.utils.timeout import execute_with_timeout

__all__ = [
    "configure_logging",
    "log_operation",
    "execute_with_timeout",
]
