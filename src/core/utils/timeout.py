"""
Timeout utilities for async operations.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any

import structlog

logger = structlog.get_logger()


async def execute_with_timeout(
    aw: Awaitable[Any],
    timeout: float = 30.0,
    timeout_message: str | None = None,
) -> Any:
    """
    Await an awaitable with timeout handling.

    Args:
        aw: The coroutine or future to await
        timeout: Timeout in seconds
        timeout_message: Custom message for timeout exception

    Returns:
        The result of the awaitable

    Raises:
        TimeoutError: If the operation times out
    """
    try:
        return await asyncio.wait_for(aw, timeout=timeout)
    except TimeoutError as err:
        msg = timeout_message or f"Operation timed out after {timeout} seconds"
        logger.error("operation_timed_out", message=msg, timeout=timeout)
        raise TimeoutError(msg) from err
