"""Decorators for the Item Search MCP server."""

import functools
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from .logging import logger, request_id_ctx

P = ParamSpec("P")
R = TypeVar("R")


def track_request(
    tool_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator to track tool and route calls with a request id and timing.

    The request id is stored in a ContextVar so every log line emitted while
    the call is running carries it. An id already set by an outer caller is
    kept.

    Args:
        tool_name: Name of the operation being tracked

    Returns:
        Decorated function with request tracking
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            token = None
            if request_id_ctx.get() is None:
                token = request_id_ctx.set(uuid.uuid4().hex[:8])
            start_time = time.perf_counter()

            logger.info("Starting %s request", tool_name)
            logger.debug("Arguments: %s", kwargs)

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                logger.error("Failed %s after %.2fs: %s", tool_name, duration, e)
                raise
            else:
                duration = time.perf_counter() - start_time
                logger.info("Completed %s in %.2fs", tool_name, duration)
            finally:
                if token is not None:
                    request_id_ctx.reset(token)

            return result

        return wrapper

    return decorator
