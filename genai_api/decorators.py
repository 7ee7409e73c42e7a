import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar('T')

LOGGER = logging.getLogger(__name__)


def log_request(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Log provider coroutine calls for debugging"""
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        provider = args[0].__class__.__name__ if args else "Unknown"
        LOGGER.debug("[%s] Calling %s", provider, func.__name__)

        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            LOGGER.debug("[%s] %s failed: %s", provider, func.__name__, e)
            raise
        LOGGER.debug("[%s] %s succeeded", provider, func.__name__)
        return result

    return wrapper
