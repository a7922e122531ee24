"""
Decorators and adapters for API calls.

Provides call logging and the callback adapter used by the client.
"""

import asyncio
import functools
import time
from typing import Any, Awaitable, Callable, Coroutine, Optional

from buzzex.core.exceptions import BuzzexError
from buzzex.core.logger import get_logger

logger = get_logger(__name__)

Callback = Callable[[Optional[BaseException], Any], Any]


def log_api_call(func: Callable) -> Callable:
    """
    API call logging decorator.

    Logs the endpoint name and duration of an API call. Params are not
    logged since they may carry the one-time password. BuzzexErrors are
    logged by the layer raising them, so they only get a DEBUG line here.

    Example:
        @log_api_call
        async def _private_request(self, method, params):
            ...
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Any:
        start_time = time.time()

        # args[0] is self, args[1] the endpoint name
        endpoint = args[1] if len(args) > 1 else kwargs.get("method")

        try:
            result = await func(*args, **kwargs)
            duration = time.time() - start_time

            logger.debug(
                f"API call: {func.__name__}({endpoint}) completed in {duration:.2f}s"
            )

            return result

        except BuzzexError as e:
            # Already logged where it was raised
            duration = time.time() - start_time
            logger.debug(
                f"API call: {func.__name__}({endpoint}) "
                f"failed after {duration:.2f}s: {e.__class__.__name__}"
            )
            raise

        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"API call: {func.__name__}({endpoint}) "
                f"failed after {duration:.2f}s: {str(e)}"
            )
            raise

    return wrapper


def with_callback(
    coro: Coroutine[Any, Any, Any],
    callback: Optional[Callback] = None,
) -> Awaitable[Any]:
    """
    Attach a Node-style ``callback(error, result)`` to an API call.

    Without a callback the coroutine is returned untouched. With one, the
    coroutine is scheduled as a task on the running loop and the callback
    fires when it settles; the task is returned so it can still be awaited.

    Raises:
        RuntimeError: A callback was given but no event loop is running
    """
    if callback is None:
        return coro

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        coro.close()
        raise

    task = loop.create_task(coro)

    def _settle(done: "asyncio.Task") -> None:
        if done.cancelled():
            callback(asyncio.CancelledError(), None)
            return
        error = done.exception()
        if error is not None:
            callback(error, None)
        else:
            callback(None, done.result())

    task.add_done_callback(_settle)
    return task
