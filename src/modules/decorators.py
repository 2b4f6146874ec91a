import inspect
import logging
import time
from functools import wraps

logger = logging.getLogger(__name__)


def _format_execution_time(label, execution_time, is_error=False, error=None):
    """Format execution time with appropriate units and precision."""
    if execution_time < 1.0:
        time_str = f"{execution_time * 1000:.2f}ms"
    else:
        time_str = f"{execution_time:.2f} seconds"

    if is_error:
        return f"{label} failed after {time_str} with error: {str(error)}"
    return f"{label} completed in {time_str}"


def perf_time(func=None, *, log_function=None, label=None):
    """Log how long an async function takes, including failed calls."""

    def decorator(func):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"perf_time expects a coroutine function, got {func!r}")

        name = label or func.__qualname__
        log = log_function or logger.debug

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                execution_time = time.perf_counter() - start_time
                log(_format_execution_time(name, execution_time, True, e))
                raise
            execution_time = time.perf_counter() - start_time
            log(_format_execution_time(name, execution_time))
            return result

        return async_wrapper

    # If used without parentheses
    if func is not None:
        return decorator(func)

    return decorator
