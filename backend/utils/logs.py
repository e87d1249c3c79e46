import functools
import logging
import time
import warnings

logger = logging.getLogger("mingle.performance")


def humanize_milliseconds(elapsed):
    """Write a millisecond amount in a human-readable way.
    >>> humanize_milliseconds(0)
    '0 ms.'
    >>> humanize_milliseconds(11)
    '11 ms.'
    >>> humanize_milliseconds(30*1000)
    '30"'
    >>> humanize_milliseconds(30*1000+10)
    '30.0"'
    """
    elapsed = int(elapsed)
    if elapsed <= 5000:  # up to 5" we show milliseconds
        return f"{elapsed:,} ms."
    elapsed /= 1000.0
    if elapsed == int(elapsed):
        return f'{int(elapsed)}"'
    return f'{elapsed:.1f}"'


def time_it(func):
    """Decorator to log the execution time of async functions"""

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(
                f"{func.__name__} completed in {humanize_milliseconds(elapsed_ms)}"
            )

    return async_wrapper


def setup_logs():
    warnings.simplefilter("default")
    logging.getLogger("mingle").setLevel(logging.DEBUG)
    logging.basicConfig()
