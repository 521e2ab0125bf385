# ================================================================================
# Retry Module
# ================================================================================
#
# Bounded retry for compound UI operations.
#
# A compound click (click, settle, wait for the next element) occasionally
# times out because of a transient stall. Such operations are run through
# retry_once: one extra attempt on a retryable error, then the error surfaces.
#
# Usage:
#   element = retry_once(
#       lambda: click_then_wait("#open", "#dialog"),
#       is_retryable=lambda e: isinstance(e, WaitTimeoutError),
#       description="click #open",
#   )
#
# ================================================================================

from typing import Callable, Type, TypeVar, Union

from loguru import logger


T = TypeVar('T')

Retryable = Union[Type[BaseException], Callable[[BaseException], bool]]


def _matches(error: BaseException, is_retryable: Retryable) -> bool:
    if isinstance(is_retryable, type):
        return isinstance(error, is_retryable)
    return bool(is_retryable(error))


def retry_once(
    operation: Callable[[], T],
    is_retryable: Retryable,
    description: str = "",
) -> T:
    """
    Run operation, retrying exactly once if it raises a retryable error.

    Args:
        operation: Zero-argument callable to run
        is_retryable: Exception class, or predicate over the raised exception
        description: Human-readable operation name for logging

    Returns:
        Result of the first successful attempt

    Raises:
        The original error if it is not retryable, or the second attempt's error
    """
    name = description or getattr(operation, "__name__", "operation")
    try:
        return operation()
    except Exception as e:
        if not _matches(e, is_retryable):
            raise
        logger.info(f'Retrying {name} because of exception="{e}"')
    return operation()


__all__ = [
    "retry_once",
]
