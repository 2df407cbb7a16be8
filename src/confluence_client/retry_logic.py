"""Single-retry policy for mutating Confluence API calls.

Page creation and page updates get exactly one silent retry when the first
attempt fails. There is no backoff and no second retry: if the retry fails
too, its exception propagates to the caller unchanged.
"""

import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def retry_once(func: Callable[..., T], *args, operation: str = "request", **kwargs) -> T:
    """Call func, retrying it exactly once if the first attempt raises.

    Args:
        func: The function to execute
        *args: Positional arguments to pass to the function
        operation: Short description used in the log line
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the first successful attempt

    Raises:
        Exception: Whatever the second attempt raised

    Example:
        >>> result = retry_once(client.post, "rest/api/content", operation="create_page")
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        logger.warning(f"{operation}: first attempt failed ({e}), retrying ...")
    return func(*args, **kwargs)
