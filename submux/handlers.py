"""
Exception handling utilities for subscription teardowns.

Provides exception handler functions and type definitions for managing errors
raised by teardown callbacks. By the time a handler runs, the failing key has
already been removed from the registry, so the key can be attached again no
matter what the handler decides. Includes built-in handlers for common
patterns: logging and re-raising (log_and_raise_teardown_exception), logging
and continuing (log_and_continue_teardown_exception), silently continuing
(silent_teardown_exception), and collecting exceptions for batch processing
(collect_teardown_exception).
"""

import logging
import sys
from typing import Callable

from submux import subscription


logger = logging.getLogger(__name__)


TEARDOWN_EXCEPTION_HANDLER = Callable[[subscription.TEARDOWN, str, Exception], bool]
"""
Signature for teardown exception handlers.

Exception handlers receive the failing teardown, the key it belonged to and the
exception, then return True to re-raise or False to continue.
"""

RAISE = True
CONTINUE = False


def get_callable_name(callable_: Callable) -> str:
    """
    Returns the name of the callable, using class name for items with __self__,
    __qualname__ for functions and lambdas, or str(callable_) if neither are
    found.
    """
    if hasattr(callable_, "__self__") and hasattr(callable_, "__name__"):
        return f"{callable_.__self__.__class__.__name__}.{callable_.__name__}"
    elif hasattr(callable_, "__qualname__"):
        return callable_.__qualname__
    elif hasattr(callable_, "__name__"):
        return callable_.__name__
    else:
        return str(callable_)


def log_and_raise_teardown_exception(
    teardown: subscription.TEARDOWN, key: str, exception: Exception
) -> bool:
    """Handler that logs the raised exception before re-raising it."""
    logger.error(
        f"Exception in subscription teardown:\n"
        f"  Key:       {key}\n"
        f"  Teardown:  {get_callable_name(teardown)}\n"
        f"  Exception: {exception.__class__.__name__}: {exception}",
        exc_info=True,
    )
    return RAISE


def log_and_continue_teardown_exception(
    teardown: subscription.TEARDOWN, key: str, exception: Exception
) -> bool:
    """Log teardown errors but continue."""
    logger.warning(
        f"Teardown error (continuing): "
        f"{get_callable_name(teardown)} for {key}: {exception}"
    )
    return CONTINUE


def silent_teardown_exception(
    _: subscription.TEARDOWN, __: str, ___: Exception
) -> bool:
    """Silently ignore all exceptions."""
    return CONTINUE


teardown_exceptions_caught = []


def collect_teardown_exception(
    teardown: subscription.TEARDOWN, key: str, exception: Exception
) -> bool:
    """
    Collect exceptions for batch processing.
    This appends exceptions caught to submux.handlers.teardown_exceptions_caught
    which is a list.
    Either manage the list manually or use this function as an example to create
    a more robust exception collector.
    """
    teardown_exceptions_caught.append(
        {
            "teardown": get_callable_name(teardown),
            "key": key,
            "exception": f"{exception.__class__.__name__}: {exception}",
            "exc_info": sys.exc_info(),
        }
    )
    return CONTINUE
