"""
Required for static type checkers to accept these names as members of the
submux module.

This module gets imported into the submux module so stubs are accessible
through the submux namespace.

The doc strings for each function exists in the stubs for intellisense
fetching, instead of within the module class itself because the module class
is a module replacement at runtime, so the namespaces during inspection are
different.
"""

import os
from typing import Any
from typing import Optional
from typing import Union

from submux import binding
from submux import handlers
from submux import keys
from submux import subscription


# -----General Stubs-----------------------------------------------------------


def get_default_registry() -> Any:
    """
    Get the process-wide registry the module level functions operate on.
    Prefer creating a submux.Registry() of your own when isolation matters.
    """


# noinspection PyUnusedLocal
def set_strict(strict: bool) -> None:
    """
    Choose how unbalanced detaches are treated by the default registry.

    Args:
        strict (bool): If True, detach() of a key with no observers raises
            UnbalancedDetachError. If False (default) it is logged and ignored.
    """


# noinspection PyUnusedLocal
def set_teardown_exception_handler(
    handler: Optional[handlers.TEARDOWN_EXCEPTION_HANDLER],
) -> None:
    """
    Set the exception handler for teardown errors in the default registry.

    Args:
        Optional[handlers.TEARDOWN_EXCEPTION_HANDLER]:
            Callable with signature (TEARDOWN, str, Exception) -> bool.
            Returns True to re-raise, False to continue.
            Pass None to re-raise without logging.
    """


# -----Lifecycle Stubs---------------------------------------------------------


# noinspection PyUnusedLocal
def attach(key: str, subscribe_fn: subscription.SUBSCRIBE_FN) -> None:
    """
    Count one observer in for a key, subscribing if the key is cold.

    Args:
        key (str): The hashed subscription key.
        subscribe_fn (SUBSCRIBE_FN): Starts the subscription and returns its
            teardown. Only called when no subscription is live for the key.
    Raises:
        InvalidTeardownError: If subscribe_fn returns a non-callable.
        Exception: Anything raised by subscribe_fn. The observer increment is
            rolled back first.
    """


# noinspection PyUnusedLocal
def detach(key: str) -> None:
    """
    Count one observer out for a key, tearing down on the last one.

    Args:
        key (str): The hashed subscription key.
    Raises:
        UnbalancedDetachError: In strict mode, if the key has no observers.
    """


def clear_all() -> None:
    """
    Tear down every live subscription and forget every observer, e.g. on
    sign-out. Bypasses ref-counting.
    """


# noinspection PyUnusedLocal
def bind(
    key: Any,
    subscribe_fn: subscription.SUBSCRIBE_FN,
    enabled: bool = True,
    hasher: keys.HASHER = keys.stable_hash,
) -> binding.Binding:
    """
    Create a consumer binding on the default registry and establish it.

    Args:
        key (Any): The structured subscription key.
        subscribe_fn (SUBSCRIBE_FN): Starts the subscription if the key is cold.
        enabled (bool): Whether the consumer is interested right away.
        hasher (HASHER): Turns the structured key into a registry key.
    Returns:
        Binding: The established binding.
    Example:
        >>> import submux
        ...
        >>> def subscribe_to_user():
        ...     listener = start_listener("users/123")
        ...     return listener.stop
        ...
        >>> with submux.bind(["users", "123"], subscribe_to_user):
        ...     ...
    """


# -----Introspection Stubs-----------------------------------------------------


def get_keys() -> list[str]:
    """Get all keys with at least one observer."""


# noinspection PyUnusedLocal
def key_exists(key: str) -> bool:
    """Check if a key currently has observers."""


# noinspection PyUnusedLocal
def is_active(key: str) -> bool:
    """Check if a subscription is live for a key."""


# noinspection PyUnusedLocal
def get_observer_count(key: str) -> int:
    """
    Get the number of observers attached to a key.

    Args:
        key (str): The hashed subscription key.
    Returns:
        int: Number of observers, 0 for keys nobody is attached to.
    """


# noinspection PyUnusedLocal
def get_subscription(key: str) -> Optional[subscription.Subscription]:
    """Get the live subscription for a key, or None."""


# noinspection PyUnusedLocal
def get_key_info(key: str) -> Optional[dict[str, object]]:
    """
    Get detailed information about a key.

    Args:
        key (str): The hashed subscription key.
    Returns:
        Optional[dict[str, object]]: Dictionary with key details, or None if
            nobody is attached to the key.
    Example:
        >>> submux.get_key_info('["users","123"]')
        {'key': '["users","123"]', 'observers': 2, 'active': True,
         'source': 'subscribe_to_user'}
    """


def get_statistics() -> dict[str, object]:
    """Get overall statistics of the default registry."""


def to_dict() -> dict:
    """Convert the default registry table to a dictionary."""


def to_string() -> str:
    """Returns a string representation of the default registry."""


# noinspection PyUnusedLocal
def export(filepath: Union[str, os.PathLike]) -> None:
    """Export the default registry table to filepath."""
