"""
# Keyed Subscription Multiplexer

Many consumers listening to the same logical feed share exactly one underlying
subscription per key. The subscription starts when the first consumer attaches
and is torn down, exactly once, when the last one goes away.

Herein is the module level API as a module class, creating a protective closure
around the process-wide default registry so its table cannot be reached or
replaced from outside.

A reimport protection clause exists at the top of the file to prevent the
default registry, and every live subscription it tracks, from being lost on
import.

Function stubs exist in the stubs file for static type checkers to validate
correct calls.
"""

# Remember to update doc strings in the stub.py file so static type checkers
# and intellisense can receive accurate feedback!

import sys

# -----------------------------------------------------------------------------
# Prevent module reload - live subscriptions would be lost!
if "submux" in sys.modules:
    existing_module = sys.modules["submux"]
    if hasattr(existing_module, "_SUBMUX_IMPORT_GUARD"):
        raise ImportError(
            "Module 'submux' has already been imported and cannot be reloaded. "
            "Live subscriptions would be leaked. "
            "Restart your Python session to reimport."
        )
_SUBMUX_IMPORT_GUARD = True
# -----------------------------------------------------------------------------

import os
from types import ModuleType
from typing import Any
from typing import Optional
from typing import Union

from submux.stub import *
from submux import binding
from submux import entries
from submux import errors
from submux import handlers
from submux import keys
from submux import registry
from submux import subscription


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

_DEFAULT_REGISTRY = registry.Registry()
"""
Process-wide registry used by the module level functions.
Explicit Registry() instances are independent of it.
"""


class Submux(ModuleType):
    """
    Module level access to the default subscription registry.

    Use attach() and detach() for manual ref-counting, bind() to get a Binding
    that follows a consumer's lifecycle, and clear_all() to tear everything
    down at once.
    """

    # -----Runtime Closures----------------------------------------------------
    # ---Constants---
    __version__ = __version__
    _SUBMUX_IMPORT_GUARD = _SUBMUX_IMPORT_GUARD
    # Explicitly refuse to make closure for _DEFAULT_REGISTRY so it stays
    # protected!

    # ---Exceptions---
    SubmuxError = errors.SubmuxError
    UnbalancedDetachError = errors.UnbalancedDetachError
    InvalidTeardownError = errors.InvalidTeardownError
    InvalidKeyError = errors.InvalidKeyError
    BindingDestroyedError = errors.BindingDestroyedError

    # ---Types---
    Registry = registry.Registry
    Binding = binding.Binding
    Subscription = subscription.Subscription
    stable_hash = staticmethod(keys.stable_hash)

    # ---Modules---
    binding = binding
    entries = entries
    errors = errors
    handlers = handlers
    keys = keys
    registry = registry
    subscription = subscription
    # -------------------------------------------------------------------------

    def __init__(self, name: str) -> None:
        super().__init__(name)
        assert self._SUBMUX_IMPORT_GUARD is True

    @staticmethod
    def get_default_registry() -> registry.Registry:
        return _DEFAULT_REGISTRY

    @staticmethod
    def set_strict(strict: bool) -> None:
        _DEFAULT_REGISTRY.set_strict(strict)

    @staticmethod
    def set_teardown_exception_handler(
        handler: Optional[handlers.TEARDOWN_EXCEPTION_HANDLER],
    ) -> None:
        _DEFAULT_REGISTRY.set_teardown_exception_handler(handler)

    # -----Lifecycle-----------------------------------------------------------

    @staticmethod
    def attach(key: str, subscribe_fn: subscription.SUBSCRIBE_FN) -> None:
        _DEFAULT_REGISTRY.attach(key, subscribe_fn)

    @staticmethod
    def detach(key: str) -> None:
        _DEFAULT_REGISTRY.detach(key)

    @staticmethod
    def clear_all() -> None:
        _DEFAULT_REGISTRY.clear_all()

    @staticmethod
    def bind(
        key: Any,
        subscribe_fn: subscription.SUBSCRIBE_FN,
        enabled: bool = True,
        hasher: keys.HASHER = keys.stable_hash,
    ) -> binding.Binding:
        return _DEFAULT_REGISTRY.bind(key, subscribe_fn, enabled, hasher)

    # -----Introspection API---------------------------------------------------

    @staticmethod
    def get_keys() -> list[str]:
        return _DEFAULT_REGISTRY.get_keys()

    @staticmethod
    def key_exists(key: str) -> bool:
        return _DEFAULT_REGISTRY.key_exists(key)

    @staticmethod
    def is_active(key: str) -> bool:
        return _DEFAULT_REGISTRY.is_active(key)

    @staticmethod
    def get_observer_count(key: str) -> int:
        return _DEFAULT_REGISTRY.get_observer_count(key)

    @staticmethod
    def get_subscription(key: str) -> Optional[subscription.Subscription]:
        return _DEFAULT_REGISTRY.get_subscription(key)

    @staticmethod
    def get_key_info(key: str) -> Optional[dict[str, object]]:
        return _DEFAULT_REGISTRY.get_key_info(key)

    @staticmethod
    def get_statistics() -> dict[str, object]:
        return _DEFAULT_REGISTRY.get_statistics()

    @staticmethod
    def to_dict() -> dict:
        return _DEFAULT_REGISTRY.to_dict()

    @staticmethod
    def to_string() -> str:
        return _DEFAULT_REGISTRY.to_string()

    @staticmethod
    def export(filepath: Union[str, os.PathLike]) -> None:
        _DEFAULT_REGISTRY.export(filepath)


# This is here to protect the _DEFAULT_REGISTRY, creating a protective closure.
custom_module = Submux(sys.modules[__name__].__name__)
sys.modules[__name__] = custom_module
