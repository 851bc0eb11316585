"""
Exception types raised by the subscription registry and its bindings.

All exceptions derive from SubmuxError so hosts can catch registry misuse in a
single clause. Exceptions raised by subscribe functions or teardowns are never
wrapped; they propagate as-is.
"""


class SubmuxError(Exception):
    """Base class for registry errors."""


class UnbalancedDetachError(SubmuxError):
    """Raised by a strict registry when detach() has no matching attach()."""


class InvalidTeardownError(SubmuxError, TypeError):
    """Raised when a subscribe function does not return a callable teardown."""


class InvalidKeyError(SubmuxError, TypeError):
    """Raised when a structured key cannot be serialised to a stable string."""


class BindingDestroyedError(SubmuxError):
    """Raised when a destroyed binding is updated."""
