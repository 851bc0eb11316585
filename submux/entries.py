"""
Registry table data structures.

Defines the RegistryEntry TypedDict that represents the current state of a key
in the registry's internal table: the live subscription and the number of
observers interested in it.

A key exists in the table only while at least one observer is interested. The
moment its observer count returns to zero the entry is removed.
"""

from typing import Optional
from typing import TypedDict

from submux import subscription


class RegistryEntry(TypedDict):
    """Entry for a key in the registry table."""

    subscription: Optional[subscription.Subscription]
    """The live subscription, None only while it is being created."""

    observers: int
    """Number of consumers currently interested in the key."""
