"""
Subscription data structures and type definitions for the registry.

Defines the Subscription dataclass which pairs a live teardown callback with the
key it belongs to and a printable name of the function that created it. Also
defines the SUBSCRIBE_FN and TEARDOWN type aliases used throughout the package
for type hints.
"""

from dataclasses import dataclass
from typing import Callable


TEARDOWN = Callable[[], None]
"""
Callback that fully reverses the side effects of a subscription.
The registry calls it at most once per subscription instance.
"""

SUBSCRIBE_FN = Callable[[], TEARDOWN]
"""
Zero-argument function that starts a subscription (a realtime listener, a
socket, a polling timer...) and returns its TEARDOWN.
"""


@dataclass(frozen=True)
class Subscription(object):
    """A live underlying subscription shared by every observer of a key."""

    key: str
    """The hashed subscription key."""

    teardown: TEARDOWN
    """What gets ran when the last observer of the key goes away."""

    source: str
    """Name of the subscribe function that created this subscription."""
