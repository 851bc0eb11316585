"""
Per-consumer adapter between a host lifecycle and the registry.

A consumer (a UI component, a request handler, a session...) tracks three inputs
that can change independently: the structured key it wants, whether it is
enabled, and the function used to start a subscription. The host calls
Binding.update() when the consumer is established and whenever any input
changes, and Binding.destroy() when the consumer goes away.

Each transition compares what the binding was attached to before with what it
should be attached to now and issues the minimal set of registry calls, always
detaching before attaching.
"""

from typing import TYPE_CHECKING
from typing import Any
from typing import Optional

from submux import errors
from submux import keys
from submux import subscription

if TYPE_CHECKING:
    from submux.registry import Registry


class Binding(object):
    """
    One consumer's interest in a keyed subscription.

    The binding owns no shared state. It only remembers the key it last
    attached so it can detach exactly what it attached, exactly once.
    """

    def __init__(
        self, registry: "Registry", hasher: keys.HASHER = keys.stable_hash
    ) -> None:
        self._registry = registry
        self._hasher = hasher

        self._key: Optional[str] = None
        self._attached = False
        self._destroyed = False

    def __repr__(self) -> str:
        return (
            f"<Binding key={self._key!r} attached={self._attached} "
            f"destroyed={self._destroyed}>"
        )

    def __enter__(self) -> "Binding":
        return self

    def __exit__(self, *_: Any) -> None:
        self.destroy()

    @property
    def registry(self) -> "Registry":
        return self._registry

    @property
    def key(self) -> Optional[str]:
        """The hashed key of the last update, attached or not."""
        return self._key

    @property
    def attached(self) -> bool:
        """Whether this binding is currently counted as an observer."""
        return self._attached

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def update(
        self,
        key: Any,
        subscribe_fn: subscription.SUBSCRIBE_FN,
        enabled: bool = True,
    ) -> None:
        """
        Re-evaluate the binding against its current inputs.

        Args:
            key (Any): The structured subscription key.
            subscribe_fn (SUBSCRIBE_FN): Only consulted if the key is cold when
                this binding attaches to it. Changing it alone has no effect.
            enabled (bool): Whether the consumer is interested.
        Raises:
            BindingDestroyedError: If destroy() was already called.
            InvalidKeyError: If the key cannot be hashed.
            Exception: Anything raised by subscribe_fn. The binding is left
                detached.
        """
        if self._destroyed:
            raise errors.BindingDestroyedError(
                f"Cannot update a destroyed binding (last key {self._key})"
            )

        new_key = self._hasher(key)

        if self._attached and enabled and new_key == self._key:
            return

        if self._attached:
            self._attached = False
            self._registry.detach(self._key)

        self._key = new_key

        if enabled:
            self._registry.attach(new_key, subscribe_fn)
            self._attached = True

    def destroy(self) -> None:
        """Release this binding's interest. Calling it again does nothing."""
        if self._destroyed:
            return

        self._destroyed = True
        if self._attached:
            self._attached = False
            self._registry.detach(self._key)
