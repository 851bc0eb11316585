"""
# Subscription Registry

The live table of "who is currently watching what". Each hashed key maps to one
shared subscription and the number of observers interested in it.

- attach() counts an observer in and creates the subscription only when the key
  is cold.
- detach() counts an observer out and tears the subscription down the moment
  the count returns to zero.
- clear_all() tears everything down regardless of counts.

The table is only ever mutated through those three calls, each of which runs
as one critical section behind a re-entrant lock, so subscribe functions and
teardowns may call back into the registry.
"""

import json
import logging
import os
import threading
from typing import Any
from typing import Optional
from typing import Union

from submux import binding
from submux import entries
from submux import errors
from submux import handlers
from submux import keys
from submux import subscription


logger = logging.getLogger(__name__)


class Registry(object):
    """
    Reference counted multiplexer of keyed subscriptions.

    Guarantees exactly one underlying subscription per key while at least one
    observer is attached, torn down exactly once when the last one detaches.

    Use attach() and detach() directly when the caller does its own ref-count
    bookkeeping, or bind() to get a Binding that does it for a consumer.
    """

    def __init__(
        self,
        strict: bool = False,
        teardown_exception_handler: Optional[
            handlers.TEARDOWN_EXCEPTION_HANDLER
        ] = handlers.log_and_raise_teardown_exception,
    ) -> None:
        self._table: dict[str, entries.RegistryEntry] = {}
        self._lock = threading.RLock()

        self._strict = strict
        self._teardown_exception_handler = teardown_exception_handler

        # Lifetime counters, reported by get_statistics()
        self._subscriptions_created = 0
        self._subscriptions_torn_down = 0

    def __repr__(self) -> str:
        return f"<Registry keys={len(self._table)} strict={self._strict}>"

    # -----Configuration-------------------------------------------------------

    def set_strict(self, strict: bool) -> None:
        """
        Choose how unbalanced detaches are treated.

        Args:
            strict (bool): If True, detach() of a key with no observers raises
                UnbalancedDetachError. If False (default) it is logged and
                ignored so a misbehaving consumer cannot crash the others
                sharing the key.
        """
        self._strict = strict

    def set_teardown_exception_handler(
        self, handler: Optional[handlers.TEARDOWN_EXCEPTION_HANDLER]
    ) -> None:
        """
        Set the exception handler for teardown errors.
        The handler is called after the failing key has already been removed.

        Args:
            Optional[handlers.TEARDOWN_EXCEPTION_HANDLER]:
                Callable with signature (TEARDOWN, str, Exception) -> bool.
                Returns True to re-raise, False to continue.
                Pass None to re-raise without logging.
        """
        self._teardown_exception_handler = handler

    # -----Lifecycle-----------------------------------------------------------

    def attach(self, key: str, subscribe_fn: subscription.SUBSCRIBE_FN) -> None:
        """
        Count one observer in for a key, subscribing if the key is cold.

        Args:
            key (str): The hashed subscription key.
            subscribe_fn (SUBSCRIBE_FN): Starts the subscription and returns its
                teardown. Only called when no subscription is live for the key.
        Raises:
            InvalidTeardownError: If subscribe_fn returns a non-callable.
            Exception: Anything raised by subscribe_fn.
        Notes:
            Attach is all-or-nothing: if subscribe_fn fails, the observer
            increment is rolled back before the exception propagates.
            If subscribe_fn itself attaches, detaches or clears the same key,
            the subscription it returns is torn down at once, so the key keeps
            at most one live subscription and none outlives its entry.
        """
        with self._lock:
            entry = self._table.get(key)
            if entry is None:
                entry = {"subscription": None, "observers": 0}
                self._table[key] = entry

            entry["observers"] += 1

            if entry["subscription"] is not None:
                logger.debug(
                    f"Reusing subscription for {key} "
                    f"(observers={entry['observers']})"
                )
                return

            try:
                teardown = subscribe_fn()
                if not callable(teardown):
                    raise errors.InvalidTeardownError(
                        f"Subscribe function '{handlers.get_callable_name(subscribe_fn)}' "
                        f"for key {key} returned {teardown!r}, expected a callable"
                    )
            except Exception:
                self._rollback_attach(key, entry)
                raise

            new_sub = subscription.Subscription(
                key=key,
                teardown=teardown,
                source=handlers.get_callable_name(subscribe_fn),
            )
            self._subscriptions_created += 1

            # subscribe_fn may have re-entered for the same key: the entry is
            # either gone (detached or cleared) or already holds a subscription.
            if self._table.get(key) is not entry or entry["subscription"] is not None:
                logger.debug(f"Discarding superseded subscription for {key}")
                self._run_teardown(new_sub)
                return

            entry["subscription"] = new_sub
            logger.debug(f"Created subscription for {key}")

    def _rollback_attach(self, key: str, entry: entries.RegistryEntry) -> None:
        """Undo the observer increment of a failed attach."""
        entry["observers"] -= 1
        if entry["observers"] <= 0 and self._table.get(key) is entry:
            del self._table[key]
        logger.debug(f"Rolled back failed attach for {key}")

    def detach(self, key: str) -> None:
        """
        Count one observer out for a key, tearing down on the last one.

        Args:
            key (str): The hashed subscription key.
        Raises:
            UnbalancedDetachError: In strict mode, if the key has no observers.
            Exception: Anything raised by the teardown, when the teardown
                exception handler asks for it.
        Notes:
            The entry is removed before the teardown runs, so a failing
            teardown never leaves the key stuck.
        """
        with self._lock:
            entry = self._table.get(key)
            if entry is None or entry["observers"] <= 0:
                self._on_unbalanced_detach(key)
                return

            entry["observers"] -= 1
            if entry["observers"] > 0:
                logger.debug(
                    f"Detached from {key} (observers={entry['observers']})"
                )
                return

            del self._table[key]
            if entry["subscription"] is not None:
                self._run_teardown(entry["subscription"])

    def _on_unbalanced_detach(self, key: str) -> None:
        message = f"Detach from {key} without a matching attach"
        if self._strict:
            raise errors.UnbalancedDetachError(message)

        logger.warning(f"{message} (ignored)")

    def _run_teardown(self, sub: subscription.Subscription) -> None:
        """Invoke a teardown, routing failures through the exception handler."""
        self._subscriptions_torn_down += 1
        try:
            sub.teardown()
        except Exception as e:
            if self._teardown_exception_handler is None:
                raise

            if self._teardown_exception_handler(sub.teardown, sub.key, e):
                raise
        else:
            logger.debug(f"Tore down subscription for {sub.key}")

    def clear_all(self) -> None:
        """
        Tear down every live subscription and forget every observer.

        This deliberately bypasses ref-counting, e.g. on sign-out. Every
        teardown runs even if an earlier one fails; the first failure the
        exception handler asks to re-raise propagates once all have run.
        """
        with self._lock:
            table = self._table
            self._table = {}

            first_error: Optional[Exception] = None
            for entry in table.values():
                if entry["subscription"] is None:
                    continue

                try:
                    self._run_teardown(entry["subscription"])
                except Exception as e:
                    if first_error is None:
                        first_error = e

            if table:
                logger.debug(f"Cleared {len(table)} subscription key(s)")

            if first_error is not None:
                raise first_error

    def bind(
        self,
        key: Any,
        subscribe_fn: subscription.SUBSCRIBE_FN,
        enabled: bool = True,
        hasher: keys.HASHER = keys.stable_hash,
    ) -> binding.Binding:
        """
        Create a consumer binding on this registry and establish it.

        Args:
            key (Any): The structured subscription key.
            subscribe_fn (SUBSCRIBE_FN): Starts the subscription if the key is
                cold.
            enabled (bool): Whether the consumer is interested right away.
            hasher (HASHER): Turns the structured key into a registry key.
        Returns:
            Binding: The established binding. Call update() when any input
                changes and destroy() when the consumer goes away, or use it as
                a context manager.
        """
        new_binding = binding.Binding(self, hasher=hasher)
        new_binding.update(key, subscribe_fn, enabled=enabled)
        return new_binding

    # -----Introspection API---------------------------------------------------

    def get_keys(self) -> list[str]:
        """Get all keys with at least one observer."""
        with self._lock:
            return sorted(self._table.keys())

    def key_exists(self, key: str) -> bool:
        """Check if a key currently has observers."""
        return key in self._table

    def is_active(self, key: str) -> bool:
        """Check if a subscription is live for a key."""
        entry = self._table.get(key)
        return entry is not None and entry["subscription"] is not None

    def get_observer_count(self, key: str) -> int:
        """
        Get the number of observers attached to a key.

        Args:
            key (str): The hashed subscription key.
        Returns:
            int: Number of observers, 0 for keys nobody is attached to.
        """
        entry = self._table.get(key)
        return entry["observers"] if entry is not None else 0

    def get_subscription(self, key: str) -> Optional[subscription.Subscription]:
        """Get the live subscription for a key, or None."""
        entry = self._table.get(key)
        return entry["subscription"] if entry is not None else None

    def get_key_info(self, key: str) -> Optional[dict[str, object]]:
        """
        Get detailed information about a key.

        Args:
            key (str): The hashed subscription key.
        Returns:
            Optional[dict[str, object]]: Dictionary with key details, or None
                if nobody is attached to the key.
        Example:
            {
                'key': '["users","123"]',
                'observers': 2,
                'active': True,
                'source': 'subscribe_to_user',
            }
        """
        with self._lock:
            entry = self._table.get(key)
            if entry is None:
                return None

            sub = entry["subscription"]
            return {
                "key": key,
                "observers": entry["observers"],
                "active": sub is not None,
                "source": sub.source if sub is not None else None,
            }

    def get_statistics(self) -> dict[str, object]:
        """
        Get overall registry statistics.

        Returns:
            dict[str, object]: Dictionary with registry-wide statistics.
        Example:
            {
                "total_keys": 3,
                "total_observers": 7,
                "shared_keys": 2,
                "max_observers": 4,
                "subscriptions_created": 12,
                "subscriptions_torn_down": 9,
            }
        """
        with self._lock:
            counts = [entry["observers"] for entry in self._table.values()]

            return {
                "total_keys": len(counts),
                "total_observers": sum(counts),
                "shared_keys": sum(1 for count in counts if count > 1),
                "max_observers": max(counts, default=0),
                "subscriptions_created": self._subscriptions_created,
                "subscriptions_torn_down": self._subscriptions_torn_down,
            }

    def to_dict(self) -> dict:
        """Convert the registry table to a dictionary."""
        with self._lock:
            data = {}
            for key in sorted(self._table.keys()):
                entry = self._table[key]
                sub = entry["subscription"]
                data[key] = {
                    "observers": entry["observers"],
                    "source": sub.source if sub is not None else None,
                }

            return data

    def to_string(self) -> str:
        """Returns a string representation of the registry."""
        return json.dumps(self.to_dict(), indent=4)

    def export(self, filepath: Union[str, os.PathLike]) -> None:
        """Export registry table to filepath."""
        with open(filepath, "w") as outfile:
            json.dump(self.to_dict(), outfile, indent=4)
