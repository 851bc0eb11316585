"""
Stable hashing of structured subscription keys.

A structured key is any nesting of lists, tuples, dicts, strings, numbers,
booleans and None, e.g. ["users", {"user_id": "123"}, ["posts"]]. Two keys that
are equal by value always hash to the same string: mapping keys are sorted,
sequence order is kept, and the output is compact JSON.
"""

import json
from typing import Any
from typing import Callable

from submux import errors


HASHER = Callable[[Any], str]
"""Turns a structured key into the string the registry is keyed by."""


def _normalise(value: Any) -> Any:
    """Collapse whole floats to ints so keys equal by value hash equally."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {_normalise(k): _normalise(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise(item) for item in value]
    return value


def stable_hash(key: Any) -> str:
    """
    Serialise a structured key into its canonical string form.

    Args:
        key (Any): The structured key.
    Returns:
        str: The hashed key, usable as a registry key.
    Raises:
        InvalidKeyError: If the key contains values that cannot be serialised
            (sets, arbitrary objects, NaN) or mappings whose keys are of mixed
            types.
    Notes:
        Whole floats hash like the equal int, so [1] and [1.0] share a key.
    Example:
        >>> stable_hash(["users", {"b": 2, "a": 1}])
        '["users",{"a":1,"b":2}]'
    """
    try:
        return json.dumps(
            _normalise(key),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise errors.InvalidKeyError(
            f"Subscription key {key!r} cannot be hashed: {e}"
        ) from e
