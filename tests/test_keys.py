"""Unit tests for stable hashing of structured subscription keys."""

import math

import pytest

import submux
from submux import keys


def test_mapping_key_order_does_not_matter() -> None:
    """Test that dicts equal by value hash equally regardless of key order."""
    first = keys.stable_hash(["users", {"a": 1, "b": {"y": 2, "x": 1}}])
    second = keys.stable_hash(["users", {"b": {"x": 1, "y": 2}, "a": 1}])

    assert first == second


def test_sequence_order_matters() -> None:
    """Test that sequence order is part of the key's identity."""
    assert keys.stable_hash(["a", "b"]) != keys.stable_hash(["b", "a"])


def test_tuples_and_lists_hash_equally() -> None:
    """Test that tuples are treated as sequences."""
    assert keys.stable_hash(("a", ("b", 1))) == keys.stable_hash(["a", ["b", 1]])


def test_compact_output() -> None:
    """Test that the canonical form is compact JSON."""
    assert keys.stable_hash(["users", {"id": "123"}]) == '["users",{"id":"123"}]'
    assert keys.stable_hash([]) == "[]"
    assert keys.stable_hash([None, None]) == "[null,null]"


def test_strings_and_numbers_are_distinct() -> None:
    """Test that '1' and 1 are different keys."""
    assert keys.stable_hash(["1"]) != keys.stable_hash([1])


def test_whole_floats_hash_like_ints() -> None:
    """Test that keys equal by value, like 1 and 1.0, hash equally."""
    assert keys.stable_hash([1]) == keys.stable_hash([1.0])
    assert keys.stable_hash({"page": 2.0}) == '{"page":2}'
    assert keys.stable_hash({1.0: "a"}) == keys.stable_hash({1: "a"})
    assert keys.stable_hash([1.5]) == "[1.5]"


def test_non_ascii_is_kept() -> None:
    """Test that non-ASCII text round-trips into the hash unescaped."""
    assert keys.stable_hash(["café"]) == '["café"]'


@pytest.mark.parametrize(
    "key",
    [
        ["tags", {"a", "b"}],
        [object()],
        [math.nan],
        {1: "int", "1": "str"},
    ],
)
def test_unhashable_keys_raise(key: object) -> None:
    """Test that keys without a canonical form are rejected."""
    with pytest.raises(submux.InvalidKeyError, match="cannot be hashed"):
        keys.stable_hash(key)


def test_exported_on_module() -> None:
    """Test that stable_hash is reachable from the package root."""
    assert submux.stable_hash(["a"]) == '["a"]'
