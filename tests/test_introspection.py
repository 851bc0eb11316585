"""
Unit tests for the registry introspection API.

Tests verify that introspection methods report accurate information about
keys, observer counts and live subscriptions.
"""

import json
from typing import Callable

from submux import Registry


def subscribe_to_user() -> Callable[[], None]:
    return lambda: None


def subscribe_to_posts() -> Callable[[], None]:
    return lambda: None


def test_get_keys() -> None:
    """Test listing all keys with observers, sorted."""
    registry = Registry()

    registry.attach("users", subscribe_to_user)
    registry.attach("posts", subscribe_to_posts)
    registry.attach("users", subscribe_to_user)

    assert registry.get_keys() == ["posts", "users"]


def test_key_exists_and_is_active() -> None:
    """Test checking whether keys are observed and live."""
    registry = Registry()
    registry.attach("users", subscribe_to_user)

    assert registry.key_exists("users") is True
    assert registry.is_active("users") is True
    assert registry.key_exists("posts") is False
    assert registry.is_active("posts") is False


def test_get_observer_count() -> None:
    """Test counting observers, including unknown keys."""
    registry = Registry()

    registry.attach("users", subscribe_to_user)
    registry.attach("users", subscribe_to_user)

    assert registry.get_observer_count("users") == 2
    assert registry.get_observer_count("unknown") == 0


def test_get_subscription() -> None:
    """Test fetching the live subscription record for a key."""
    registry = Registry()
    registry.attach("users", subscribe_to_user)

    sub = registry.get_subscription("users")

    assert sub is not None
    assert sub.key == "users"
    assert sub.source == "subscribe_to_user"
    assert callable(sub.teardown)
    assert registry.get_subscription("posts") is None


def test_get_key_info() -> None:
    """Test getting detailed information about a key."""
    registry = Registry()
    registry.attach("users", subscribe_to_user)
    registry.attach("users", subscribe_to_posts)

    info = registry.get_key_info("users")

    assert info == {
        "key": "users",
        "observers": 2,
        "active": True,
        "source": "subscribe_to_user",
    }
    assert registry.get_key_info("posts") is None


def test_get_statistics() -> None:
    """Test registry-wide statistics, including lifetime counters."""
    registry = Registry()

    registry.attach("users", subscribe_to_user)
    registry.attach("users", subscribe_to_user)
    registry.attach("users", subscribe_to_user)
    registry.attach("posts", subscribe_to_posts)
    registry.attach("feed", subscribe_to_posts)
    registry.detach("feed")

    stats = registry.get_statistics()

    assert stats["total_keys"] == 2
    assert stats["total_observers"] == 4
    assert stats["shared_keys"] == 1
    assert stats["max_observers"] == 3
    assert stats["subscriptions_created"] == 3
    assert stats["subscriptions_torn_down"] == 1


def test_get_statistics_empty() -> None:
    """Test statistics of an empty registry."""
    stats = Registry().get_statistics()

    assert stats["total_keys"] == 0
    assert stats["total_observers"] == 0
    assert stats["max_observers"] == 0


def test_to_dict() -> None:
    """Test converting the registry table to a dictionary."""
    registry = Registry()
    registry.attach("users", subscribe_to_user)
    registry.attach("posts", subscribe_to_posts)
    registry.attach("posts", subscribe_to_posts)

    assert registry.to_dict() == {
        "posts": {"observers": 2, "source": "subscribe_to_posts"},
        "users": {"observers": 1, "source": "subscribe_to_user"},
    }


def test_to_string_is_json() -> None:
    """Test that the string representation is the dictionary as JSON."""
    registry = Registry()
    registry.attach("users", subscribe_to_user)

    assert json.loads(registry.to_string()) == registry.to_dict()


def test_repr() -> None:
    """Test that the repr summarises the registry."""
    registry = Registry(strict=True)
    registry.attach("users", subscribe_to_user)

    assert repr(registry) == "<Registry keys=1 strict=True>"
    assert "attached=True" in repr(registry.bind("users", subscribe_to_user))
