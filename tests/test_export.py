"""
Unit tests for registry export functionality.

Tests verify that the export method correctly writes registry state to files
in JSON format.
"""

import json
from pathlib import Path
from typing import Callable

from submux import Registry


def subscribe_to_user() -> Callable[[], None]:
    return lambda: None


def test_export_creates_valid_json_file(tmp_path: Path) -> None:
    """Test that export creates a valid JSON file with correct content."""
    registry = Registry()
    registry.attach('["users","123"]', subscribe_to_user)
    registry.attach('["users","456"]', subscribe_to_user)

    output_file = tmp_path / "registry_export.json"
    registry.export(output_file)

    assert output_file.exists()

    with open(output_file) as f:
        data = json.load(f)

    assert data == registry.to_dict()
    assert '["users","123"]' in data


def test_export_with_string_and_path_types(tmp_path: Path) -> None:
    """Test that export accepts both string and Path objects."""
    registry = Registry()
    registry.attach("users", subscribe_to_user)

    path_file = tmp_path / "path_export.json"
    registry.export(path_file)
    assert path_file.exists()

    string_file = str(tmp_path / "string_export.json")
    registry.export(string_file)
    assert Path(string_file).exists()


def test_export_empty_registry(tmp_path: Path) -> None:
    """Test that exporting an empty registry writes an empty object."""
    output_file = tmp_path / "empty.json"
    Registry().export(output_file)

    assert json.loads(output_file.read_text()) == {}
