"""
Keeps the submux version constants in step with pyproject.toml.

    python release.py          rewrite submux/__init__.py from the TOML version
    python release.py --check  exit 1 if the two disagree
"""

import argparse
import re
import sys
from pathlib import Path
from typing import Optional


TOML_PATH = Path(Path(__file__).parent, "pyproject.toml")
SUBMUX_PATH = Path(Path(__file__).parent, "submux/__init__.py")

VERSION = tuple[int, int, int]
_PARTS = ("major", "minor", "patch")


def parse_version(version_str: str) -> VERSION:
    """Parse a version string into major, minor, patch tuple."""
    match = re.match(r"^(\d+)\.(\d+)\.(\d+)$", version_str.strip("\"'"))
    if not match:
        raise ValueError(f"Invalid version format: {version_str}")
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def get_toml_version() -> VERSION:
    """Extract the [project] version from the TOML file."""
    content = TOML_PATH.read_text()
    match = re.search(r'^version\s*=\s*["\'](\d+\.\d+\.\d+)["\']', content, re.M)

    if not match:
        raise ValueError(f"No version field found in {TOML_PATH}")

    return parse_version(match.group(1))


def get_package_version() -> VERSION:
    """Read version_major/minor/patch out of the package without importing it."""
    content = SUBMUX_PATH.read_text(encoding="utf-8")

    parts = []
    for part in _PARTS:
        match = re.search(rf"^version_{part}\s*=\s*(\d+)", content, re.M)
        if not match:
            raise ValueError(f"version_{part} not found in {SUBMUX_PATH}")
        parts.append(int(match.group(1)))

    return parts[0], parts[1], parts[2]


def write_package_version(version: VERSION) -> None:
    """Rewrite the version constants in the submux package."""
    content = SUBMUX_PATH.read_text(encoding="utf-8")

    for part, number in zip(_PARTS, version):
        content = re.sub(
            rf"^version_{part}\s*=\s*\d+", f"version_{part} = {number}", content,
            flags=re.M,
        )

    SUBMUX_PATH.write_text(content, encoding="utf-8")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--check",
        action="store_true",
        help="only report whether the package matches pyproject.toml",
    )
    args = parser.parse_args(argv)

    wanted = get_toml_version()
    current = get_package_version()
    wanted_str = ".".join(map(str, wanted))

    if current == wanted:
        print(f"submux is at {wanted_str}")
        return 0

    if args.check:
        print(
            f"submux is at {'.'.join(map(str, current))}, "
            f"pyproject.toml says {wanted_str}"
        )
        return 1

    write_package_version(wanted)
    print(f"Updated {SUBMUX_PATH} to {wanted_str}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
