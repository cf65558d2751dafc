"""Tests for version lookup."""

import re
from pathlib import Path

from iam_copy_role.version import get_version


def get_pyproject_version():
    """Get version from pyproject.toml."""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    content = pyproject_path.read_text()
    match = re.search(r'^version\s*=\s*"([^"]+)"', content, re.MULTILINE)
    if match:
        return match.group(1)
    raise ValueError("Could not find version in pyproject.toml")


def test_version_from_pyproject():
    """Test the version matches pyproject.toml."""
    assert get_version() == get_pyproject_version()


def test_build_version_wins(monkeypatch):
    """Test BUILD_VERSION overrides pyproject.toml."""
    monkeypatch.setenv("BUILD_VERSION", "2.0.0-rc.1")

    assert get_version() == "2.0.0-rc.1"
