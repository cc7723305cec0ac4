"""Shared fixtures for CLI tests: catalog files on disk."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def diamond_catalog(tmp_path: Path) -> Path:
    """A -> [B, C], B -> D >= 1.0, C -> D >= 2.0; D has 1.0 and 2.0."""
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "packages:\n"
        "  - {id: A, version: '1.0', dependencies: {B: null, C: null}}\n"
        "  - {id: B, version: '1.0', dependencies: {D: '1.0'}}\n"
        "  - {id: C, version: '1.0', dependencies: {D: '2.0'}}\n"
        "  - {id: D, version: '1.0'}\n"
        "  - {id: D, version: '2.0'}\n"
        "  - {id: D, version: '3.0'}\n"
    )
    return path


@pytest.fixture
def installed_catalog(tmp_path: Path) -> Path:
    """A needs B >= 1.0; B 1.0 is installed, B 1.1 is available."""
    path = tmp_path / "installed.yaml"
    path.write_text(
        "packages:\n"
        "  - {id: A, version: '1.0', dependencies: {B: '1.0'}}\n"
        "  - {id: B, version: '1.0'}\n"
        "  - {id: B, version: '1.1'}\n"
        "installed:\n"
        "  - B@1.0\n"
    )
    return path


@pytest.fixture
def broken_catalog(tmp_path: Path) -> Path:
    """A depends on a package that is not in the catalog."""
    path = tmp_path / "broken.yaml"
    path.write_text(
        "packages:\n"
        "  - {id: A, version: '1.0', dependencies: {Ghost: null}}\n"
    )
    return path
