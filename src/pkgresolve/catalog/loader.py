"""Load a package catalog from a YAML or JSON file.

File layout::

    packages:
      - id: A
        version: "1.0"
        dependencies:
          B: "[1.0,2.0)"
          C: null            # any version
      - id: B
        version: "1.0"
        dependencies:        # list form is accepted too
          - {id: D, range: ">=1.0"}
    installed:
      - {id: B, version: "1.0"}

The resolver itself never touches files; this module exists for the CLI
and for callers that keep their catalog on disk.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pkgresolve.core.identity import (
    PackageDependency,
    PackageDependencyInfo,
    PackageIdentity,
    normalize_id,
)
from pkgresolve.core.versioning import SemanticVersion, VersionRange
from pkgresolve.exceptions import CatalogError

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass
class Catalog:
    """Packages available for installation plus what is already installed."""

    packages: list[PackageDependencyInfo] = field(default_factory=list)
    installed: list[PackageIdentity] = field(default_factory=list)

    def versions_of(self, package_id: str) -> list[SemanticVersion]:
        """Return every catalog version of *package_id*, newest first."""
        key = normalize_id(package_id)
        return sorted(
            {p.version for p in self.packages if normalize_id(p.id) == key},
            reverse=True,
        )


def parse_identity(text: str) -> PackageIdentity:
    """Parse ``id`` or ``id@version`` into a ``PackageIdentity``.

    Raises:
        VersionFormatError: If the version part is malformed.
        ValueError: If the id part is empty.
    """
    package_id, sep, version = text.strip().partition("@")
    if not package_id:
        raise ValueError(f"Missing package id in {text!r}")
    if not sep:
        return PackageIdentity(package_id)
    return PackageIdentity(package_id, SemanticVersion.parse(version))


def load_catalog(path: Path | str) -> Catalog:
    """Read and parse a catalog file.

    Raises:
        CatalogError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Cannot read catalog {path}: {exc}") from exc

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Cannot parse catalog {path}: {exc}") from exc

    return parse_catalog(data, source=str(path))


def parse_catalog(data: Any, source: str = "<catalog>") -> Catalog:
    """Build a ``Catalog`` from already decoded YAML/JSON data.

    Raises:
        CatalogError: If the structure or any version string is invalid.
    """
    if not isinstance(data, dict):
        raise CatalogError(f"{source}: top level must be a mapping")

    packages_raw = data.get("packages") or []
    installed_raw = data.get("installed") or []
    if not isinstance(packages_raw, list) or not isinstance(installed_raw, list):
        raise CatalogError(f"{source}: 'packages' and 'installed' must be lists")

    catalog = Catalog()
    for index, entry in enumerate(packages_raw):
        where = f"{source}: packages[{index}]"
        try:
            catalog.packages.append(_parse_package(entry, where))
        except ValueError as exc:
            raise CatalogError(f"{where}: {exc}") from exc

    for index, entry in enumerate(installed_raw):
        where = f"{source}: installed[{index}]"
        try:
            catalog.installed.append(_parse_installed(entry, where))
        except ValueError as exc:
            raise CatalogError(f"{where}: {exc}") from exc

    return catalog


def _require_id(entry: dict[str, Any], where: str) -> str:
    package_id = entry.get("id")
    if not isinstance(package_id, str) or not package_id.strip():
        raise CatalogError(f"{where}: missing 'id'")
    return package_id.strip()


def _parse_package(entry: Any, where: str) -> PackageDependencyInfo:
    if not isinstance(entry, dict):
        raise CatalogError(f"{where}: entry must be a mapping")
    package_id = _require_id(entry, where)
    if entry.get("version") is None:
        raise CatalogError(f"{where}: missing 'version'")
    version = SemanticVersion.parse(str(entry["version"]))
    return PackageDependencyInfo(
        package_id, version, _parse_dependencies(entry.get("dependencies"), where)
    )


def _parse_dependencies(raw: Any, where: str) -> tuple[PackageDependency, ...]:
    if raw is None:
        return ()
    if isinstance(raw, dict):
        items = list(raw.items())
    elif isinstance(raw, list):
        items = []
        for dep in raw:
            if isinstance(dep, str):
                items.append((dep, None))
            elif isinstance(dep, dict):
                items.append((_require_id(dep, where), dep.get("range")))
            else:
                raise CatalogError(f"{where}: invalid dependency {dep!r}")
    else:
        raise CatalogError(f"{where}: 'dependencies' must be a mapping or a list")

    deps = []
    for dep_id, range_text in items:
        version_range = None if range_text is None else VersionRange.parse(str(range_text))
        deps.append(PackageDependency(str(dep_id), version_range))
    return tuple(deps)


def _parse_installed(entry: Any, where: str) -> PackageIdentity:
    if isinstance(entry, str):
        identity = parse_identity(entry)
    elif isinstance(entry, dict):
        version = entry.get("version")
        identity = PackageIdentity(
            _require_id(entry, where),
            SemanticVersion.parse(str(version)) if version is not None else None,
        )
    else:
        raise CatalogError(f"{where}: entry must be a mapping or 'id@version'")
    if identity.version is None:
        raise CatalogError(f"{where}: installed packages need a version")
    return identity
