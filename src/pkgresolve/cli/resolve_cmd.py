"""``pkgresolve resolve`` and ``pkgresolve versions``.

``resolve`` loads a catalog file, narrows each target given as
``id@version`` to that catalog version, adds every installed package to the
target list (the resolver requires installed packages to be targets), runs
the resolver and prints the install order.

Exit Codes:
    0 - Resolution succeeded.
    1 - No combination of versions satisfies every dependency.
    2 - Invalid input: unreadable catalog, unknown package, bad identity.
"""

from __future__ import annotations

import sys

import click

from pkgresolve.catalog import Catalog, load_catalog, parse_identity
from pkgresolve.cli.output import (
    print_failure,
    print_resolution,
    print_versions,
    solution_to_json,
)
from pkgresolve.core.identity import PackageDependencyInfo, PackageIdentity, normalize_id
from pkgresolve.core.resolver import DependencyBehavior, PackageResolver
from pkgresolve.exceptions import CatalogError, ResolutionError, ResolverInputError

BEHAVIOR_CHOICES = [b.value for b in DependencyBehavior]


def _parse_behavior(
    ctx: click.Context, param: click.Parameter, value: str
) -> DependencyBehavior:
    try:
        return DependencyBehavior.parse(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _load(path: str) -> Catalog:
    try:
        return load_catalog(path)
    except CatalogError as exc:
        print_failure("Invalid catalog", str(exc))
        sys.exit(2)


def _parse_identities(values: tuple[str, ...], require_version: bool) -> list[PackageIdentity]:
    identities = []
    for value in values:
        try:
            identity = parse_identity(value)
        except ValueError as exc:
            raise click.BadParameter(str(exc)) from exc
        if require_version and identity.version is None:
            raise click.BadParameter(f"{value!r} needs a version (id@version)")
        identities.append(identity)
    return identities


def _merge_targets(
    targets: list[PackageIdentity], installed: list[PackageIdentity]
) -> list[PackageIdentity]:
    """Append installed packages that are not already targets."""
    merged = list(targets)
    seen = {normalize_id(t.id) for t in targets}
    for package in installed:
        if normalize_id(package.id) not in seen:
            seen.add(normalize_id(package.id))
            merged.append(package)
    return merged


def _pin_targets(
    packages: list[PackageDependencyInfo], targets: list[PackageIdentity]
) -> list[PackageDependencyInfo]:
    """Drop every other catalog version of a target given as id@version."""
    pins = {normalize_id(t.id): t for t in targets if t.version is not None}
    kept = [
        p for p in packages
        if normalize_id(p.id) not in pins or pins[normalize_id(p.id)].version == p.version
    ]
    available = {p.identity for p in kept}
    for target in pins.values():
        if target not in available:
            raise click.BadParameter(f"{target} is not in the catalog", param_hint="TARGETS")
    return kept


@click.command("resolve")
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.argument("targets", nargs=-1, required=True)
@click.option(
    "--behavior", "-b",
    envvar="PKGRESOLVE_BEHAVIOR",
    default=DependencyBehavior.LOWEST.value,
    show_default=True,
    callback=_parse_behavior,
    help=f"Version selection policy, one of {', '.join(BEHAVIOR_CHOICES)} "
    "(env: PKGRESOLVE_BEHAVIOR).",
)
@click.option(
    "--installed", "-i",
    multiple=True,
    help="Already installed package as id@version (repeatable).",
)
@click.option(
    "--ignore-catalog-installed",
    is_flag=True,
    help="Do not treat the catalog's 'installed' section as installed.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON.")
def resolve_command(
    catalog: str,
    targets: tuple[str, ...],
    behavior: DependencyBehavior,
    installed: tuple[str, ...],
    ignore_catalog_installed: bool,
    as_json: bool,
) -> None:
    """Resolve TARGETS against the packages listed in CATALOG.

    CATALOG is a YAML or JSON file. Each target is a package id, or
    id@version to require that exact catalog version. The plan is printed
    with dependencies first.

    Exit code 0 on success, 1 if no solution exists, 2 on invalid input.
    """
    data = _load(catalog)
    target_list = _parse_identities(targets, require_version=False)
    installed_list = _parse_identities(installed, require_version=True)
    if not ignore_catalog_installed:
        installed_list = _merge_targets(installed_list, data.installed)

    packages = _pin_targets(data.packages, target_list)

    resolver = PackageResolver(behavior)
    try:
        solution = resolver.resolve(
            _merge_targets(target_list, installed_list),
            packages,
            installed_list,
        )
    except ResolverInputError as exc:
        print_failure("Invalid input", str(exc))
        sys.exit(2)
    except ResolutionError as exc:
        print_failure("Resolution failed", str(exc))
        sys.exit(1)

    if as_json:
        click.echo(solution_to_json(solution, behavior))
    else:
        print_resolution(solution, behavior, installed_list)
    sys.exit(0)


@click.command("versions")
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.argument("package_id")
def versions_command(catalog: str, package_id: str) -> None:
    """List the versions of PACKAGE_ID available in CATALOG, newest first."""
    data = _load(catalog)
    print_versions(package_id, data.versions_of(package_id))
