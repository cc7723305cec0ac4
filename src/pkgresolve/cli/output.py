"""Rich output formatting helpers for the pkgresolve CLI."""

from __future__ import annotations

import json
from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pkgresolve.core.identity import PackageIdentity
from pkgresolve.core.resolver import DependencyBehavior
from pkgresolve.core.versioning import SemanticVersion

console = Console()


def print_resolution(
    solution: Sequence[PackageIdentity],
    behavior: DependencyBehavior,
    installed: Sequence[PackageIdentity] = (),
) -> None:
    """Print the install plan as a table, dependencies first.

    Args:
        solution: Resolved identities in install order.
        behavior: Policy the plan was resolved with.
        installed: Packages that were already installed, marked in the table.
    """
    console.print(
        Panel(
            f"[bold green]Resolution successful[/bold green] ({behavior.value})",
            title="Dependency Resolution",
        )
    )
    if not solution:
        console.print("[dim]No packages to install.[/dim]")
        return

    installed_set = set(installed)
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Package", style="bold")
    table.add_column("Version")
    table.add_column("Status", justify="center")
    for position, identity in enumerate(solution, start=1):
        status = "[dim]installed[/dim]" if identity in installed_set else "[green]install[/green]"
        table.add_row(str(position), identity.id, str(identity.version), status)
    console.print(table)


def print_failure(title: str, message: str) -> None:
    """Print a resolution or input failure."""
    console.print(Panel(f"[bold red]{title}[/bold red]", title="Dependency Resolution"))
    console.print(f"  [red]- {message}[/red]")


def print_versions(package_id: str, versions: Sequence[SemanticVersion]) -> None:
    if not versions:
        console.print(f"[dim]No versions of {package_id} in the catalog.[/dim]")
        return
    table = Table(title=package_id, show_header=True)
    table.add_column("Version")
    for version in versions:
        table.add_row(str(version))
    console.print(table)


def solution_to_json(
    solution: Sequence[PackageIdentity], behavior: DependencyBehavior
) -> str:
    """Serialize an install plan deterministically."""
    payload = {
        "behavior": behavior.value,
        "packages": [
            {"id": identity.id, "version": str(identity.version)} for identity in solution
        ],
    }
    return json.dumps(payload, indent=2)
