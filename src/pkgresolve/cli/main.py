"""pkgresolve CLI: resolve package dependencies from a catalog file.

Entry point for the ``pkgresolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve  - Resolve targets against a catalog and print the install order.
    versions - List the versions of one package in a catalog.

Usage::

    pkgresolve resolve catalog.yaml A
    pkgresolve resolve catalog.yaml A --behavior highest-minor --json
    pkgresolve resolve catalog.yaml A B --installed B@1.0
    pkgresolve versions catalog.yaml B
"""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from pkgresolve import __version__
from pkgresolve.cli.resolve_cmd import resolve_command, versions_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """pkgresolve: Dependency resolution for package installations.

    Picks one version per package so that every dependency range is
    satisfied, following a configurable version selection policy.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(versions_command)
