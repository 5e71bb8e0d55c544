"""``buildforge version``: print the resolved build version."""

from __future__ import annotations

from pathlib import Path

import typer

from buildforge.cli.common import configure_logging, console, load_settings, reported_errors
from buildforge.core.tool_invoker import SubprocessInvoker
from buildforge.core.version_resolver import resolve_from_settings
from buildforge.monitor.renderer import BuildRenderer


def version_cmd(
    build_version: str = typer.Option(
        None,
        "--build-version",
        help="'git' or an explicit assembly version.",
    ),
    build_number: int = typer.Option(
        None,
        "--build-number",
        min=0,
        help="Fourth component of the file version.",
    ),
    nuget_only: bool = typer.Option(
        False,
        "--nuget",
        help="Print only the NuGet version, for scripting.",
    ),
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        help="Repository root.",
    ),
) -> None:
    """Resolve and print the four build version strings."""
    settings = load_settings(build_version=build_version, build_number=build_number)
    configure_logging(settings)

    with reported_errors(settings):
        version = resolve_from_settings(settings, SubprocessInvoker(root))

    if nuget_only:
        console.print(version.nuget_version, highlight=False)
        return
    BuildRenderer(console=console).print_version(version)
