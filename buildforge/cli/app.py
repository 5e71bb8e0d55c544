"""Main Typer application: imports and registers all CLI commands.

Entry point: ``buildforge`` (configured via pyproject.toml project.scripts).

Commands: run, plan, targets, version.
"""

from __future__ import annotations

import typer

from buildforge.cli.commands.plan import plan_cmd
from buildforge.cli.commands.run import run_cmd
from buildforge.cli.commands.version import version_cmd

app = typer.Typer(
    name="buildforge",
    help="Buildforge: target-graph build pipeline with git-derived versioning.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="run", help="Run a target and its prerequisites.")(run_cmd)
app.command(name="plan", help="Show the execution plan for a target.")(plan_cmd)
app.command(name="version", help="Print the resolved build version.")(version_cmd)


@app.command(name="targets", help="List registered targets.")
def targets_cmd() -> None:
    """List every target with its direct prerequisites."""
    from buildforge.cli.common import console
    from buildforge.monitor.renderer import BuildRenderer
    from buildforge.pipeline import build_pipeline

    BuildRenderer(console=console).print_targets(build_pipeline())


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
