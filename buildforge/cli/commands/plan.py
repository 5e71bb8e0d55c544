"""``buildforge plan TARGET``: show the execution plan without running it."""

from __future__ import annotations

import typer

from buildforge.cli.common import console, load_settings, reported_errors
from buildforge.core.target_runner import TargetRunner
from buildforge.monitor.renderer import BuildRenderer
from buildforge.pipeline import DEFAULT_TARGET, build_pipeline


def plan_cmd(
    target: str = typer.Argument(
        DEFAULT_TARGET,
        help="The target to plan.",
    ),
) -> None:
    """Print the ordered list of targets that running TARGET would execute."""
    settings = load_settings()
    with reported_errors(settings):
        plan = TargetRunner(build_pipeline()).plan(target)
    BuildRenderer(console=console).print_plan(target, plan)
