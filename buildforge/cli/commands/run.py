"""``buildforge run [TARGET]``: run a target and its prerequisites.

Resolves the build version, binds the standard pipeline to it, runs the
requested target (``CompleteBuild`` by default) and prints the build time
report.
"""

from __future__ import annotations

from pathlib import Path

import typer

from buildforge.cli.common import (
    configure_logging,
    console,
    load_settings,
    make_invoker,
    reported_errors,
)
from buildforge.core.target_runner import TargetRunner
from buildforge.core.tool_invoker import SubprocessInvoker
from buildforge.core.version_resolver import resolve_from_settings
from buildforge.monitor.renderer import BuildRenderer
from buildforge.pipeline import DEFAULT_TARGET, build_pipeline
from buildforge.tasks.context import BuildContext


def run_cmd(
    target: str = typer.Argument(
        DEFAULT_TARGET,
        help="The target to run.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Record tool invocations and leave files untouched.",
    ),
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
    configuration: str = typer.Option(
        None,
        "--configuration",
        "-c",
        help="Configuration used to locate test assemblies.",
    ),
    sign_key: Path = typer.Option(
        None,
        "--sign-key",
        help="Strong-name key file passed to MSBuild.",
    ),
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        help="Repository root.",
    ),
) -> None:
    """Run TARGET after all of its prerequisites.

    Exits with code 1 if the version cannot be resolved, the target is
    unknown, the graph has a cycle, or any target fails.
    """
    settings = load_settings(
        build_version=build_version,
        build_number=build_number,
        configuration=configuration,
        sign_key=sign_key,
    )
    configure_logging(settings)
    renderer = BuildRenderer(console=console, secrets=settings.secrets())

    with reported_errors(settings):
        # Reject an unknown target or a cycle before touching git.
        TargetRunner(build_pipeline()).plan(target)
        invoker = make_invoker(settings, root, dry_run=dry_run)
        # git describe is read-only, so it runs for real even in a dry run.
        version = resolve_from_settings(settings, SubprocessInvoker(root))
        renderer.print_version(version)

        context = BuildContext(
            settings=settings,
            version=version,
            invoker=invoker,
            root=root,
            dry_run=dry_run,
        )
        runner = TargetRunner(build_pipeline(context))
        result = runner.run(target)

        console.print()
        renderer.print_result(result)
        result.raise_for_failure()
