"""Rich terminal renderer for build plans, versions and run reports.

Color scheme
------------
- green     : target completed
- red       : target failed
- dim       : target skipped or never reached
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from buildforge.core.redaction import redact
from buildforge.core.target_graph import TargetGraph
from buildforge.models.targets import RunResult
from buildforge.models.versioning import VersionDescriptor


class BuildRenderer:
    """Renders build information as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    secrets:
        Values masked in failure messages.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        secrets: Iterable[str] = (),
    ) -> None:
        self.console = console or Console()
        self._secrets = [s for s in secrets if s]

    # ------------------------------------------------------------------
    # Version
    # ------------------------------------------------------------------

    def render_version(self, version: VersionDescriptor) -> Panel:
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="bold")
        table.add_column(style="cyan")
        table.add_row("Assembly", version.assembly_version)
        table.add_row("File", version.file_version)
        table.add_row("Informational", version.info_version)
        table.add_row("NuGet", version.nuget_version)
        return Panel(table, title="[bold]Build Version[/bold]", border_style="cyan")

    def print_version(self, version: VersionDescriptor) -> None:
        self.console.print(self.render_version(version))

    # ------------------------------------------------------------------
    # Graph and plan
    # ------------------------------------------------------------------

    def render_targets(self, graph: TargetGraph) -> Table:
        table = Table(title="Targets")
        table.add_column("Target", style="cyan")
        table.add_column("Prerequisites")
        table.add_column("Description", style="dim")
        for target in graph:
            prereqs = ", ".join(graph.get_prerequisites(target.name)) or "-"
            table.add_row(target.name, prereqs, target.description)
        return table

    def print_targets(self, graph: TargetGraph) -> None:
        self.console.print(self.render_targets(graph))

    def render_plan(self, requested: str, plan: list[str]) -> Panel:
        lines = [f"{i:>2}. {name}" for i, name in enumerate(plan, start=1)]
        body = Text("\n".join(lines))
        return Panel(
            body,
            title=f"[bold]Execution plan for {requested}[/bold]",
            border_style="blue",
        )

    def print_plan(self, requested: str, plan: list[str]) -> None:
        self.console.print(self.render_plan(requested, plan))

    # ------------------------------------------------------------------
    # Run report
    # ------------------------------------------------------------------

    def render_result(self, result: RunResult) -> Panel:
        """Render the build time report for a finished run."""
        durations = {t.name: t.seconds for t in result.timings}
        failed = getattr(result.failure, "target_name", None)

        table = Table(expand=True)
        table.add_column("Target", style="bold")
        table.add_column("Duration", justify="right")
        table.add_column("Status", justify="center")

        for name in result.plan:
            if name in result.executed:
                status = "[green]OK[/green]"
            elif name == failed:
                status = "[bold red]FAILED[/bold red]"
            elif name in result.skipped:
                status = "[dim]skipped[/dim]"
            else:
                status = "[dim]not run[/dim]"
            duration = f"{durations[name]:.2f}s" if name in durations else "-"
            table.add_row(name, duration, status)

        table.add_section()
        table.add_row("Total", f"{result.total_seconds:.2f}s", "")

        if result.succeeded:
            summary = Text.from_markup("[bold green]Status: Ok[/bold green]")
            border = "green"
        else:
            message = redact(str(result.failure), self._secrets)
            summary = Text(f"Status: Failure\n{message}", style="bold red")
            border = "red"

        return Panel(
            Group(table, Text(""), summary),
            title="[bold]Build Time Report[/bold]",
            border_style=border,
            padding=(1, 2),
        )

    def print_result(self, result: RunResult) -> None:
        self.console.print(self.render_result(result))
