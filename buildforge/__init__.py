"""Buildforge: target-graph build pipeline for multi-project .NET libraries.

v0.2.0:
  - Git-tag version resolution (assembly, file, informational, NuGet)
  - Immutable target DAG with exactly-once, dependency-ordered execution
  - Protocol-based tool invocation with a recording dry-run backend
  - MSBuild, xUnit/NUnit and NuGet wrappers with access-key redaction
  - Env-driven config (BUILDFORGE_*), Typer CLI, Rich build time report
"""

__version__ = "0.2.0"
__description__ = "Target-graph build pipeline with git-derived versioning"

from buildforge.core.target_graph import TargetGraph
from buildforge.core.target_runner import TargetRunner
from buildforge.core.version_resolver import resolve
from buildforge.models.targets import RunResult, Target
from buildforge.models.versioning import VersionDescriptor

__all__ = [
    "Target",
    "TargetGraph",
    "TargetRunner",
    "RunResult",
    "VersionDescriptor",
    "resolve",
    "__version__",
]
