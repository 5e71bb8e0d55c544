"""Build context shared by all target bodies."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from buildforge.config import BuildSettings
from buildforge.core.tool_invoker import ToolInvoker
from buildforge.models.versioning import VersionDescriptor


class BuildContext(BaseModel):
    """Everything a target body needs: settings, version, tools, root.

    Created once after the version is resolved; read-only afterwards.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    settings: BuildSettings
    version: VersionDescriptor
    invoker: ToolInvoker
    root: Path = Path(".")
    # Tools go through the invoker; file-touching bodies check this flag.
    dry_run: bool = False

    def path(self, relative: Path | str) -> Path:
        """Resolve a repository-relative path against the build root."""
        candidate = Path(relative)
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    @property
    def secrets(self) -> list[str]:
        return self.settings.secrets()
