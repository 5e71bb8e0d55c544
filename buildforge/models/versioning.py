"""Version models: the four version strings stamped onto build artifacts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VersionDescriptor(BaseModel):
    """The resolved version of a build.

    All four strings derive from the same ``major.minor.patch`` triple.
    Resolved once per invocation and shared read-only by every target.
    """

    model_config = ConfigDict(frozen=True)

    assembly_version: str  # major.minor.patch.0
    file_version: str  # major.minor.patch.build
    info_version: str  # may carry pre-release, commit count and short hash
    nuget_version: str  # may carry pre-release and commit count


class VersionOverrides(BaseModel):
    """Explicit version strings supplied instead of the git tag.

    Unset fields fall back to the assembly version.
    """

    model_config = ConfigDict(frozen=True)

    file_version: str | None = None
    info_version: str | None = None
    nuget_version: str | None = None
