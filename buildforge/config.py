"""Build configuration: env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
BUILDFORGE_* environment variables; CLI options override individual fields.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from buildforge.models.versioning import VersionOverrides

GIT_VERSION_MODE = "git"


class BuildSettings(BaseSettings):
    """Build configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BUILDFORGE_BUILD_VERSION=3.50.2
        export BUILDFORGE_BUILD_NUMBER=288
        export BUILDFORGE_PARALLELIZE_TESTS=true

    Or via .env file::

        BUILDFORGE_CONFIGURATION=Release
        BUILDFORGE_NUGET_PRIVATE_KEY=...

    Never name a version setting plain ``VERSION``: MSBuild picks up
    environment variables as properties and a ``Version`` property breaks
    NuGet restore.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Versioning
    build_version: str = GIT_VERSION_MODE  # "git" or an explicit assembly version
    build_number: int = Field(default=0, ge=0)
    build_file_version: str | None = None
    build_info_version: str | None = None
    build_nuget_version: str | None = None

    # Compilation
    configuration: str = "Release"
    sign_key: Path | None = None
    solution: Path = Path("Src/All.sln")

    # Tests
    parallelize_tests: bool = False
    max_parallel_threads: int = Field(default=0, ge=0)  # 0 = runner default

    # Packaging and publishing
    release_folder: Path = Path("Release")
    nuget_output_folder: Path = Path("NuGetPackages")
    nuspec_glob: str = "NuGet/*.nuspec"
    public_feed: str = "https://www.nuget.org/api/v2/package"
    private_feed: str = "https://www.myget.org/F/autofixture/api/v2/package"
    private_symbol_feed: str = "https://www.myget.org/F/autofixture/symbols/api/v2/package"
    nuget_public_key: str = ""
    nuget_private_key: str = ""

    # Tool executables
    git_path: str = "git"
    msbuild_path: str = "msbuild"
    nuget_path: str = "nuget"
    xunit_path: str = "xunit.console"
    nunit2_path: str = "nunit-console"
    nunit3_path: str = "nunit3-console"

    # Observability
    log_level: str = "INFO"
    debug: bool = False

    def overrides(self) -> VersionOverrides:
        """Return the explicit version overrides for the resolver."""
        return VersionOverrides(
            file_version=self.build_file_version,
            info_version=self.build_info_version,
            nuget_version=self.build_nuget_version,
        )

    def secrets(self) -> list[str]:
        """Return configured secret values that must never be logged."""
        return [s for s in (self.nuget_public_key, self.nuget_private_key) if s]
