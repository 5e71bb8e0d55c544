"""Version resolution: derives the build's VersionDescriptor.

Two modes:

- ``"git"``: ask ``git describe --tags --long --match=v*`` for the nearest
  ``v*`` tag and derive all four version strings from it.
- anything else: the mode string *is* the assembly version, and the other
  three strings come from explicit overrides (defaulting to it).

Examples of ``git describe`` output::

    v3.50.2-288-g64fd5c5b          release tag, 288 commits since
    v3.50.2-alpha1-288-g64fd5c5b   pre-release tag, 288 commits since
    v3.50.2-0-g64fd5c5b            HEAD is exactly on the tag

and the NuGet versions they produce: ``3.50.2.288``, ``3.50.2-alpha1.288``
and ``3.50.2``.  Appending the commit count keeps an untagged build's
version greater than the tag it descends from.
"""

from __future__ import annotations

import logging
import re

from buildforge.config import GIT_VERSION_MODE, BuildSettings
from buildforge.core.tool_invoker import ToolInvoker
from buildforge.models.versioning import VersionDescriptor, VersionOverrides

logger = logging.getLogger(__name__)

DESCRIBE_ARGS: list[str] = ["describe", "--tags", "--long", "--match=v*"]

_DESCRIBE_RE = re.compile(
    r"^v(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?P<pre>-[0-9A-Za-z]+)?"
    r"-(?P<commits>\d+)-g(?P<sha>[0-9a-f]+)$"
)


class VersionFormatError(ValueError):
    """Raised when ``git describe`` output does not match the tag grammar."""


def parse_describe(description: str, build_number: int = 0) -> VersionDescriptor:
    """Derive a VersionDescriptor from ``git describe --long`` output.

    Raises ``VersionFormatError`` if *description* does not match
    ``v<maj>.<min>.<patch>[-<pre>]-<commits>-g<sha>``.
    """
    if build_number < 0:
        raise ValueError(f"Build number must be non-negative, got {build_number}")

    match = _DESCRIBE_RE.match(description.strip())
    if match is None:
        raise VersionFormatError(
            f"Cannot derive a version from {description.strip()!r}: expected "
            "'v<major>.<minor>.<patch>[-<prerelease>]-<commits>-g<sha>'."
        )

    major, minor, patch = (int(match[k]) for k in ("major", "minor", "patch"))
    pre = match["pre"] or ""
    commits = int(match["commits"])
    sha = match["sha"]

    base = f"{major}.{minor}.{patch}"
    if commits == 0:
        nuget_version = f"{base}{pre}"
        info_version = nuget_version
    else:
        nuget_version = f"{base}{pre}.{commits}"
        info_version = f"{nuget_version}-{sha}"

    return VersionDescriptor(
        assembly_version=f"{base}.0",
        file_version=f"{base}.{build_number}",
        info_version=info_version,
        nuget_version=nuget_version,
    )


def describe_head(invoker: ToolInvoker, *, git: str = "git") -> str:
    """Return ``git describe`` output for the current working tree."""
    status = invoker.invoke(git, DESCRIBE_ARGS)
    if not status.succeeded:
        raise VersionFormatError(
            f"'{git} {' '.join(DESCRIBE_ARGS)}' failed (exit={status.code}); "
            "is there a 'v*' tag reachable from HEAD?"
        )
    return status.output.strip()


def resolve(
    mode: str,
    overrides: VersionOverrides | None = None,
    build_number: int = 0,
    invoker: ToolInvoker | None = None,
    *,
    git: str = "git",
) -> VersionDescriptor:
    """Resolve the build version.

    Parameters
    ----------
    mode:
        ``"git"`` to derive from the nearest tag, otherwise the explicit
        assembly version.
    overrides:
        Explicit file/info/nuget versions (explicit mode only).
    build_number:
        Fourth component of the file version (git mode only).
    invoker:
        Tool invoker used for ``git describe``.  Required in git mode.
    """
    if mode == GIT_VERSION_MODE:
        if invoker is None:
            raise ValueError("A tool invoker is required to resolve the version from git")
        description = describe_head(invoker, git=git)
        version = parse_describe(description, build_number)
        logger.info("Resolved version from %r: %s", description, version.nuget_version)
        return version

    if not mode:
        raise VersionFormatError("Explicit build version must not be empty")

    overrides = overrides or VersionOverrides()
    version = VersionDescriptor(
        assembly_version=mode,
        file_version=overrides.file_version or mode,
        info_version=overrides.info_version or mode,
        nuget_version=overrides.nuget_version or mode,
    )
    logger.info("Using explicit version: %s", version.assembly_version)
    return version


def resolve_from_settings(settings: BuildSettings, invoker: ToolInvoker) -> VersionDescriptor:
    """Resolve the version described by a ``BuildSettings`` instance."""
    return resolve(
        settings.build_version,
        settings.overrides(),
        settings.build_number,
        invoker,
        git=settings.git_path,
    )
