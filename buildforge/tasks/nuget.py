"""NuGet packing and publishing.

Feed access keys travel on the ``nuget push`` command line.  They are
scrubbed from every logged command and every raised error message.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from buildforge.core.redaction import redact
from buildforge.core.tool_invoker import ToolInvocationError, check_invoke
from buildforge.tasks.context import BuildContext
from buildforge.tasks.files import expand

logger = logging.getLogger(__name__)

# Symbol packages are published together with their main package.
SYMBOL_PACKAGE_GLOB = "*.symbols.nupkg"


def pack(
    context: BuildContext,
    nuspec: Path,
    *,
    working_dir: Path,
    output_dir: Path,
) -> None:
    """Pack *nuspec* with the resolved NuGet version."""
    if not context.dry_run:
        output_dir.mkdir(parents=True, exist_ok=True)
    version = context.version.nuget_version
    args = [
        "pack",
        str(nuspec),
        "-Version",
        version,
        "-BasePath",
        str(working_dir),
        "-OutputDirectory",
        str(output_dir),
        "-Symbols",
    ]
    logger.info("Packing %s (%s)", nuspec.name, version)
    check_invoke(context.invoker, context.settings.nuget_path, args)


def collect_packages(output_dir: Path, excludes: Iterable[str] = ()) -> list[Path]:
    """Return publishable packages in *output_dir*.

    Symbol packages and anything matching *excludes* are left out.
    """
    return expand(output_dir, ["*.nupkg"], [SYMBOL_PACKAGE_GLOB, *excludes])


def push_args(
    package: Path,
    feed: str,
    access_key: str,
    symbol_feed: str = "",
) -> list[str]:
    args = ["push", str(package), access_key, "-Source", feed]
    if symbol_feed:
        args += ["-SymbolSource", symbol_feed, "-SymbolApiKey", access_key]
    return args


def push(
    context: BuildContext,
    package: Path,
    *,
    feed: str,
    access_key: str,
    symbol_feed: str = "",
) -> None:
    """Push *package* (and its symbols when *symbol_feed* is set).

    Raises ``ToolInvocationError`` with the access key redacted.
    """
    if not access_key:
        raise ValueError(f"No access key configured for feed {feed}")

    secrets = [access_key, *context.secrets]
    args = push_args(package, feed, access_key, symbol_feed)
    nuget = context.settings.nuget_path
    logger.info("Pushing %s to %s", package.name, feed)

    try:
        check_invoke(context.invoker, nuget, args, secrets=secrets)
    except ToolInvocationError:
        raise
    except Exception as exc:
        # Errors from the invoker itself (timeouts, OS errors) may echo argv.
        raise ToolInvocationError(
            f"Error during NuGet push. {redact(str(exc), secrets)}",
            command=nuget,
        ) from None


def publish_all(
    context: BuildContext,
    packages: Iterable[Path],
    *,
    feed: str,
    access_key: str,
    symbol_feed: str = "",
) -> int:
    """Push every package; returns the number pushed."""
    count = 0
    for package in packages:
        push(context, package, feed=feed, access_key=access_key, symbol_feed=symbol_feed)
        count += 1
    logger.info("Published %d package(s) to %s", count, feed)
    return count
