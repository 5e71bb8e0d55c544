"""MSBuild invocation with version-stamped properties."""

from __future__ import annotations

import logging

from buildforge.core.tool_invoker import check_invoke
from buildforge.tasks.context import BuildContext

logger = logging.getLogger(__name__)


def build_properties(context: BuildContext, configuration: str) -> dict[str, str]:
    """Return the MSBuild property map for *configuration*.

    ``AssemblyOriginatorKeyFile`` is only present when a signing key is
    configured; the key path is made absolute.
    """
    properties: dict[str, str] = {}
    sign_key = context.settings.sign_key
    if sign_key is not None:
        properties["AssemblyOriginatorKeyFile"] = str(context.path(sign_key).resolve())

    properties.update({
        "Configuration": configuration,
        "AssemblyVersion": context.version.assembly_version,
        "FileVersion": context.version.file_version,
        "InformationalVersion": context.version.info_version,
    })
    return properties


def msbuild(context: BuildContext, target: str, configuration: str) -> None:
    """Run MSBuild *target* (``Clean``, ``Rebuild``) on the solution."""
    properties = build_properties(context, configuration)
    args = [
        str(context.path(context.settings.solution)),
        f"/t:{target}",
        *(f"/p:{name}={value}" for name, value in properties.items()),
    ]
    logger.info("MSBuild %s (%s)", target, configuration)
    check_invoke(context.invoker, context.settings.msbuild_path, args, secrets=context.secrets)


def clean(context: BuildContext, configuration: str) -> None:
    msbuild(context, "Clean", configuration)


def rebuild(context: BuildContext, configuration: str) -> None:
    msbuild(context, "Rebuild", configuration)
