"""The standard library build pipeline: clean, verify, build, test, pack, publish.

``build_pipeline(context)`` returns the target graph.  Edges read as
"predecessor ==> target": the predecessor completes first.

    CleanVerify, CleanRelease            ==> CleanAll
    CleanReleaseFolder, CleanAll         ==> Verify
    Verify, PatchAssemblyVersions,
        BuildOnly                        ==> Build
    Build, TestOnly                      ==> Test
    BuildOnly                            ==> TestOnly
    BuildOnly, TestOnly                  ==> BuildAndTestOnly
    Test                                 ==> CopyToReleaseFolder
    CleanNuGetPackages,
        CopyToReleaseFolder              ==> NuGetPack
    NuGetPack                            ==> CompleteBuild
    NuGetPack, PublishNuGetPublicOnly    ==> PublishNuGetPublic
    NuGetPack, PublishNuGetPrivateOnly   ==> PublishNuGetPrivate
    PublishNuGetPublic,
        PublishNuGetPrivate              ==> PublishNuGetAll
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from buildforge.core.target_graph import TargetGraph
from buildforge.models.targets import Target
from buildforge.tasks import assembly_info, msbuild, nuget, testing
from buildforge.tasks.context import BuildContext
from buildforge.tasks.files import clean_dir, copy_files, expand

DEFAULT_TARGET = "CompleteBuild"

PIPELINE_EDGES: list[tuple[str, str]] = [
    ("CleanVerify", "CleanAll"),
    ("CleanRelease", "CleanAll"),
    ("CleanReleaseFolder", "Verify"),
    ("CleanAll", "Verify"),
    ("Verify", "Build"),
    ("PatchAssemblyVersions", "Build"),
    ("BuildOnly", "Build"),
    ("Build", "Test"),
    ("TestOnly", "Test"),
    ("BuildOnly", "TestOnly"),
    ("BuildOnly", "BuildAndTestOnly"),
    ("TestOnly", "BuildAndTestOnly"),
    ("Test", "CopyToReleaseFolder"),
    ("CleanNuGetPackages", "NuGetPack"),
    ("CopyToReleaseFolder", "NuGetPack"),
    ("NuGetPack", "CompleteBuild"),
    ("NuGetPack", "PublishNuGetPublic"),
    ("PublishNuGetPublicOnly", "PublishNuGetPublic"),
    ("NuGetPack", "PublishNuGetPrivate"),
    ("PublishNuGetPrivateOnly", "PublishNuGetPrivate"),
    ("PublishNuGetPublic", "PublishNuGetAll"),
    ("PublishNuGetPrivate", "PublishNuGetAll"),
]

# ---------------------------------------------------------------------------
# Repository layout
# ---------------------------------------------------------------------------

ASSEMBLY_INFO_GLOB = "Src/*/Properties/AssemblyInfo.*"
NUNIT_TOOLS_FOLDER = "Packages/NUnit.Runners.2.6.2/tools"

# (project folder, assembly name) pairs shipped in the release folder.
RELEASE_ASSEMBLIES: list[tuple[str, str]] = [
    ("AutoFixture", "Ploeh.AutoFixture"),
    ("SemanticComparison", "Ploeh.SemanticComparison"),
    ("AutoMoq", "Ploeh.AutoFixture.AutoMoq"),
    ("AutoRhinoMock", "Ploeh.AutoFixture.AutoRhinoMock"),
    ("AutoFakeItEasy", "Ploeh.AutoFixture.AutoFakeItEasy"),
    ("AutoFakeItEasy2", "Ploeh.AutoFixture.AutoFakeItEasy2"),
    ("AutoNSubstitute", "Ploeh.AutoFixture.AutoNSubstitute"),
    ("AutoFoq", "Ploeh.AutoFixture.AutoFoq"),
    ("AutoFixture.xUnit.net", "Ploeh.AutoFixture.Xunit"),
    ("AutoFixture.xUnit.net2", "Ploeh.AutoFixture.Xunit2"),
    ("AutoFixture.NUnit2", "Ploeh.AutoFixture.NUnit2"),
    ("AutoFixture.NUnit2", "Ploeh.AutoFixture.NUnit2.Addins"),
    ("AutoFixture.NUnit3", "Ploeh.AutoFixture.NUnit3"),
    ("Idioms", "Ploeh.AutoFixture.Idioms"),
    ("Idioms.FsCheck", "Ploeh.AutoFixture.Idioms.FsCheck"),
]
RELEASE_EXTENSIONS = ("dll", "pdb", "XML")
NUGET_SCRIPT_GLOBS = ["NuGet/*.ps1", "NuGet/*.txt", "NuGet/*.pp"]

# AutoFakeItEasy2 is deprecated and no longer published.
UNPUBLISHED_PACKAGES = ["AutoFixture.AutoFakeItEasy2.*"]


def release_files() -> list[str]:
    """Return repository-relative paths copied into the release folder."""
    files = [
        f"Src/{project}/bin/Release/{assembly}.{ext}"
        for project, assembly in RELEASE_ASSEMBLIES
        for ext in RELEASE_EXTENSIONS
    ]
    files.append(f"{NUNIT_TOOLS_FOLDER}/lib/nunit.core.interfaces.dll")
    return files


def xunit_assemblies(context: BuildContext, configuration: str) -> list[Path]:
    return expand(
        context.root,
        [f"Src/*Test/bin/{configuration}/*Test.dll"],
        [f"Src/AutoFixture.NUnit*.*Test/bin/{configuration}/*Test.dll"],
    )


def nunit2_assemblies(context: BuildContext, configuration: str) -> list[Path]:
    return expand(context.root, [f"Src/AutoFixture.NUnit2.*Test/bin/{configuration}/*Test.dll"])


def nunit3_assemblies(context: BuildContext, configuration: str) -> list[Path]:
    return expand(
        context.root,
        [
            f"Src/AutoFixture.NUnit3.UnitTest/bin/{configuration}/"
            "Ploeh.AutoFixture.NUnit3.UnitTest.dll"
        ],
    )


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------

TARGET_DESCRIPTIONS: dict[str, str] = {
    "CleanAll": "Clean every build configuration.",
    "CleanVerify": "MSBuild Clean of the Verify configuration.",
    "CleanRelease": "MSBuild Clean of the Release configuration.",
    "CleanReleaseFolder": "Empty the release folder.",
    "Verify": "Rebuild the Verify configuration (code analysis).",
    "PatchAssemblyVersions": "Stamp version attributes into AssemblyInfo files.",
    "BuildOnly": "Rebuild the Release configuration.",
    "TestOnly": "Run the xUnit, NUnit 2 and NUnit 3 test suites.",
    "BuildAndTestOnly": "Build and test without cleaning or verifying.",
    "Build": "Verified, version-stamped release build.",
    "Test": "Full build followed by all tests.",
    "CopyToReleaseFolder": "Copy binaries and NuGet scripts to the release folder.",
    "CleanNuGetPackages": "Empty the NuGet output folder.",
    "NuGetPack": "Pack every nuspec with the NuGet version.",
    "CompleteBuild": "Build, test and pack.",
    "PublishNuGetPublicOnly": "Push packages to the public feed.",
    "PublishNuGetPrivateOnly": "Push packages and symbols to the private feed.",
    "PublishNuGetPublic": "Pack, then publish to the public feed.",
    "PublishNuGetPrivate": "Pack, then publish to the private feed.",
    "PublishNuGetAll": "Publish to both feeds.",
}


def _bind_bodies(context: BuildContext) -> dict[str, Callable[[], None]]:
    """Return target bodies bound to *context*, keyed by target name."""
    settings = context.settings
    release_folder = context.path(settings.release_folder)
    nuget_output = context.path(settings.nuget_output_folder)

    def patch_assembly_versions() -> None:
        files = expand(context.root, [ASSEMBLY_INFO_GLOB])
        assembly_info.patch_files(files, context.version, dry_run=context.dry_run)

    def test_only() -> None:
        configuration = settings.configuration
        testing.run_xunit(context, xunit_assemblies(context, configuration))
        testing.run_nunit2(context, nunit2_assemblies(context, configuration))
        testing.run_nunit3(context, nunit3_assemblies(context, configuration))

    def copy_to_release_folder() -> None:
        sources = [context.path(f) for f in release_files()]
        sources += expand(context.root, NUGET_SCRIPT_GLOBS)
        copy_files(sources, release_folder, dry_run=context.dry_run)

    def nuget_pack() -> None:
        for nuspec in expand(context.root, [settings.nuspec_glob]):
            nuget.pack(context, nuspec, working_dir=release_folder, output_dir=nuget_output)

    def publish_public() -> None:
        nuget.publish_all(
            context,
            nuget.collect_packages(nuget_output, UNPUBLISHED_PACKAGES),
            feed=settings.public_feed,
            access_key=settings.nuget_public_key,
        )

    def publish_private() -> None:
        nuget.publish_all(
            context,
            nuget.collect_packages(nuget_output, UNPUBLISHED_PACKAGES),
            feed=settings.private_feed,
            access_key=settings.nuget_private_key,
            symbol_feed=settings.private_symbol_feed,
        )

    return {
        "CleanVerify": lambda: msbuild.clean(context, "Verify"),
        "CleanRelease": lambda: msbuild.clean(context, "Release"),
        "CleanReleaseFolder": lambda: clean_dir(release_folder, dry_run=context.dry_run),
        "Verify": lambda: msbuild.rebuild(context, "Verify"),
        "PatchAssemblyVersions": patch_assembly_versions,
        "BuildOnly": lambda: msbuild.rebuild(context, "Release"),
        "TestOnly": test_only,
        "CopyToReleaseFolder": copy_to_release_folder,
        "CleanNuGetPackages": lambda: clean_dir(nuget_output, dry_run=context.dry_run),
        "NuGetPack": nuget_pack,
        "PublishNuGetPublicOnly": publish_public,
        "PublishNuGetPrivateOnly": publish_private,
    }


def build_pipeline(context: BuildContext | None = None) -> TargetGraph:
    """Return the standard target graph.

    With a *context*, target bodies invoke the real build steps.  Without
    one, every target is a no-op; useful for listing and planning.
    """
    bodies = _bind_bodies(context) if context is not None else {}
    targets = [
        Target(name=name, body=bodies[name], description=description)
        if name in bodies
        else Target(name=name, description=description)
        for name, description in TARGET_DESCRIPTIONS.items()
    ]
    return TargetGraph.from_edges(targets, PIPELINE_EDGES)
