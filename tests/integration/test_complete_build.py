"""Integration test: the standard pipeline end to end against a fake repository.

Lays out the files a real checkout would have after compilation, then runs
``CompleteBuild`` and the publish targets with a recording invoker.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from buildforge.core.target_runner import TargetRunner
from buildforge.pipeline import build_pipeline, release_files
from buildforge.tasks.context import BuildContext

ASSEMBLY_INFO = '[assembly: AssemblyVersion("0.0.0.0")]\n'


@pytest.fixture
def repo(tmp_path: Path, touch: Callable[..., Path]) -> Path:
    for relative in release_files():
        touch(tmp_path / relative, "binary")
    touch(tmp_path / "NuGet/AutoFixture.nuspec", "<package/>")
    touch(tmp_path / "NuGet/install.ps1", "# script")
    touch(tmp_path / "Src/AutoFixture/Properties/AssemblyInfo.cs", ASSEMBLY_INFO)
    touch(tmp_path / "Src/AutoFixtureUnitTest/bin/Release/Ploeh.AutoFixtureUnitTest.dll")
    touch(
        tmp_path
        / "Src/AutoFixture.NUnit2.UnitTest/bin/Release/Ploeh.AutoFixture.NUnit2.UnitTest.dll"
    )
    touch(
        tmp_path
        / "Src/AutoFixture.NUnit3.UnitTest/bin/Release/Ploeh.AutoFixture.NUnit3.UnitTest.dll"
    )
    touch(tmp_path / "Release/stale.txt", "left over")
    return tmp_path


class TestCompleteBuild:
    def test_complete_build(self, repo: Path, context: BuildContext, invoker):
        result = TargetRunner(build_pipeline(context)).run("CompleteBuild")
        assert result.succeeded, result.failure

        # Tools run in dependency order.
        assert invoker.commands() == [
            "msbuild",  # CleanVerify
            "msbuild",  # CleanRelease
            "msbuild",  # Verify
            "msbuild",  # BuildOnly
            "xunit.console",
            "nunit-console",
            "nunit3-console",
            "nuget",  # NuGetPack
        ]
        msbuild_targets = [c.args[1] for c in invoker.calls[:4]]
        assert msbuild_targets == ["/t:Clean", "/t:Clean", "/t:Rebuild", "/t:Rebuild"]
        assert "/p:Configuration=Verify" in invoker.calls[2].args

        # xUnit excludes the NUnit test projects.
        xunit_args = invoker.calls[4].args
        assert any(a.endswith("Ploeh.AutoFixtureUnitTest.dll") for a in xunit_args)
        assert not any("NUnit" in a for a in xunit_args)

        # Versions are stamped and the release folder is rebuilt.
        info = (repo / "Src/AutoFixture/Properties/AssemblyInfo.cs").read_text(encoding="utf-8")
        assert 'AssemblyVersion("3.50.2.0")' in info
        release = repo / "Release"
        assert not (release / "stale.txt").exists()
        assert (release / "Ploeh.AutoFixture.dll").is_file()
        assert (release / "install.ps1").is_file()

        pack_args = invoker.calls[-1].args
        assert pack_args[pack_args.index("-Version") + 1] == "3.50.2.288"

    def test_missing_release_file_stops_before_packing(
        self, repo: Path, context: BuildContext, invoker
    ):
        (repo / release_files()[0]).unlink()
        result = TargetRunner(build_pipeline(context)).run("CompleteBuild")
        assert not result.succeeded
        assert result.failure.target_name == "CopyToReleaseFolder"
        assert "nuget" not in invoker.commands()
        assert "NuGetPack" not in result.executed


class TestPublish:
    def test_publish_private_pushes_with_symbols(
        self, repo: Path, context: BuildContext, invoker, touch
    ):
        packages = repo / "NuGetPackages"
        touch(packages / "AutoFixture.3.50.2.nupkg")
        touch(packages / "AutoFixture.3.50.2.symbols.nupkg")
        touch(packages / "AutoFixture.AutoFakeItEasy2.3.50.2.nupkg")

        result = TargetRunner(build_pipeline(context)).run("PublishNuGetPrivateOnly")
        assert result.succeeded, result.failure

        assert len(invoker.calls) == 1
        args = invoker.calls[0].args
        assert args[:3] == ["push", str(packages / "AutoFixture.3.50.2.nupkg"), "private-secret-key"]
        assert "-SymbolSource" in args

    def test_publish_logs_never_contain_keys(
        self, repo: Path, context: BuildContext, touch, caplog
    ):
        touch(repo / "NuGetPackages/AutoFixture.3.50.2.nupkg")
        with caplog.at_level(logging.DEBUG):
            result = TargetRunner(build_pipeline(context)).run("PublishNuGetPublicOnly")
        assert result.succeeded
        assert "Pushing AutoFixture.3.50.2.nupkg" in caplog.text
        assert "public-secret-key" not in caplog.text

    def test_publish_without_key_fails(self, repo: Path, context: BuildContext, touch):
        touch(repo / "NuGetPackages/AutoFixture.3.50.2.nupkg")
        keyless = context.model_copy(
            update={"settings": context.settings.model_copy(update={"nuget_public_key": ""})}
        )
        result = TargetRunner(build_pipeline(keyless)).run("PublishNuGetPublicOnly")
        assert not result.succeeded
        assert "access key" in str(result.failure)
