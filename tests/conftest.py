"""Shared test fixtures for Buildforge."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from buildforge.config import BuildSettings
from buildforge.core.target_graph import TargetGraph
from buildforge.core.tool_invoker import DryRunInvoker
from buildforge.models.targets import Target
from buildforge.models.versioning import VersionDescriptor
from buildforge.tasks.context import BuildContext


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep BUILDFORGE_* variables and any .env file out of every test."""
    for key in list(os.environ):
        if key.startswith("BUILDFORGE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def invoker(settings: BuildSettings) -> DryRunInvoker:
    """Provide a recording invoker that never spawns processes."""
    return DryRunInvoker(secrets=settings.secrets())


@pytest.fixture
def version() -> VersionDescriptor:
    return VersionDescriptor(
        assembly_version="3.50.2.0",
        file_version="3.50.2.7",
        info_version="3.50.2.288-64fd5c5b",
        nuget_version="3.50.2.288",
    )


@pytest.fixture
def settings() -> BuildSettings:
    return BuildSettings(
        _env_file=None,
        build_version="3.50.2",
        nuget_public_key="public-secret-key",
        nuget_private_key="private-secret-key",
    )


@pytest.fixture
def context(
    settings: BuildSettings,
    version: VersionDescriptor,
    invoker: DryRunInvoker,
    tmp_path: Path,
) -> BuildContext:
    """Provide a BuildContext rooted at a temp directory."""
    return BuildContext(settings=settings, version=version, invoker=invoker, root=tmp_path)


@pytest.fixture
def calls() -> list[str]:
    """Shared log that recording target bodies append to."""
    return []


@pytest.fixture
def make_target(calls: list[str]) -> Callable[..., Target]:
    """Factory fixture: a target whose body records its own name."""

    def _factory(name: str, *prerequisites: str) -> Target:
        return Target(
            name=name,
            body=lambda: calls.append(name),
            prerequisites=prerequisites,
        )

    return _factory


@pytest.fixture
def diamond(make_target: Callable[..., Target]) -> TargetGraph:
    """A -> {B, C} -> D: D is reachable through both B and C."""
    return TargetGraph.from_edges(
        [make_target(n) for n in ("A", "B", "C", "D")],
        [("B", "A"), ("C", "A"), ("D", "B"), ("D", "C")],
    )


@pytest.fixture
def touch() -> Callable[[Path, str], Path]:
    """Factory fixture: create a file (and its parents) with some text."""

    def _touch(path: Path, text: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _touch
