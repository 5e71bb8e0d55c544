"""Shared CLI plumbing: settings, logging, invokers and error reporting."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from buildforge.config import BuildSettings
from buildforge.core.redaction import RedactingFilter, redact
from buildforge.core.target_graph import CyclicDependencyError, UnknownTargetError
from buildforge.core.target_runner import TargetFailure
from buildforge.core.tool_invoker import (
    DryRunInvoker,
    SubprocessInvoker,
    ToolInvocationError,
    ToolInvoker,
)
from buildforge.core.version_resolver import VersionFormatError

console = Console()

# Error kinds that end a build with exit code 1 and a one-line message.
BUILD_ERRORS: tuple[type[Exception], ...] = (
    VersionFormatError,
    UnknownTargetError,
    CyclicDependencyError,
    TargetFailure,
    ToolInvocationError,
)


def load_settings(**overrides: Any) -> BuildSettings:
    """Create settings from env/.env, with non-None CLI *overrides* on top.

    Invalid settings print one red line per error and exit with code 1.
    Input values are never echoed.
    """
    try:
        return BuildSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        for error in exc.errors(include_input=False):
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            console.print(
                f"[bold red]Invalid setting {escape(field)}:[/bold red] {escape(error['msg'])}",
                highlight=False,
            )
        raise typer.Exit(code=1) from None


def configure_logging(settings: BuildSettings) -> RedactingFilter:
    """Route logging through Rich with secrets scrubbed; returns the filter."""
    redactor = RedactingFilter(settings.secrets())
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=settings.debug,
        markup=False,
    )
    handler.addFilter(redactor)
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    return redactor


def make_invoker(settings: BuildSettings, root: Path, *, dry_run: bool) -> ToolInvoker:
    if dry_run:
        return DryRunInvoker(secrets=settings.secrets())
    return SubprocessInvoker(root, secrets=settings.secrets())


@contextmanager
def reported_errors(settings: BuildSettings) -> Iterator[None]:
    """Turn build errors into a red message and exit code 1."""
    try:
        yield
    except BUILD_ERRORS as exc:
        message = redact(str(exc), settings.secrets())
        console.print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(message)}", highlight=False)
        raise typer.Exit(code=1) from None
