"""Pluggable tool invocation backends.

Defines the ``ToolInvoker`` Protocol that every external tool call (git,
MSBuild, test runners, NuGet) goes through, along with two implementations:

1. **SubprocessInvoker**: spawns the real process via ``subprocess.run``.
2. **DryRunInvoker**: records calls and reports success without spawning
   anything.  Used by ``--dry-run`` and by the test suite.

Both implementations only report an exit status; turning a non-zero status
into an exception is the caller's decision (see ``check_invoke``).
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from buildforge.core.redaction import redact

logger = logging.getLogger(__name__)

# Conventional shell status for "command not found".
EXIT_NOT_FOUND = 127


class ToolInvocationError(RuntimeError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, message: str, *, command: str = "", code: int = 1) -> None:
        super().__init__(message)
        self.command = command
        self.code = code


class ExitStatus(BaseModel):
    """Terminal status of one tool invocation."""

    model_config = ConfigDict(frozen=True)

    command: str
    code: int = 0
    output: str = ""

    @property
    def succeeded(self) -> bool:
        return self.code == 0


class ToolCall(BaseModel):
    """A single recorded invocation (see ``DryRunInvoker``)."""

    model_config = ConfigDict(frozen=True)

    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class ToolInvoker(Protocol):
    """Protocol for external tool execution backends.

    Any object with an ``invoke(command, args, env) -> ExitStatus`` method
    satisfies this protocol.
    """

    def invoke(
        self,
        command: str,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> ExitStatus:
        """Run *command* with *args* and return its exit status."""
        ...


def format_command(command: str, args: Sequence[str]) -> str:
    """Render a command line for logs and error messages."""
    return shlex.join([command, *args])


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


class SubprocessInvoker:
    """Invoker that runs real processes.

    Parameters
    ----------
    cwd:
        Working directory for every process.  Defaults to the current one.
    timeout:
        Optional per-call timeout in seconds, enforced by ``subprocess``.
    secrets:
        Values scrubbed from logged command lines and captured output.
    """

    def __init__(
        self,
        cwd: Path | None = None,
        *,
        timeout: float | None = None,
        secrets: Iterable[str] = (),
    ) -> None:
        self.cwd = cwd
        self.timeout = timeout
        self._secrets = [s for s in secrets if s]

    def invoke(
        self,
        command: str,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> ExitStatus:
        shown = redact(format_command(command, args), self._secrets)
        logger.info("> %s", shown)

        proc_env = None
        if env:
            proc_env = os.environ.copy()
            proc_env.update(env)

        try:
            proc = subprocess.run(
                [command, *args],
                cwd=self.cwd,
                env=proc_env,
                text=True,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.error("Tool not found: %s", command)
            return ExitStatus(
                command=shown,
                code=EXIT_NOT_FOUND,
                output=f"{command}: command not found",
            )

        output = redact((proc.stdout or "") + (proc.stderr or ""), self._secrets)
        for line in output.splitlines():
            logger.debug("  %s", line)
        return ExitStatus(command=shown, code=proc.returncode, output=output)


class DryRunInvoker:
    """Invoker that records calls instead of spawning processes.

    Parameters
    ----------
    outputs:
        Canned stdout per command name (e.g. ``{"git": "v1.2.3-0-gabc"}``).
    failing:
        Command names that should report exit code 1.
    secrets:
        Values masked in the logged command line and in
        ``ExitStatus.command``.  Recorded ``calls`` keep the real arguments.
    """

    def __init__(
        self,
        outputs: Mapping[str, str] | None = None,
        *,
        failing: Iterable[str] = (),
        secrets: Iterable[str] = (),
    ) -> None:
        self.outputs: dict[str, str] = dict(outputs or {})
        self.failing: set[str] = set(failing)
        self.calls: list[ToolCall] = []
        self._secrets = [s for s in secrets if s]

    def invoke(
        self,
        command: str,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> ExitStatus:
        self.calls.append(ToolCall(command=command, args=list(args), env=dict(env or {})))
        code = 1 if command in self.failing else 0
        shown = redact(format_command(command, args), self._secrets)
        logger.debug("[dry-run] %s (exit=%d)", shown, code)
        return ExitStatus(
            command=shown,
            code=code,
            output=self.outputs.get(command, ""),
        )

    def commands(self) -> list[str]:
        """Return the recorded command names in call order."""
        return [c.command for c in self.calls]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def check_invoke(
    invoker: ToolInvoker,
    command: str,
    args: Sequence[str],
    env: Mapping[str, str] | None = None,
    *,
    secrets: Iterable[str] = (),
) -> ExitStatus:
    """Invoke a tool and raise ``ToolInvocationError`` on non-zero exit.

    The error message contains the command line and the tail of the tool
    output, both with *secrets* redacted.
    """
    status = invoker.invoke(command, args, env)
    if status.succeeded:
        return status

    secrets = [s for s in secrets if s]
    shown = redact(format_command(command, args), secrets)
    tail = redact(status.output.strip()[-2000:], secrets)
    message = f"{shown} failed (exit={status.code})"
    if tail:
        message = f"{message}\n{tail}"
    raise ToolInvocationError(message, command=command, code=status.code)
