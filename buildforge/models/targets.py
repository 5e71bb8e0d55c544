"""Target models: build steps, traversal states and run outcomes."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _noop() -> None:
    return None


class TargetState(str, Enum):
    """Traversal state of a target within a single run."""

    UNVISITED = "unvisited"
    VISITING = "visiting"
    DONE = "done"


# Valid state transitions: enforced by the runner's state arena.
VALID_TRANSITIONS: dict[TargetState, set[TargetState]] = {
    TargetState.UNVISITED: {TargetState.VISITING},
    TargetState.VISITING: {TargetState.DONE},
    TargetState.DONE: set(),  # terminal
}


class Target(BaseModel):
    """A named, idempotent build step.

    ``prerequisites`` lists targets that must complete before this one.
    Targets without a body are aggregation points (e.g. ``CompleteBuild``).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    body: Callable[[], Any] = _noop
    prerequisites: tuple[str, ...] = ()
    description: str = ""


class TargetTiming(BaseModel):
    """Wall-clock duration of one executed target."""

    model_config = ConfigDict(frozen=True)

    name: str
    seconds: float


class RunResult(BaseModel):
    """Outcome of running one requested target.

    ``failure`` is ``None`` on success, otherwise the ``TargetFailure``
    raised by the first failing body.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    requested: str
    plan: list[str] = Field(default_factory=list)
    executed: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    timings: list[TargetTiming] = Field(default_factory=list)
    failure: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def total_seconds(self) -> float:
        return sum(t.seconds for t in self.timings)

    def raise_for_failure(self) -> None:
        """Raise the carried failure, if any."""
        if self.failure is not None:
            raise self.failure
