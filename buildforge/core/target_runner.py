"""Target runner: executes a requested target and its transitive prerequisites.

Enforces:
- Every prerequisite runs before any target that depends on it.
- Each target in the execution plan runs exactly once per run.
- A cycle reachable from the requested target fails before any body runs.
- The first failing body aborts the run; nothing after it executes and
  nothing before it is undone.

Execution is strictly sequential.  Parallelism, where there is any, lives
inside a target body (e.g. the test runner's own worker threads).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Iterator

from buildforge.core.target_graph import CyclicDependencyError, TargetGraph
from buildforge.models.targets import (
    VALID_TRANSITIONS,
    RunResult,
    TargetState,
    TargetTiming,
)

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a target state transition is not valid."""


class TargetFailure(RuntimeError):
    """Raised (or carried by ``RunResult``) when a target body fails.

    Attributes
    ----------
    target_name:
        The target whose body raised.
    cause:
        The underlying exception.
    """

    def __init__(self, target_name: str, cause: BaseException) -> None:
        super().__init__(f"Target '{target_name}' failed: {cause}")
        self.target_name = target_name
        self.cause = cause
        self.__cause__ = cause


class TargetStateArena:
    """Per-traversal target states keyed by name.

    Every name starts ``UNVISITED``; transitions are validated against
    ``VALID_TRANSITIONS``.  A fresh arena is created for every traversal,
    so no state leaks from one run into the next.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self._states: dict[str, TargetState] = {
            name: TargetState.UNVISITED for name in names
        }

    def get(self, name: str) -> TargetState:
        return self._states.get(name, TargetState.UNVISITED)

    def transition(self, name: str, target_state: TargetState) -> None:
        current = self.get(name)
        if target_state not in VALID_TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Cannot transition {name} from {current.value} to {target_state.value}."
            )
        self._states[name] = target_state


class TargetRunner:
    """Runs targets of a ``TargetGraph``.

    Parameters
    ----------
    graph:
        The immutable target graph.
    remember_completed:
        Keep successfully completed targets across ``run()`` calls on this
        runner, so a later request skips them.  Off by default: every
        ``run()`` starts clean.
    clock:
        Monotonic clock used for the timing report.
    """

    def __init__(
        self,
        graph: TargetGraph,
        *,
        remember_completed: bool = False,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._graph = graph
        self._remember_completed = remember_completed
        self._clock = clock
        self._completed: set[str] = set()

    @property
    def graph(self) -> TargetGraph:
        return self._graph

    @property
    def completed(self) -> frozenset[str]:
        """Targets remembered as completed (``remember_completed`` only)."""
        return frozenset(self._completed)

    def reset(self) -> None:
        """Forget remembered completed targets."""
        self._completed.clear()

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self, name: str) -> list[str]:
        """Return the execution plan for *name*.

        Depth-first post-order over prerequisites, visited in declaration
        order.  Each target appears once; *name* is last.

        Raises ``UnknownTargetError`` for an unregistered name and
        ``CyclicDependencyError`` if a cycle is reachable from *name*.
        """
        self._graph.get_target(name)
        arena = TargetStateArena(self._graph.target_names)
        order: list[str] = []

        # Explicit stack of (target, remaining prerequisites); the targets on
        # the stack are exactly the VISITING path.
        arena.transition(name, TargetState.VISITING)
        stack: list[tuple[str, Iterator[str]]] = [
            (name, iter(self._graph.get_prerequisites(name)))
        ]
        while stack:
            node, prereqs = stack[-1]
            prereq = next(prereqs, None)
            if prereq is None:
                stack.pop()
                arena.transition(node, TargetState.DONE)
                order.append(node)
                continue

            state = arena.get(prereq)
            if state == TargetState.DONE:
                continue
            if state == TargetState.VISITING:
                path = [frame[0] for frame in stack]
                cycle = path[path.index(prereq):] + [prereq]
                raise CyclicDependencyError(
                    f"Cyclic dependency: {' -> '.join(cycle)}", cycle=cycle
                )

            arena.transition(prereq, TargetState.VISITING)
            stack.append((prereq, iter(self._graph.get_prerequisites(prereq))))

        return order

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, name: str) -> RunResult:
        """Run *name* after all of its transitive prerequisites.

        Returns a ``RunResult``; a failing body is reported through
        ``RunResult.failure`` rather than raised.  Configuration errors
        (unknown target, cycle) are raised before anything executes.
        """
        plan = self.plan(name)
        logger.info("Running target '%s': %s", name, " -> ".join(plan))

        executed: list[str] = []
        skipped: list[str] = []
        timings: list[TargetTiming] = []

        for target_name in plan:
            if target_name in self._completed:
                logger.info("Skipping '%s' (already completed)", target_name)
                skipped.append(target_name)
                continue

            target = self._graph.get_target(target_name)
            logger.info("Starting target '%s'", target_name)
            started = self._clock()
            try:
                target.body()
            except Exception as exc:
                elapsed = self._clock() - started
                timings.append(TargetTiming(name=target_name, seconds=elapsed))
                logger.error("Target '%s' failed after %.2fs: %s", target_name, elapsed, exc)
                return RunResult(
                    requested=name,
                    plan=plan,
                    executed=executed,
                    skipped=skipped,
                    timings=timings,
                    failure=TargetFailure(target_name, exc),
                )

            elapsed = self._clock() - started
            timings.append(TargetTiming(name=target_name, seconds=elapsed))
            executed.append(target_name)
            if self._remember_completed:
                self._completed.add(target_name)
            logger.info("Finished target '%s' in %.2fs", target_name, elapsed)

        return RunResult(
            requested=name,
            plan=plan,
            executed=executed,
            skipped=skipped,
            timings=timings,
        )
