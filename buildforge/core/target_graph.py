"""Target DAG: an immutable graph of build targets and their prerequisites.

The graph is built once from an explicit list of targets plus an explicit
list of ``(predecessor, target)`` edges, then handed to a ``TargetRunner``.
Nothing registers itself globally; two graphs never share state.

Construction enforces:
- Target names are unique.
- Every edge endpoint names a registered target.
- The prerequisite relation is acyclic (unless validation is disabled).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from buildforge.models.targets import Target


class UnknownTargetError(LookupError):
    """Raised when a target name is not registered in the graph."""

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        known = sorted(known)
        message = f"Unknown target '{name}'."
        if known:
            message += f" Known targets: {', '.join(known)}"
        super().__init__(message)
        self.name = name


class CyclicDependencyError(ValueError):
    """Raised when the prerequisite graph contains a cycle."""

    def __init__(self, message: str, cycle: list[str] | None = None) -> None:
        super().__init__(message)
        self.cycle = list(cycle or [])


class TargetGraph:
    """Directed acyclic graph of targets.

    Parameters
    ----------
    targets:
        The targets to register.  Each target's own ``prerequisites`` are
        edges too.
    edges:
        Extra ``(predecessor, target)`` pairs: *predecessor* must complete
        before *target*.
    validate_acyclic:
        Reject cycles at construction time.  Disabling this leaves cycle
        detection to the runner's traversal.
    """

    def __init__(
        self,
        targets: Iterable[Target],
        edges: Iterable[tuple[str, str]] = (),
        *,
        validate_acyclic: bool = True,
    ) -> None:
        registered: dict[str, Target] = {}
        for target in targets:
            if target.name in registered:
                raise ValueError(f"Duplicate target name: {target.name}")
            registered[target.name] = target

        # Forward edges: target -> prerequisites, in declaration order
        prerequisites: dict[str, list[str]] = {
            name: [] for name in registered
        }

        def add_edge(before: str, after: str) -> None:
            for name in (before, after):
                if name not in registered:
                    raise UnknownTargetError(name, registered)
            if before not in prerequisites[after]:
                prerequisites[after].append(before)

        for target in registered.values():
            for prereq in target.prerequisites:
                add_edge(prereq, target.name)
        for before, after in edges:
            add_edge(before, after)

        # Reverse edges: target -> targets that depend on it
        dependents: dict[str, list[str]] = {name: [] for name in registered}
        for name, prereqs in prerequisites.items():
            for prereq in prereqs:
                dependents[prereq].append(name)

        self._targets: Mapping[str, Target] = MappingProxyType(registered)
        self._prerequisites: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: tuple(p) for name, p in prerequisites.items()}
        )
        self._dependents: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: tuple(d) for name, d in dependents.items()}
        )

        if validate_acyclic:
            self._validate_no_cycles()

    @classmethod
    def from_edges(
        cls,
        targets: Iterable[Target],
        edges: Iterable[tuple[str, str]],
    ) -> TargetGraph:
        """Build a graph from targets and ``(predecessor, target)`` pairs."""
        return cls(targets, edges)

    def _validate_no_cycles(self) -> None:
        """Verify the graph is a DAG using topological sort (Kahn's algorithm)."""
        in_degree = {name: len(p) for name, p in self._prerequisites.items()}
        queue = deque(name for name, deg in in_degree.items() if deg == 0)
        visited = 0

        while queue:
            node = queue.popleft()
            visited += 1
            for dep in self._dependents[node]:
                in_degree[dep] -= 1
                if in_degree[dep] == 0:
                    queue.append(dep)

        if visited != len(self._targets):
            stuck = sorted(name for name, deg in in_degree.items() if deg > 0)
            raise CyclicDependencyError(
                f"Target graph has a cycle. "
                f"Visited {visited}/{len(self._targets)} targets; "
                f"unresolved: {', '.join(stuck)}",
                cycle=stuck,
            )

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets.values())

    def __len__(self) -> int:
        return len(self._targets)

    def get_target(self, name: str) -> Target:
        """Return the registered Target, or raise ``UnknownTargetError``."""
        try:
            return self._targets[name]
        except KeyError:
            raise UnknownTargetError(name, self._targets) from None

    def get_prerequisites(self, name: str) -> list[str]:
        """Return direct prerequisite names of a target, in declaration order."""
        self.get_target(name)
        return list(self._prerequisites[name])

    @property
    def target_names(self) -> list[str]:
        """Return all target names in registration order."""
        return list(self._targets)

    @property
    def edges(self) -> list[tuple[str, str]]:
        """Return every ``(predecessor, target)`` edge."""
        return [
            (prereq, name)
            for name, prereqs in self._prerequisites.items()
            for prereq in prereqs
        ]
