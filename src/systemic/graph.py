"""Deterministic topological sorting of component dependencies.

The sort walks the graph depth first from each node in the order nodes were
first seen, using an explicit stack rather than recursion. It returns nodes
*dependents first*: every node appears before the nodes it depends on.
Reversing the result gives the order components must be started in.
"""

from enum import Enum
from typing import Iterable, Mapping

from systemic.domain import Definition
from systemic.errors import CyclicDependencyError

__all__ = ["DependencyGraph", "sort_definitions"]


class _Mark(Enum):
    VISITING = 1
    DONE = 2


_EXHAUSTED = object()


class DependencyGraph:
    """
    A directed graph of component names and the names they depend on.

    Names referenced only as dependencies are registered as nodes with no
    dependencies of their own, so the sort never silently drops them.
    """

    def __init__(self):
        self._dependencies: dict[str, list[str]] = {}

    def add_dependencies(self, dependee: str, dependencies: Iterable[str] = ()) -> "DependencyGraph":
        """
        Add a node and the edges to the nodes it depends on.

        Args:
            dependee: The name whose dependencies are being registered.
            dependencies: Names this dependee depends on, in declaration order.

        Raises:
            TypeError: If any name is not a non-empty string.
        """
        _check_name(dependee, "Dependent")
        edges = self._dependencies.setdefault(dependee, [])
        for dependency in dependencies:
            _check_name(dependency, "Dependency")
            edges.append(dependency)
            self._dependencies.setdefault(dependency, [])
        return self

    @property
    def nodes(self) -> list[str]:
        return list(self._dependencies)

    def sort(self) -> list[str]:
        """
        Sort the graph so that every node precedes its dependencies.

        Returns:
            All node names, dependents first.

        Raises:
            CyclicDependencyError: If a node depends on itself directly or
                through other nodes. The error's chain runs from the first
                node of the cycle back to that node.
        """
        marks: dict[str, _Mark] = {}
        finished: list[str] = []

        for root in self._dependencies:
            if root in marks:
                continue
            marks[root] = _Mark.VISITING
            path = [root]
            pending = [iter(self._dependencies[root])]

            while pending:
                dependency = next(pending[-1], _EXHAUSTED)
                if dependency is _EXHAUSTED:
                    pending.pop()
                    node = path.pop()
                    marks[node] = _Mark.DONE
                    finished.append(node)
                    continue

                mark = marks.get(dependency)
                if mark is _Mark.VISITING:
                    raise CyclicDependencyError(path[path.index(dependency):] + [dependency])
                if mark is None:
                    marks[dependency] = _Mark.VISITING
                    path.append(dependency)
                    pending.append(iter(self._dependencies[dependency]))

        finished.reverse()
        return finished


def sort_definitions(definitions: Mapping[str, Definition]) -> list[str]:
    """Sort stored definitions dependents first.

    Only names with a definition are returned; nodes the graph synthesised
    for undeclared dependencies are dropped.
    """
    graph = DependencyGraph()
    for name, definition in definitions.items():
        graph.add_dependencies(name, (d.component for d in definition.dependencies))
    return [name for name in graph.sort() if name in definitions]


def _check_name(name: str, role: str) -> None:
    if not isinstance(name, str) or not name:
        raise TypeError(f"{role} name must be given as a non-empty string")
