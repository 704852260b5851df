from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping

from modgraph.core.builder import EdgeIndex, index_by_downstream, index_by_upstream
from modgraph.core.identity import ModuleAndVersion, ModuleName, Relationship


class WalkDirection(str, Enum):
    """Which side of each edge the walk moves towards."""

    DEPENDENTS = "dependents"
    DEPENDENCIES = "dependencies"


@dataclass(frozen=True)
class Subgraph:
    """Versions of one module observed during a walk, rendered as one cluster."""

    module: ModuleName
    contains: frozenset[ModuleAndVersion] = frozenset()

    def contents_ordered(self) -> list[ModuleAndVersion]:
        return sorted(self.contains, key=lambda mv: mv.version)


@dataclass(frozen=True)
class ProcessedGraph:
    """Result of a walk from a focus module.

    Attributes:
        focus: Module the walk started from.
        subgraphs: One entry per reached module, in discovery order.
        relationships: Every traversed edge in depth-first order. Edges are
            not grouped by subgraph; they almost always cross clusters.
    """

    focus: ModuleName
    subgraphs: Mapping[ModuleName, Subgraph] = field(default_factory=lambda: MappingProxyType({}))
    relationships: tuple[Relationship, ...] = ()

    @property
    def module_names(self) -> list[ModuleName]:
        return list(self.subgraphs)

    @property
    def node_count(self) -> int:
        return sum(len(subgraph.contains) for subgraph in self.subgraphs.values())


def _flood(
    focus: ModuleName,
    index: EdgeIndex,
    *,
    near: Callable[[Relationship], ModuleAndVersion],
    far: Callable[[Relationship], ModuleAndVersion],
    record_far: bool,
) -> ProcessedGraph:
    # Each module is entered at most once; entering creates its subgraph before
    # any of its edges are looked at, which is what stops cycles.
    contains: dict[ModuleName, set[ModuleAndVersion]] = {}
    recorded: list[Relationship] = []
    stack: list[tuple[ModuleName, Iterator[Relationship]]] = []

    def enter(module: ModuleName) -> None:
        contains[module] = set()
        stack.append((module, iter(index.get(module, ()))))

    enter(focus)
    while stack:
        module, edges = stack[-1]
        edge = next(edges, None)
        if edge is None:
            stack.pop()
            continue
        recorded.append(edge)
        contains[module].add(near(edge))
        target = far(edge)
        if target.module not in contains:
            enter(target.module)
        if record_far:
            contains[target.module].add(target)

    subgraphs = {
        module: Subgraph(module=module, contains=frozenset(members))
        for module, members in contains.items()
    }
    return ProcessedGraph(
        focus=focus,
        subgraphs=MappingProxyType(subgraphs),
        relationships=tuple(recorded),
    )


def walk(focus: ModuleName, edges_by_upstream: EdgeIndex) -> ProcessedGraph:
    """Keep only the modules that (transitively) depend on ``focus``.

    Visitation is by module name, not by module+version: once a module is
    reached, every edge recorded against it is included, including edges whose
    exact version never chains back to the focus. This shows the versions a
    consumer is likely to run into when upgrading.
    """
    return _flood(
        focus,
        edges_by_upstream,
        near=lambda edge: edge.upstream,
        far=lambda edge: edge.downstream,
        record_far=False,
    )


def walk_dependencies(focus: ModuleName, edges_by_downstream: EdgeIndex) -> ProcessedGraph:
    """Keep only the modules ``focus`` (transitively) depends on.

    Leaf dependencies have no edges of their own, so the endpoint each edge
    reaches is recorded in its module's subgraph as well.
    """
    return _flood(
        focus,
        edges_by_downstream,
        near=lambda edge: edge.downstream,
        far=lambda edge: edge.upstream,
        record_far=True,
    )


def walk_relationships(
    focus: ModuleName,
    relationships: Iterable[Relationship],
    *,
    direction: WalkDirection | str = WalkDirection.DEPENDENTS,
) -> ProcessedGraph:
    direction = WalkDirection(direction)
    if direction is WalkDirection.DEPENDENCIES:
        return walk_dependencies(focus, index_by_downstream(relationships))
    return walk(focus, index_by_upstream(relationships))
