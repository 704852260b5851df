from __future__ import annotations

from collections import defaultdict
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from modgraph.core.identity import ModuleName, Relationship, parse_module_and_version


EdgeIndex = Mapping[ModuleName, tuple[Relationship, ...]]


def split_edge_line(line: str) -> tuple[str, str] | None:
    """Return the ``(downstream, upstream)`` tokens of one ``go mod graph`` line.

    Lines that do not hold exactly two whitespace-delimited tokens (blank lines,
    headers, trailing noise) yield ``None`` and are meant to be skipped.
    """
    tokens = line.split()
    if len(tokens) != 2:
        return None
    return tokens[0], tokens[1]


def parse_relationships(records: Iterable[tuple[str, str]]) -> list[Relationship]:
    """Parse already-split ``(downstream, upstream)`` identity pairs."""
    return [
        Relationship(
            downstream=parse_module_and_version(downstream),
            upstream=parse_module_and_version(upstream),
        )
        for downstream, upstream in records
    ]


def parse_edge_lines(lines: Iterable[str]) -> list[Relationship]:
    records: list[tuple[str, str]] = []
    for line in lines:
        record = split_edge_line(line)
        if record is None:
            continue
        records.append(record)
    return parse_relationships(records)


def _index_by(
    relationships: Iterable[Relationship],
    key: Callable[[Relationship], ModuleName],
) -> EdgeIndex:
    grouped: dict[ModuleName, list[Relationship]] = defaultdict(list)
    for edge in relationships:
        grouped[key(edge)].append(edge)
    return MappingProxyType({module: tuple(edges) for module, edges in grouped.items()})


def index_by_upstream(relationships: Iterable[Relationship]) -> EdgeIndex:
    """Group edges by the module being depended upon, keeping input order."""
    return _index_by(relationships, lambda edge: edge.upstream.module)


def index_by_downstream(relationships: Iterable[Relationship]) -> EdgeIndex:
    """Group edges by the consuming module, keeping input order."""
    return _index_by(relationships, lambda edge: edge.downstream.module)
