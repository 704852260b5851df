from __future__ import annotations

from collections import deque

import pytest

from modgraph.core.builder import index_by_upstream, parse_relationships
from modgraph.core.identity import ModuleAndVersion, Relationship
from modgraph.core.walker import (
    ProcessedGraph,
    Subgraph,
    WalkDirection,
    walk,
    walk_relationships,
)


SCENARIO = [
    ("app@v1", "libA@v1"),
    ("libA@v1", "libB@v2"),
    ("libC@v1", "libB@v2"),
]


def _mv(token: str) -> ModuleAndVersion:
    module, version = token.split("@")
    return ModuleAndVersion(module, version)


def _contents(pg: ProcessedGraph) -> dict[str, set[str]]:
    return {module: {str(mv) for mv in sub.contains} for module, sub in pg.subgraphs.items()}


def _dependents_reachable(focus: str, relationships: list[Relationship]) -> set[str]:
    seen = {focus}
    queue = deque([focus])
    while queue:
        module = queue.popleft()
        for edge in relationships:
            if edge.upstream.module == module and edge.downstream.module not in seen:
                seen.add(edge.downstream.module)
                queue.append(edge.downstream.module)
    return seen


def test_dependents_walk_from_shared_dependency() -> None:
    relationships = parse_relationships(SCENARIO)
    pg = walk("libB", index_by_upstream(relationships))

    assert pg.focus == "libB"
    assert pg.module_names == ["libB", "libA", "app", "libC"]
    assert _contents(pg) == {
        "libB": {"libB@v2"},
        "libA": {"libA@v1"},
        "app": set(),
        "libC": set(),
    }
    assert pg.relationships == (relationships[1], relationships[0], relationships[2])


def test_dependents_walk_from_top_level_consumer_keeps_only_focus() -> None:
    relationships = parse_relationships(SCENARIO)
    pg = walk("app", index_by_upstream(relationships))
    assert _contents(pg) == {"app": set()}
    assert pg.relationships == ()


def test_dependencies_walk_keeps_what_focus_depends_on() -> None:
    relationships = parse_relationships(SCENARIO)
    pg = walk_relationships("app", relationships, direction=WalkDirection.DEPENDENCIES)

    assert _contents(pg) == {
        "app": {"app@v1"},
        "libA": {"libA@v1"},
        "libB": {"libB@v2"},
    }
    assert "libC" not in pg.subgraphs
    assert pg.relationships == (relationships[0], relationships[1])


def test_direction_accepts_plain_strings() -> None:
    relationships = parse_relationships(SCENARIO)
    assert walk_relationships("app", relationships, direction="dependencies") == walk_relationships(
        "app", relationships, direction=WalkDirection.DEPENDENCIES
    )
    with pytest.raises(ValueError):
        walk_relationships("app", relationships, direction="sideways")


def test_missing_focus_yields_single_empty_subgraph() -> None:
    relationships = parse_relationships(SCENARIO)
    pg = walk("not/in/graph", index_by_upstream(relationships))
    assert dict(pg.subgraphs) == {"not/in/graph": Subgraph("not/in/graph")}
    assert pg.relationships == ()
    assert pg.node_count == 0


def test_cycle_terminates_and_records_each_edge_once() -> None:
    relationships = parse_relationships(
        [
            ("a@v1", "b@v1"),
            ("b@v1", "a@v1"),
        ]
    )
    pg = walk("a", index_by_upstream(relationships))
    assert pg.relationships == (relationships[1], relationships[0])
    assert _contents(pg) == {"a": {"a@v1"}, "b": {"b@v1"}}


def test_self_referencing_module_is_visited_once() -> None:
    relationships = parse_relationships([("a@v2", "a@v1")])
    pg = walk("a", index_by_upstream(relationships))
    assert pg.relationships == (relationships[0],)
    assert _contents(pg) == {"a": {"a@v1"}}


def test_module_granularity_includes_versions_not_chained_to_focus() -> None:
    # app only uses mid@v2, which does not depend on core; it is still kept
    # because mid was reached through mid@v1.
    relationships = parse_relationships(
        [
            ("mid@v1", "core@v1"),
            ("app@v1", "mid@v2"),
        ]
    )
    pg = walk("core", index_by_upstream(relationships))
    assert pg.relationships == tuple(relationships)
    assert _contents(pg)["mid"] == {"mid@v2"}
    assert "app" in pg.subgraphs


def test_duplicate_edges_are_not_deduplicated() -> None:
    relationships = parse_relationships(
        [
            ("app@v1", "lib@v1"),
            ("app@v1", "lib@v1"),
        ]
    )
    pg = walk("lib", index_by_upstream(relationships))
    assert len(pg.relationships) == 2
    assert _contents(pg)["lib"] == {"lib@v1"}


def test_walk_is_sound_complete_and_repeatable() -> None:
    relationships = parse_relationships(
        [
            ("svc@v1", "api@v1"),
            ("api@v1", "core@v2"),
            ("api@v2", "core@v1"),
            ("cli@v1", "api@v2"),
            ("cli@v1", "log@v1"),
            ("core@v2", "log@v1"),
            ("web@v1", "svc@v1"),
            ("island@v1", "other@v1"),
            ("core@v1", "api@v1"),
        ]
    )
    index = index_by_upstream(relationships)
    pg = walk("core", index)

    reachable = _dependents_reachable("core", relationships)
    assert set(pg.subgraphs) == reachable
    expected_edges = [edge for edge in relationships if edge.upstream.module in reachable]
    assert sorted(pg.relationships, key=relationships.index) == expected_edges
    assert len(pg.relationships) == len(expected_edges)

    for edge in pg.relationships:
        assert edge.upstream in pg.subgraphs[edge.upstream.module].contains
        assert edge.downstream.module in pg.subgraphs

    assert walk("core", index) == pg


def test_long_chain_does_not_hit_recursion_limit() -> None:
    depth = 5000
    relationships = parse_relationships(
        [(f"m{i + 1}@v1", f"m{i}@v1") for i in range(depth)]
    )
    pg = walk("m0", index_by_upstream(relationships))
    assert len(pg.subgraphs) == depth + 1
    assert pg.relationships == tuple(relationships)


def test_contents_ordered_sorts_by_version_string() -> None:
    subgraph = Subgraph(
        "lib",
        frozenset({_mv("lib@v1.10.0"), _mv("lib@v0.9.0"), _mv("lib@v1.2.0")}),
    )
    assert [mv.version for mv in subgraph.contents_ordered()] == ["v0.9.0", "v1.10.0", "v1.2.0"]
