from __future__ import annotations

from modgraph.core.builder import (
    index_by_downstream,
    index_by_upstream,
    parse_edge_lines,
    parse_relationships,
    split_edge_line,
)
from modgraph.core.identity import (
    TIP_VERSION,
    ModuleAndVersion,
    Relationship,
    parse_module_and_version,
)
from modgraph.core.render import emit_dot, render_dot
from modgraph.core.walker import (
    ProcessedGraph,
    Subgraph,
    WalkDirection,
    walk,
    walk_dependencies,
    walk_relationships,
)
from modgraph.errors import MalformedIdentityError, ModgraphError, UnreadableSourceError
from modgraph.io.gomod import collect_relationships, discover_project_dirs, read_graph_file, run_go_mod_graph
from modgraph.io.tables import edges_frame, nodes_frame, version_summary, write_graph_tables
from modgraph.pipeline import build_and_render, build_graph


__all__ = [
    "TIP_VERSION",
    "ModuleAndVersion",
    "Relationship",
    "parse_module_and_version",
    "split_edge_line",
    "parse_edge_lines",
    "parse_relationships",
    "index_by_upstream",
    "index_by_downstream",
    "Subgraph",
    "ProcessedGraph",
    "WalkDirection",
    "walk",
    "walk_dependencies",
    "walk_relationships",
    "emit_dot",
    "render_dot",
    "ModgraphError",
    "MalformedIdentityError",
    "UnreadableSourceError",
    "run_go_mod_graph",
    "read_graph_file",
    "discover_project_dirs",
    "collect_relationships",
    "edges_frame",
    "nodes_frame",
    "version_summary",
    "write_graph_tables",
    "build_graph",
    "build_and_render",
]
