from __future__ import annotations

import io
from typing import TextIO

from modgraph.core.walker import ProcessedGraph


DOT_HEADER_LINES = (
    "digraph G {",
    "    node [penwidth=2 fontsize=10 shape=rectangle];",
    "    edge [tailport=e penwidth=2];",
    "    compound=true;",
    "    rankdir=LR;",
    '    ranksep="2.5";',
    '    quantum="0.5";',
)


def _quote(value: object) -> str:
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def emit_dot(sink: TextIO, pg: ProcessedGraph) -> None:
    """Write ``pg`` to ``sink`` as a Graphviz digraph.

    Clusters are emitted ordered by module name and nodes within a cluster by
    version string, so the output does not depend on set ordering. Edges keep
    the walk order and are not deduplicated.
    """
    for line in DOT_HEADER_LINES:
        sink.write(line + "\n")

    for module in sorted(pg.subgraphs):
        subgraph = pg.subgraphs[module]
        sink.write(f"    subgraph {_quote('cluster_' + module)} {{\n")
        sink.write(f"        label={_quote(module)};\n")
        sink.write("        rankdir=TB;\n")
        for rank, node in enumerate(subgraph.contents_ordered()):
            sink.write(f"        {_quote(node)} [label={_quote(node.version)} rank={rank}];\n")
        sink.write("    }\n")

    for edge in pg.relationships:
        sink.write(f"    {_quote(edge.downstream)} -> {_quote(edge.upstream)};\n")
    sink.write("}\n")


def render_dot(pg: ProcessedGraph) -> str:
    buffer = io.StringIO()
    emit_dot(buffer, pg)
    return buffer.getvalue()
