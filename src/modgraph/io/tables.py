from __future__ import annotations

from pathlib import Path
from typing import Literal

import polars as pl

from modgraph.core.walker import ProcessedGraph


EDGE_SCHEMA = {
    "walk_order": pl.Int64,
    "downstream_module": pl.Utf8,
    "downstream_version": pl.Utf8,
    "upstream_module": pl.Utf8,
    "upstream_version": pl.Utf8,
}
NODE_SCHEMA = {
    "module": pl.Utf8,
    "version": pl.Utf8,
    "rank": pl.Int64,
}


def edges_frame(pg: ProcessedGraph) -> pl.DataFrame:
    """One row per traversed edge, in walk order."""
    rows = [
        {
            "walk_order": order,
            "downstream_module": edge.downstream.module,
            "downstream_version": edge.downstream.version,
            "upstream_module": edge.upstream.module,
            "upstream_version": edge.upstream.version,
        }
        for order, edge in enumerate(pg.relationships)
    ]
    return pl.DataFrame(rows, schema=EDGE_SCHEMA)


def nodes_frame(pg: ProcessedGraph) -> pl.DataFrame:
    """One row per clustered node; ``rank`` is the position inside its cluster."""
    rows = [
        {"module": module, "version": node.version, "rank": rank}
        for module in sorted(pg.subgraphs)
        for rank, node in enumerate(pg.subgraphs[module].contents_ordered())
    ]
    return pl.DataFrame(rows, schema=NODE_SCHEMA)


def version_summary(pg: ProcessedGraph) -> pl.DataFrame:
    """
    Per-module version and incoming-edge counts.

    ``go mod graph`` reports requirements before MVS is applied, so a module can
    show several versions even for a single start module; this table puts those
    modules first.
    """
    modules = pl.DataFrame({"module": list(pg.subgraphs)}, schema={"module": pl.Utf8})
    versions = nodes_frame(pg).group_by("module").agg(pl.len().cast(pl.Int64).alias("n_versions"))
    edges_in = (
        edges_frame(pg)
        .group_by("upstream_module")
        .agg(pl.len().cast(pl.Int64).alias("n_edges_in"))
        .rename({"upstream_module": "module"})
    )
    return (
        modules.join(versions, on="module", how="left")
        .join(edges_in, on="module", how="left")
        .with_columns(
            pl.col("n_versions").fill_null(0),
            pl.col("n_edges_in").fill_null(0),
        )
        .sort(["n_versions", "module"], descending=[True, False])
    )


def write_graph_tables(
    pg: ProcessedGraph,
    out_dir: Path,
    *,
    fmt: Literal["parquet", "csv"] = "parquet",
    compression: Literal["lz4", "uncompressed", "snappy", "gzip", "brotli", "zstd"] = "zstd",
) -> dict[str, Path]:
    """Persist the edge, node and summary tables; returns paths keyed by table name."""
    if fmt not in ("parquet", "csv"):
        raise ValueError(f"Unsupported table format: {fmt!r}")

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    tables = {
        "edges": edges_frame(pg),
        "nodes": nodes_frame(pg),
        "version_summary": version_summary(pg),
    }
    written: dict[str, Path] = {}
    for name, frame in tables.items():
        path = out_dir / f"{name}.{fmt}"
        if fmt == "parquet":
            frame.write_parquet(path, compression=compression)
        else:
            frame.write_csv(path)
        written[name] = path
    return written
