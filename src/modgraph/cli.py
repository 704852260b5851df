from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Sequence

import polars as pl

from modgraph.core.render import render_dot
from modgraph.core.walker import WalkDirection
from modgraph.errors import ModgraphError
from modgraph.io.gomod import DEFAULT_GO_BINARY, discover_project_dirs
from modgraph.io.tables import write_graph_tables
from modgraph.pipeline import build_graph, with_time_log


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render the Go module graph around a focus module as Graphviz DOT.",
    )
    parser.add_argument(
        "--focus",
        type=str,
        default=os.environ.get("MODGRAPH_FOCUS"),
        help="Focus module path, e.g. github.com/ipld/go-ipld-prime (can set MODGRAPH_FOCUS env var).",
    )
    parser.add_argument(
        "--project-dir",
        type=Path,
        action="append",
        default=[],
        help="Go project to run `go mod graph` in. Repeatable.",
    )
    parser.add_argument(
        "--repos-dir",
        type=Path,
        default=os.environ.get("MODGRAPH_REPOS_DIR"),
        help="Directory whose subdirectories with a go.mod are all scanned (can set MODGRAPH_REPOS_DIR env var).",
    )
    parser.add_argument(
        "--graph-file",
        type=Path,
        action="append",
        default=[],
        help="Saved `go mod graph` output to read instead of running go. Repeatable.",
    )
    parser.add_argument(
        "--go-binary",
        type=str,
        default=os.environ.get("MODGRAPH_GO_BINARY", DEFAULT_GO_BINARY),
        help="Go executable (can set MODGRAPH_GO_BINARY env var).",
    )
    parser.add_argument(
        "--direction",
        choices=[direction.value for direction in WalkDirection],
        default=WalkDirection.DEPENDENTS.value,
        help="dependents: modules that depend on the focus; dependencies: modules the focus depends on.",
    )
    parser.add_argument("--output", type=Path, help="Write DOT here instead of stdout.")
    parser.add_argument("--tables-dir", type=Path, help="Also write edge/node/summary tables here.")
    parser.add_argument("--tables-format", choices=("parquet", "csv"), default="parquet")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    if not args.focus:
        raise SystemExit("focus is required (arg or MODGRAPH_FOCUS env var).")

    try:
        directories = [Path(p) for p in args.project_dir]
        if args.repos_dir:
            repos_dir = Path(args.repos_dir)
            discovered = discover_project_dirs(repos_dir)
            if not discovered:
                print(f"[warn] no go.mod projects found under {repos_dir}", file=sys.stderr)
            directories.extend(discovered)

        graph_files = [Path(p) for p in args.graph_file]
        if not directories and not graph_files:
            raise SystemExit("no edge sources given (use --project-dir, --repos-dir or --graph-file).")

        pg = build_graph(
            directories,
            args.focus,
            graph_files=graph_files,
            direction=args.direction,
            go_binary=args.go_binary,
        )
        with with_time_log("emitting dot"):
            dot = render_dot(pg)
    except ModgraphError as exc:
        raise SystemExit(f"error: {exc}") from exc

    # Nothing reaches the DOT sink unless the table export succeeded.
    try:
        if args.tables_dir:
            written = write_graph_tables(pg, args.tables_dir, fmt=args.tables_format)
            for name, path in written.items():
                print(f"[tables] {name}: {path}", file=sys.stderr)

        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(dot, encoding="utf-8")
        else:
            sys.stdout.write(dot)
    except (OSError, pl.exceptions.PolarsError) as exc:
        raise SystemExit(f"error: {exc}") from exc

    print(
        f"[done] {len(pg.subgraphs)} modules, {pg.node_count} nodes, {len(pg.relationships)} edges",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
