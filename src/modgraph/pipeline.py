from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Sequence, TextIO

from modgraph.core.identity import ModuleName
from modgraph.core.render import render_dot
from modgraph.core.walker import ProcessedGraph, WalkDirection, walk_relationships
from modgraph.io.gomod import DEFAULT_GO_BINARY, GraphRunner, collect_relationships


@contextmanager
def with_time_log(label: str, *, stream: TextIO | None = None) -> Iterator[None]:
    out = stream if stream is not None else sys.stderr
    print(f"{label}...", file=out)
    started_perf = time.perf_counter()
    try:
        yield
    except BaseException:
        duration_ms = int(round((time.perf_counter() - started_perf) * 1000.0))
        print(f"{label} failed after {duration_ms}ms", file=out)
        raise
    duration_ms = int(round((time.perf_counter() - started_perf) * 1000.0))
    print(f"{label} completed in {duration_ms}ms", file=out)


def build_graph(
    directories: Sequence[Path],
    focus: ModuleName,
    *,
    graph_files: Iterable[Path] = (),
    direction: WalkDirection | str = WalkDirection.DEPENDENTS,
    go_binary: str = DEFAULT_GO_BINARY,
    runner: GraphRunner | None = None,
    log_stream: TextIO | None = None,
) -> ProcessedGraph:
    """Gather edges from every source, then walk them from ``focus``."""
    with with_time_log("gathering mod data", stream=log_stream):
        relationships = collect_relationships(
            directories,
            graph_files=graph_files,
            go_binary=go_binary,
            runner=runner,
        )
    with with_time_log("processing graph", stream=log_stream):
        return walk_relationships(focus, relationships, direction=direction)


def build_and_render(
    directories: Sequence[Path],
    focus: ModuleName,
    *,
    graph_files: Iterable[Path] = (),
    direction: WalkDirection | str = WalkDirection.DEPENDENTS,
    go_binary: str = DEFAULT_GO_BINARY,
    runner: GraphRunner | None = None,
    log_stream: TextIO | None = None,
) -> str:
    """
    Build the focus-filtered graph and return it as DOT text.

    The whole document is rendered before anything is returned, so a fatal error
    in any step never leaves a truncated graph in the caller's sink.
    """
    pg = build_graph(
        directories,
        focus,
        graph_files=graph_files,
        direction=direction,
        go_binary=go_binary,
        runner=runner,
        log_stream=log_stream,
    )
    with with_time_log("emitting dot", stream=log_stream):
        return render_dot(pg)
