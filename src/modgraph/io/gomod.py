from __future__ import annotations

import subprocess
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Sequence

from modgraph.core.builder import parse_edge_lines
from modgraph.core.identity import Relationship
from modgraph.errors import UnreadableSourceError


GO_MOD_FILE = "go.mod"
DEFAULT_GO_BINARY = "go"

GraphRunner = Callable[[Path], list[str]]


def run_go_mod_graph(project_dir: Path, *, go_binary: str = DEFAULT_GO_BINARY) -> list[str]:
    """Run ``go mod graph`` inside ``project_dir`` and return its stdout lines.

    Any failure (missing directory, missing ``go`` binary, non-zero exit) is
    fatal: a partial edge list would silently drop parts of the graph.
    """
    project_dir = Path(project_dir)
    if not project_dir.is_dir():
        raise UnreadableSourceError(str(project_dir), "directory not found")

    command = [go_binary, "mod", "graph"]
    try:
        result = subprocess.run(
            command,
            cwd=project_dir,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise UnreadableSourceError(str(project_dir), f"failed to start {go_binary!r}: {exc}") from exc

    if result.returncode != 0:
        stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
        raise UnreadableSourceError(
            str(project_dir),
            f"`{' '.join(command)}` exited with status {result.returncode}: {stderr}",
        )
    try:
        return result.stdout.decode("utf-8").splitlines()
    except UnicodeDecodeError as exc:
        raise UnreadableSourceError(str(project_dir), f"output is not valid UTF-8: {exc}") from exc


def read_graph_file(path: Path) -> list[str]:
    """Read a saved ``go mod graph`` dump."""
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise UnreadableSourceError(str(path), str(exc)) from exc


def discover_project_dirs(repos_root: Path) -> list[Path]:
    """Immediate subdirectories of ``repos_root`` that hold a ``go.mod``."""
    repos_root = Path(repos_root)
    if not repos_root.is_dir():
        raise UnreadableSourceError(str(repos_root), "repos directory not found")
    return sorted(
        child
        for child in repos_root.iterdir()
        if child.is_dir() and (child / GO_MOD_FILE).is_file()
    )


def collect_relationships(
    directories: Sequence[Path],
    *,
    graph_files: Iterable[Path] = (),
    go_binary: str = DEFAULT_GO_BINARY,
    runner: GraphRunner | None = None,
) -> list[Relationship]:
    """Concatenate the edges of every project directory, then every saved dump."""
    run = runner if runner is not None else partial(run_go_mod_graph, go_binary=go_binary)
    relationships: list[Relationship] = []
    for project_dir in directories:
        relationships.extend(parse_edge_lines(run(Path(project_dir))))
    for graph_file in graph_files:
        relationships.extend(parse_edge_lines(read_graph_file(graph_file)))
    return relationships
