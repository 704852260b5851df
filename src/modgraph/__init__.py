from .core.identity import ModuleAndVersion, Relationship, parse_module_and_version
from .core.render import render_dot
from .core.walker import ProcessedGraph, Subgraph, walk, walk_relationships
from .errors import MalformedIdentityError, UnreadableSourceError
from .pipeline import build_and_render, build_graph

__all__ = [
    "ModuleAndVersion",
    "Relationship",
    "parse_module_and_version",
    "ProcessedGraph",
    "Subgraph",
    "walk",
    "walk_relationships",
    "render_dot",
    "MalformedIdentityError",
    "UnreadableSourceError",
    "build_graph",
    "build_and_render",
]
