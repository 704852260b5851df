from __future__ import annotations

from dataclasses import dataclass

from modgraph.errors import MalformedIdentityError


ModuleName = str
VersionName = str

TIP_VERSION: VersionName = "tip"
VERSION_SEPARATOR = "@"


@dataclass(frozen=True)
class ModuleAndVersion:
    """One concrete node of the module graph.

    Attributes:
        module: Module path, compared verbatim (major-version suffixes such as
            ``/v2`` are part of the name).
        version: Version string, or ``"tip"`` when the source gave none.
    """

    module: ModuleName
    version: VersionName = TIP_VERSION

    def __str__(self) -> str:
        return f"{self.module}{VERSION_SEPARATOR}{self.version}"


@dataclass(frozen=True)
class Relationship:
    """Directed edge: ``downstream`` consumes ``upstream``."""

    downstream: ModuleAndVersion
    upstream: ModuleAndVersion


def parse_module_and_version(token: str) -> ModuleAndVersion:
    # TODO: strip the major-version suffix so /v2+ modules share a subgraph with v0/v1.
    parts = token.split(VERSION_SEPARATOR)
    if len(parts) == 1:
        return ModuleAndVersion(parts[0], TIP_VERSION)
    if len(parts) == 2:
        return ModuleAndVersion(parts[0], parts[1])
    raise MalformedIdentityError(token)
