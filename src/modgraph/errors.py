from __future__ import annotations


class ModgraphError(Exception):
    """Base class for fatal errors raised while building a module graph."""


class MalformedIdentityError(ModgraphError, ValueError):
    """A ``module@version`` token could not be split unambiguously."""

    def __init__(self, token: str) -> None:
        super().__init__(f"malformed module identity (more than one '@'): {token!r}")
        self.token = token


class UnreadableSourceError(ModgraphError, RuntimeError):
    """An edge source (``go mod graph`` or a saved dump) could not be read."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"could not read module graph from {source}: {detail}")
        self.source = source
        self.detail = detail
