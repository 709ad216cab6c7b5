"""Error taxonomy shared by conversion, storage, and query layers.

NotFound and MalformedSource are per-record failures: callers report them
and move on. RuleLoadError is raised by strict loaders only; the default
rule source degrades to an empty table instead.
"""

from __future__ import annotations


class UnigalaxyError(Exception):
    """Base class for all unigalaxy errors."""


class ComponentNotFoundError(UnigalaxyError):
    """A component id is absent from the corpus (or its record is unreadable)."""

    def __init__(self, component_id: str, reason: str | None = None) -> None:
        self.component_id = component_id
        self.reason = reason
        message = f"Component {component_id} not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedSourceError(UnigalaxyError):
    """A raw snippet could not be read or split into markup and style."""

    def __init__(self, identity: str, reason: str) -> None:
        self.identity = identity
        self.reason = reason
        super().__init__(f"Malformed snippet {identity}: {reason}")


class RuleLoadError(UnigalaxyError):
    """A rule table file could not be read or has the wrong shape."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load rule table from {path}: {reason}")
