"""
Exceptions raised while resolving tags.

Every failure is local to a single tag: the render pass catches
TagResolutionError per tag and keeps going.
"""


class TagResolutionError(Exception):
    """Base class for all tag resolution failures."""


class NetworkFetchError(TagResolutionError):
    """A data file or the homebrew index could not be fetched or parsed."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Could not fetch '{url}': {message}")


class LockTimeoutError(TagResolutionError):
    """A cache lock could not be acquired within its wait bound."""

    def __init__(self, name: str, timeout: float):
        self.name = name
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:.3f}s waiting for {name} lock")


class UnsupportedKindError(TagResolutionError):
    """The tag kind has no searchable fields."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"tag '{kind}' not supported")


class EntityNotFoundError(TagResolutionError):
    """No loaded document contained an entry matching name and source."""

    def __init__(self, kind: str, name: str, source: str):
        self.kind = kind
        self.name = name
        self.source = source
        super().__init__(f"{kind} '{name}' ({source or 'any source'}) not found")
