"""
5etools Tag Links - resolves 5etools cross-reference tags to game-data entries.
"""

from .config import TagLinkSettings
from .engine import TagResolutionEngine
from .errors import (
    EntityNotFoundError,
    LockTimeoutError,
    NetworkFetchError,
    TagResolutionError,
    UnsupportedKindError,
)
from .links import link_tag, link_tags
from .models import EntityKind, FileState, ResolvedEntity, SourceInfo, TagLink, TagReference

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("tools5e-taglinks")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable

__all__ = [
    "TagResolutionEngine",
    "TagLinkSettings",
    "link_tag",
    "link_tags",
    # Models
    "EntityKind",
    "FileState",
    "ResolvedEntity",
    "SourceInfo",
    "TagLink",
    "TagReference",
    # Errors
    "TagResolutionError",
    "NetworkFetchError",
    "LockTimeoutError",
    "UnsupportedKindError",
    "EntityNotFoundError",
]
