"""
Data models for tag resolution.

Entity kinds, cached file states, resolved entities and the tag references
handed over by the tag-syntax parser.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityKind(str, Enum):
    """Kinds of game-data entities that can be resolved from a tag."""
    ITEM = "item"
    CREATURE = "creature"
    SPELL = "spell"

    @classmethod
    def from_tag(cls, tag: str) -> EntityKind | None:
        """Map a raw tag kind (``@item``, ``spell``, ...) to an EntityKind.

        Returns None for unsupported kinds instead of raising, so callers can
        fall back to a plain link.
        """
        value = tag.lstrip("@").strip().lower()
        try:
            return cls(value)
        except ValueError:
            return None


class FileState(str, Enum):
    """Fetch state of a remote data file.

    A path missing from the file cache is NOT_FETCHED; FETCH_FAILED is
    stored explicitly so that failures are never retried within a session.
    """
    NOT_FETCHED = "not_fetched"
    LOADED = "loaded"
    FETCH_FAILED = "fetch_failed"


class LoadedFile(BaseModel):
    """A candidate data file together with its fetch outcome."""
    path: str = Field(description="Path of the file relative to its data root")
    state: FileState = Field(default=FileState.NOT_FETCHED)
    content: Any = Field(default=None, description="Parsed JSON, set only when LOADED")

    @property
    def is_loaded(self) -> bool:
        return self.state == FileState.LOADED


class SourceInfo(BaseModel):
    """Display metadata for the book or homebrew an entity comes from."""
    abbreviation: str
    full_name: str | None = None


class ResolvedEntity(BaseModel):
    """A matched game-data entry plus the metadata needed to display it."""
    entity: dict[str, Any]
    source_info: SourceInfo


class TagReference(BaseModel):
    """One parsed tag occurrence, as produced by the tag-syntax parser."""
    tag: str = Field(description="Tag kind including the leading marker, e.g. '@spell'")
    name: str
    source: str = ""
    page: str = ""
    hash: str = ""
    display_text: str | None = None
    text: str = Field(default="", description="Raw tag body, shown when the tag cannot be linked")


class TagLink(BaseModel):
    """Renderable description of a tag: where it links and how it looks."""
    tag: str
    name: str
    label: str
    url: str | None = None
    icon: str | None = None
    color: str = "Black"
    hover_color: str = "DarkSlateGray"
    bg_color: str = "LightGray"
    resolved: ResolvedEntity | None = None
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None
