"""
Entity matching over loaded 5etools documents.

Documents are searched in the order given, then by field in a fixed
per-kind order, then by array position. The first entry matching both
name and source wins.
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import UnsupportedKindError
from .models import EntityKind, ResolvedEntity, SourceInfo
from .sources import source_full_name

logger = logging.getLogger("tools5e-taglinks")

# Top-level arrays searched for each kind, in priority order
SEARCH_FIELDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.ITEM: ("item", "itemGroup", "itemEntry", "baseitem", "magicvariant"),
    EntityKind.CREATURE: ("monster",),
    EntityKind.SPELL: ("spell",),
}


def _equals_ignore_case(value: Any, expected: str) -> bool:
    return isinstance(value, str) and value.lower() == expected.lower()


def entry_matches(entry: Any, name: str, source: str) -> bool:
    """Check an entry against a requested name and source.

    The name matches the entry's ``name`` or its ``srd`` alias. Entries
    without a source match any requested source.
    """
    if not isinstance(entry, dict):
        return False
    if not (
        _equals_ignore_case(entry.get("name"), name)
        or _equals_ignore_case(entry.get("srd"), name)
    ):
        return False
    entry_source = entry.get("source")
    if not entry_source:
        return True
    return _equals_ignore_case(entry_source, source)


def find_matching_element(
    document: dict[str, Any], field: str, name: str, source: str
) -> dict[str, Any] | None:
    """First element of ``document[field]`` matching name and source."""
    elements = document.get(field)
    if not isinstance(elements, list):
        return None
    for element in elements:
        if entry_matches(element, name, source):
            return element
    return None


def homebrew_source_info(document: dict[str, Any], code: str) -> SourceInfo | None:
    """Look up ``code`` in a homebrew file's ``_meta.sources`` list."""
    meta = document.get("_meta")
    if not isinstance(meta, dict):
        return None
    for meta_source in meta.get("sources") or []:
        if isinstance(meta_source, dict) and _equals_ignore_case(meta_source.get("json"), code):
            return SourceInfo(
                abbreviation=meta_source.get("abbreviation") or code,
                full_name=meta_source.get("full"),
            )
    return None


def derive_source_info(
    document: dict[str, Any], entry: dict[str, Any], requested_source: str
) -> SourceInfo:
    entry_source = entry.get("source")
    if isinstance(entry_source, str) and entry_source:
        info = homebrew_source_info(document, entry_source)
        if info:
            return info
        return SourceInfo(
            abbreviation=entry_source,
            full_name=source_full_name(entry_source),
        )
    return SourceInfo(abbreviation=requested_source)


class EntityMatcher:
    """Finds the entity a tag refers to within a set of loaded documents."""

    def match(
        self,
        kind: EntityKind | str,
        documents: list[Any],
        name: str,
        source: str,
    ) -> ResolvedEntity | None:
        """
        Search ``documents`` for an entity of ``kind`` named ``name``.

        Returns:
            The first match with its source metadata, or None.

        Raises:
            UnsupportedKindError: If ``kind`` has no search fields.
        """
        entity_kind = kind if isinstance(kind, EntityKind) else EntityKind.from_tag(kind)
        if entity_kind is None:
            raise UnsupportedKindError(str(kind))

        fields = SEARCH_FIELDS[entity_kind]
        for document in documents:
            if not isinstance(document, dict):
                continue
            for field in fields:
                entry = find_matching_element(document, field, name, source)
                if entry is not None:
                    logger.debug(f"Matched {entity_kind.value} '{name}' in '{field}'")
                    return ResolvedEntity(
                        entity=entry,
                        source_info=derive_source_info(document, entry, source),
                    )
        return None
