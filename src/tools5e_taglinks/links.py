"""
Link building for parsed tags.

Turns the tags found in a document into TagLink descriptions: target URL,
icon, colours and, where the tag's kind is resolvable, the matched entity.
All tags of a document are resolved concurrently and a failing tag never
stops the others from rendering.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

from .config import TagLinkSettings
from .engine import TagResolutionEngine
from .errors import TagResolutionError
from .models import TagLink, TagReference

logger = logging.getLogger("tools5e-taglinks")

TAG_ALIASES: dict[str, str] = {
    "@monster": "@creature",
    "@classtype": "@class",
}

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"

_DUPLICATE_SLASHES_RE = re.compile(r"([^:]/)/+")


@dataclass(frozen=True)
class TagStyle:
    icon: str | None = None
    color: str = "Black"
    hover_color: str = "DarkSlateGray"
    bg_color: str = "LightGray"


TAG_STYLES: dict[str, TagStyle] = {
    "@creature": TagStyle(icon="👤", bg_color="LightBlue"),
    "@item": TagStyle(icon="🗡️", bg_color="Khaki"),
    "@spell": TagStyle(icon="🪄", color="White", hover_color="LightGray", bg_color="RebeccaPurple"),
}

ERROR_STYLE = TagStyle(color="DarkRed", hover_color="Red", bg_color="MistyRose")


def normalize_tag(tag: str) -> str:
    """Canonical ``@kind`` form of a tag, with aliases applied."""
    tag = tag.strip().lower()
    if not tag.startswith("@"):
        tag = f"@{tag}"
    return TAG_ALIASES.get(tag, tag)


def normalize_tag_text(text: str) -> str:
    """Tag bodies may use ';' where the 5etools grammar expects '|'."""
    return text.replace(";", "|")


def tag_style(tag: str, hide_icons: bool = False) -> TagStyle:
    style = TAG_STYLES.get(normalize_tag(tag), TagStyle())
    if hide_icons and style.icon:
        return TagStyle(
            color=style.color, hover_color=style.hover_color, bg_color=style.bg_color
        )
    return style


def default_hash(name: str, source: str) -> str:
    """5etools page anchor for an entity, used when a tag carries none."""
    parts = [name] + ([source] if source else [])
    return "_".join(quote(p.lower(), safe=_URI_COMPONENT_SAFE) for p in parts)


def build_base_url(settings: TagLinkSettings, tag: str, page: str, hash: str) -> str:
    base = settings.tools5e_url
    tag = normalize_tag(tag)
    if tag == "@skill":
        return f"{base}/quickreference.html#bookref-quick,2,skills"
    if tag == "@sense":
        return f"{base}/quickreference.html#bookref-quick,2,vision and light"
    return f"{base}/{page}#{hash}"


def build_url(settings: TagLinkSettings, base_url: str) -> str:
    """Final link target for the configured mode."""
    clean_url = _DUPLICATE_SLASHES_RE.sub(r"\1", base_url)
    if settings.mode == "opengate":
        return (
            f"obsidian://opengate?id={settings.open_gate_id}"
            f"&title={quote(settings.open_gate_title, safe=_URI_COMPONENT_SAFE)}"
            f"&url={quote(clean_url, safe=_URI_COMPONENT_SAFE)}"
        )
    return clean_url


async def link_tag(
    engine: TagResolutionEngine, settings: TagLinkSettings, reference: TagReference
) -> TagLink:
    """
    Build the link for one tag, resolving its entity when possible.

    Resolution errors are caught here and turned into an error-styled link
    labelled with the raw tag text.
    """
    tag = normalize_tag(reference.tag)
    hash = reference.hash or default_hash(reference.name, reference.source)
    style = tag_style(tag, settings.hide_icons)
    link = TagLink(
        tag=tag,
        name=reference.name,
        label=reference.display_text or reference.name,
        url=build_url(settings, build_base_url(settings, tag, reference.page, hash)),
        icon=style.icon,
        color=style.color,
        hover_color=style.hover_color,
        bg_color=style.bg_color,
    )
    if settings.is_ignored(tag):
        return link

    try:
        link.resolved = await engine.resolve_tag(tag, reference.source, hash, reference.name)
    except TagResolutionError as e:
        logger.warning(f"Could not resolve {tag} '{reference.name}': {e}")
        return TagLink(
            tag=tag,
            name=reference.name,
            label=reference.text or reference.name,
            color=ERROR_STYLE.color,
            hover_color=ERROR_STYLE.hover_color,
            bg_color=ERROR_STYLE.bg_color,
            error=str(e),
        )
    return link


async def link_tags(
    engine: TagResolutionEngine,
    settings: TagLinkSettings,
    references: list[TagReference],
) -> list[TagLink]:
    """Build links for every tag of a document, in input order."""
    return list(
        await asyncio.gather(
            *(link_tag(engine, settings, ref) for ref in references)
        )
    )
