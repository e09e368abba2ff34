"""
5etools Tag Links MCP Server.

Exposes tag resolution and cache clearing as FastMCP tools.
"""

import json
import logging
from typing import Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

from .config import TagLinkSettings
from .engine import TagResolutionEngine
from .errors import TagResolutionError
from .links import default_hash, normalize_tag

logger = logging.getLogger("tools5e-taglinks")

logging.basicConfig(
    level=logging.INFO,
    )

if not load_dotenv():
    logger.debug(".env file not found, using TOOLS5E_* environment variables and defaults")

settings = TagLinkSettings.from_env()
engine = TagResolutionEngine(settings)
logger.debug(f"Data: {settings.tools5e_url}, homebrew: {settings.homebrew_repo_url}")

mcp = FastMCP(
    name="tools5e-taglinks"
)


def format_resolution(tag: str, name: str, source: str, hash: str, outcome) -> str:
    """JSON payload for a resolution outcome (entity, plain link or error)."""
    payload: dict = {"tag": tag, "name": name, "source": source, "hash": hash}
    if isinstance(outcome, TagResolutionError):
        payload["error"] = str(outcome)
    elif outcome is None:
        payload["resolved"] = False
    else:
        payload["resolved"] = True
        payload["entity"] = outcome.entity
        payload["source_info"] = outcome.source_info.model_dump()
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

@mcp.tool
async def resolve_tag(
    kind: Annotated[str, Field(description="Tag kind, e.g. '@spell', '@item', '@creature'")],
    name: Annotated[str, Field(description="Entity name as written in the tag")],
    source: Annotated[str, Field(description="Source code, e.g. 'PHB' or a homebrew source")] = "",
    hash: Annotated[str | None, Field(description="Page anchor hash; derived from name and source if omitted")] = None,
) -> str:
    """Resolve a 5etools tag to its game-data entry and source book."""
    engine.start()
    tag = normalize_tag(kind)
    hash = hash or default_hash(name, source)
    try:
        outcome = await engine.resolve_tag(tag, source, hash, name)
    except TagResolutionError as e:
        logger.error(f"resolve_tag failed for {tag} '{name}': {e}")
        outcome = e
    return format_resolution(tag, name, source, hash, outcome)


@mcp.tool
async def clear_cache() -> str:
    """Remove all cached data and reload the homebrew index."""
    engine.start()
    if await engine.reset():
        return "Cached data cleared."
    return "Cached data cleared, but the homebrew index could not be reloaded. Check your settings."


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
