"""
Settings for the tag resolution engine and link builder.

Values mirror the 5etools tag link plugin settings. Empty values fall back
to their defaults, so a blank URL in an .env file never disables a data
source.
"""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

PLUGIN_NAME = "5etools Tag Links"

DEFAULT_TOOLS5E_URL = "https://5e.tools/"
DEFAULT_HOMEBREW_REPO_URL = "https://github.com/TheGiddyLimit/homebrew/master"
HOMEBREW_INDEX_PATH = "_generated/index-sources.json"

# Environment variable -> settings field
ENV_VARS: dict[str, str] = {
    "TOOLS5E_URL": "tools5e_url",
    "TOOLS5E_HOMEBREW_REPO_URL": "homebrew_repo_url",
    "TOOLS5E_LINK_MODE": "mode",
    "TOOLS5E_HIDE_ICONS": "hide_icons",
    "TOOLS5E_OPEN_GATE_ID": "open_gate_id",
    "TOOLS5E_OPEN_GATE_TITLE": "open_gate_title",
    "TOOLS5E_IGNORED_TAGS": "ignored_tags",
}


class TagLinkSettings(BaseModel):
    """Configuration for data sources and link generation."""
    mode: Literal["link", "opengate"] = Field(
        default="opengate",
        description="'link' opens pages in the browser, 'opengate' in an Open Gate view",
    )
    tools5e_url: str = Field(default=DEFAULT_TOOLS5E_URL, description="Base URL of the 5etools instance")
    homebrew_repo_url: str = Field(
        default=DEFAULT_HOMEBREW_REPO_URL,
        description="GitHub URL of the homebrew repository",
    )
    hide_icons: bool = False
    open_gate_id: str = "5etools"
    open_gate_title: str = PLUGIN_NAME
    ignored_tags: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value for key, value in data.items()
                if value is not None and value != "" and value != []
            }
        return data

    @classmethod
    def from_env(cls) -> TagLinkSettings:
        """Build settings from TOOLS5E_* environment variables."""
        values: dict[str, Any] = {}
        for env_var, field_name in ENV_VARS.items():
            raw = os.getenv(env_var, "").strip()
            if not raw:
                continue
            if field_name == "ignored_tags":
                values[field_name] = [t.strip() for t in raw.split(",") if t.strip()]
            elif field_name == "hide_icons":
                values[field_name] = raw.lower() in ("1", "true", "yes", "on")
            else:
                values[field_name] = raw
        return cls(**values)

    @property
    def raw_homebrew_repo_url(self) -> str:
        """Homebrew repository URL pointing at raw file content."""
        url = self.homebrew_repo_url.replace("github.com", "raw.githubusercontent.com")
        return url.rstrip("/")

    @property
    def homebrew_index_url(self) -> str:
        return f"{self.raw_homebrew_repo_url}/{HOMEBREW_INDEX_PATH}"

    def homebrew_file_url(self, path: str) -> str:
        return f"{self.raw_homebrew_repo_url}/{path.lstrip('/')}"

    def tools_data_url(self, filename: str) -> str:
        return f"{self.tools5e_url.rstrip('/')}/data/{filename.lstrip('/')}"

    def is_ignored(self, tag: str) -> bool:
        normalized = tag.lstrip("@").lower()
        return any(t.lstrip("@").lower() == normalized for t in self.ignored_tags)
