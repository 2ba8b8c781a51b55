"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, pagesmith.toml only contains
overrides. An empty (or missing) config file is a valid project.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from pagesmith.infrastructure.filesystem import DEFAULT_EXCLUDES

# --- pagesmith.toml sections ---


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    title: str = "My Site"


class ContentConfig(BaseModel):
    """[content] section."""

    model_config = {"frozen": True}

    root: str = "content"
    exclude: list[str] = Field(default_factory=lambda: sorted(DEFAULT_EXCLUDES))
    index_name: str = "index"


class ParsersConfig(BaseModel):
    """[parsers] section.

    ``aliases`` maps an extra extension onto a built-in parser by name,
    e.g. ``{"mdx" = "markdown"}``.
    """

    model_config = {"frozen": True}

    aliases: dict[str, str] = Field(default_factory=dict)
    plugins: bool = True

    @field_validator("aliases")
    @classmethod
    def _normalize_aliases(cls, value: dict[str, str]) -> dict[str, str]:
        return {ext.strip().lstrip(".").lower(): name for ext, name in value.items()}


class GenerationConfig(BaseModel):
    """[generation] section."""

    model_config = {"frozen": True}

    workers: int = Field(default=4, ge=1)

