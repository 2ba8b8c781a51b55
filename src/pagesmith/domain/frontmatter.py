"""Frontmatter model and the dual-syntax resolver.

Two block syntaxes are recognised at the head of a document:

- TOML, fenced by ``+++`` lines (tried first)
- YAML, fenced by ``---`` lines

Both decode into the same :class:`Frontmatter` record. Downstream code
never learns which syntax was used.

Resolution is split in two steps so parsers can tell the failures apart:

- :func:`split_frontmatter` locates the block. An opening delimiter with no
  closing one raises :class:`MalformedFrontmatter`; the body boundary is
  unknown, so callers treat it as fatal for the document.
- :func:`decode_frontmatter` turns the raw block into a record. Undecodable
  syntax also raises :class:`MalformedFrontmatter`, but the body is intact
  and callers may degrade to an empty record.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pagesmith.domain.errors import MalformedFrontmatter

Syntax = Literal["toml", "yaml"]

TOML_DELIMITER = "+++"
YAML_DELIMITER = "---"

# Fixed priority: TOML first, then YAML.
_DELIMITERS: tuple[tuple[Syntax, str], ...] = (
    ("toml", TOML_DELIMITER),
    ("yaml", YAML_DELIMITER),
)

FIELD_NAMES: tuple[str, ...] = (
    "title",
    "date",
    "list",
    "page_template",
    "sort_by",
    "sort_order",
    "excerpt",
    "theme",
    "theme_variant",
    "tags",
)


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


def _scalar_text(value: Any) -> Any:
    """Unquoted scalars (numbers, booleans, dates) as the text they were written as."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class Frontmatter(BaseModel):
    """Passive metadata record. Every field is optional.

    An all-empty instance is valid and is what documents without a
    frontmatter block carry. Unrecognised keys are kept in
    ``model_extra`` and never cause failure.

    The ``list`` key is exposed as :attr:`is_list` so the field does not
    shadow the builtin inside annotations.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    title: str | None = None
    date: str | None = None
    is_list: bool | None = Field(default=None, alias="list")
    page_template: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    excerpt: str | None = None
    theme: str | None = None
    theme_variant: str | None = None
    tags: list[str] | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_text(cls, value: Any) -> Any:
        # Unquoted TOML/YAML dates arrive as date objects.
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(
        "title",
        "page_template",
        "sort_by",
        "sort_order",
        "excerpt",
        "theme",
        "theme_variant",
        mode="before",
    )
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        return _scalar_text(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_to_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [_scalar_text(v) for v in value]
        return value

    @property
    def extras(self) -> dict[str, Any]:
        """Unrecognised keys, preserved as decoded."""
        return dict(self.model_extra or {})

    def is_empty(self) -> bool:
        """True when no field and no extra key is set."""
        return not self.model_fields_set and not self.model_extra


def frontmatter_from_mapping(data: Mapping[str, Any], *, path: Path | None = None) -> Frontmatter:
    """Map decoded key/value pairs onto a :class:`Frontmatter`.

    Raises:
        MalformedFrontmatter: If a recognised key carries an unusable value.
    """
    try:
        return Frontmatter.model_validate(dict(data))
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        msg = f"invalid value for {fields or 'frontmatter'}"
        raise MalformedFrontmatter(msg, path=path) from exc


# ---------------------------------------------------------------------------
# Block detection
# ---------------------------------------------------------------------------


def split_frontmatter(content: str, *, path: Path | None = None) -> tuple[Syntax | None, str, str]:
    """Locate a frontmatter block at the start of *content*.

    Leading whitespace before the opening delimiter is ignored. ``\\r\\n``
    line endings are accepted.

    Returns:
        ``(syntax, raw_block, body)``. When no opening delimiter is present,
        ``syntax`` is None, ``raw_block`` is empty and ``body`` is *content*
        unchanged.

    Raises:
        MalformedFrontmatter: Opening delimiter without a matching close.
    """
    normalized = content.replace("\r\n", "\n").lstrip()
    lines = normalized.split("\n")
    opening = lines[0].strip()

    for syntax, delimiter in _DELIMITERS:
        if opening != delimiter:
            continue
        for idx, line in enumerate(lines[1:], start=1):
            if line.strip() == delimiter:
                raw = "\n".join(lines[1:idx])
                body = "\n".join(lines[idx + 1 :]).lstrip()
                return syntax, raw, body
        msg = f"missing closing {delimiter!r} delimiter"
        raise MalformedFrontmatter(msg, path=path)

    return None, "", content


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader (YAML objects carry parser state)."""
    return YAML(typ="safe", pure=True)


def _decode_toml(raw: str) -> dict[str, Any]:
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"invalid TOML: {exc}"
        raise MalformedFrontmatter(msg) from exc


def _decode_yaml(raw: str) -> dict[str, Any]:
    try:
        data = _new_yaml().load(raw)
    except YAMLError as exc:
        msg = f"invalid YAML: {exc}"
        raise MalformedFrontmatter(msg) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"YAML block must be a mapping, got {type(data).__name__}"
        raise MalformedFrontmatter(msg)
    return data


_DECODERS = {"toml": _decode_toml, "yaml": _decode_yaml}


def decode_frontmatter(syntax: Syntax, raw: str, *, path: Path | None = None) -> Frontmatter:
    """Decode a raw block of the given syntax into a :class:`Frontmatter`.

    Raises:
        MalformedFrontmatter: If the block is not valid for its syntax or a
            recognised key has an unusable value.
    """
    try:
        data = _DECODERS[syntax](raw)
    except MalformedFrontmatter as exc:
        exc.path = path
        raise
    return frontmatter_from_mapping(data, path=path)


def resolve_frontmatter(content: str, *, path: Path | None = None) -> tuple[Frontmatter, str]:
    """Strict resolution: ``(frontmatter, body)`` or :class:`MalformedFrontmatter`.

    Documents without a block yield an empty record and the content unchanged.
    """
    syntax, raw, body = split_frontmatter(content, path=path)
    if syntax is None:
        return Frontmatter(), body
    return decode_frontmatter(syntax, raw, path=path), body
