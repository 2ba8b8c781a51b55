"""Built-in content parsers and their canonical extensions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagesmith.plugins.builtins.markdown import MarkdownParser
from pagesmith.plugins.builtins.structured import JsonParser, TomlParser
from pagesmith.plugins.builtins.text import TextParser

if TYPE_CHECKING:
    from pagesmith.plugins.registry import ParserRegistry

BUILTIN_PARSERS = (MarkdownParser, TomlParser, JsonParser, TextParser)


def register_builtins(registry: ParserRegistry) -> ParserRegistry:
    """Register one instance of each built-in parser for its extensions."""
    for parser_cls in BUILTIN_PARSERS:
        registry.register_many(parser_cls.extensions, parser_cls())
    return registry


__all__ = [
    "BUILTIN_PARSERS",
    "JsonParser",
    "MarkdownParser",
    "TextParser",
    "TomlParser",
    "register_builtins",
]
