"""Parser registry — file extension to content parser table.

The registry is an explicitly constructed value passed to the site
builder; there is no module-level singleton. Registration is
last-wins, so embedding code can replace a built-in parser by
registering over its extension. A generation pass works on a frozen
:meth:`ParserRegistry.snapshot` so every document in the pass sees the
same mapping.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pagesmith.domain.errors import RegistryFrozenError, UnsupportedFormat
from pagesmith.plugins.base import ContentParser

logger = logging.getLogger(__name__)


def normalize_extension(extension: str) -> str:
    """``".MD"`` -> ``"md"``. Raises ValueError for an empty extension."""
    ext = extension.strip().lstrip(".").lower()
    if not ext:
        msg = f"Invalid extension: {extension!r}"
        raise ValueError(msg)
    return ext


class ParserRegistry:
    """Maps lower-cased extensions to parser instances."""

    def __init__(self) -> None:
        self._parsers: dict[str, ContentParser] = {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def register(self, extension: str, parser: ContentParser) -> ParserRegistry:
        """Bind *extension* to *parser*, replacing any previous binding."""
        if self._frozen:
            msg = f"Cannot register .{extension}: registry is frozen for generation"
            raise RegistryFrozenError(msg)
        if not isinstance(parser, ContentParser):
            msg = f"{parser!r} does not implement the ContentParser interface"
            raise TypeError(msg)

        ext = normalize_extension(extension)
        previous = self._parsers.get(ext)
        if previous is not None and previous is not parser:
            logger.debug("Overriding parser for .%s: %s -> %s", ext, previous.name, parser.name)
        self._parsers[ext] = parser
        return self

    def register_many(self, extensions: Iterable[str], parser: ContentParser) -> ParserRegistry:
        """Bind every extension in *extensions* to the same *parser* instance."""
        for extension in extensions:
            self.register(extension, parser)
        return self

    def snapshot(self) -> ParserRegistry:
        """Return a frozen copy; later changes to this registry do not leak in."""
        frozen = ParserRegistry()
        frozen._parsers = dict(self._parsers)
        frozen._frozen = True
        return frozen

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, path: Path | str) -> ContentParser:
        """Return the parser bound to *path*'s extension.

        Raises:
            UnsupportedFormat: If no parser handles the extension.
        """
        p = Path(path)
        ext = p.suffix.lstrip(".").lower()
        parser = self._parsers.get(ext) if ext else None
        if parser is None:
            raise UnsupportedFormat(ext, path=p)
        return parser

    def supports(self, path: Path | str) -> bool:
        return Path(path).suffix.lstrip(".").lower() in self._parsers

    def get(self, name: str) -> ContentParser | None:
        """Find a registered parser by its ``name``."""
        for parser in self._parsers.values():
            if parser.name == name:
                return parser
        return None

    def supported_extensions(self) -> list[str]:
        return sorted(self._parsers)

    def items(self) -> list[tuple[str, ContentParser]]:
        return sorted(self._parsers.items())

    def __contains__(self, extension: object) -> bool:
        if not isinstance(extension, str):
            return False
        return extension.strip().lstrip(".").lower() in self._parsers

    def __iter__(self) -> Iterator[str]:
        return iter(self.supported_extensions())

    def __len__(self) -> int:
        return len(self._parsers)


def default_registry() -> ParserRegistry:
    """A registry with the built-in markdown, TOML, JSON and text parsers."""
    from pagesmith.plugins.builtins import register_builtins

    return register_builtins(ParserRegistry())
