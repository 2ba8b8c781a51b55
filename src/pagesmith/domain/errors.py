"""Exception taxonomy for content ingestion.

Per-document failures are raised by parsers and the registry, then
captured by the site builder as :class:`~pagesmith.domain.content.DocumentIssue`
records. A single bad file never aborts a generation pass.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

ParseKind = Literal["frontmatter", "body"]

# Issue codes surfaced to callers (DocumentIssue.code).
UNSUPPORTED_FORMAT = "unsupported_format"
MALFORMED_FRONTMATTER = "malformed_frontmatter"
MALFORMED_BODY = "malformed_body"
INVALID_SORT_CONFIGURATION = "invalid_sort_configuration"
UNREADABLE_FILE = "unreadable_file"
PARSER_FAILURE = "parser_failure"


class ContentError(Exception):
    """Base class for every per-document content failure."""

    code: str = "content_error"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class UnsupportedFormat(ContentError):
    """No parser is registered for a file extension."""

    code = UNSUPPORTED_FORMAT

    def __init__(self, extension: str, *, path: Path | None = None) -> None:
        shown = f".{extension}" if extension else "(no extension)"
        super().__init__(f"No parser registered for {shown} files", path=path)
        self.extension = extension


class ParseError(ContentError):
    """Content could not be decoded.

    Attributes:
        kind: Which part of the document failed (``"frontmatter"`` or ``"body"``).
        detail: The underlying decoder message.
        parser: Name of the parser that raised, when known.
    """

    code = "malformed"

    def __init__(
        self,
        kind: ParseKind,
        detail: str,
        *,
        path: Path | None = None,
        parser: str | None = None,
    ) -> None:
        super().__init__(f"Malformed {kind}: {detail}", path=path)
        self.kind = kind
        self.detail = detail
        self.parser = parser


class MalformedFrontmatter(ParseError):
    """Frontmatter block is unterminated or not decodable."""

    code = MALFORMED_FRONTMATTER

    def __init__(
        self,
        detail: str,
        *,
        path: Path | None = None,
        parser: str | None = None,
    ) -> None:
        super().__init__("frontmatter", detail, path=path, parser=parser)


class MalformedBody(ParseError):
    """Structured-data body cannot be decoded at all."""

    code = MALFORMED_BODY

    def __init__(
        self,
        detail: str,
        *,
        path: Path | None = None,
        parser: str | None = None,
    ) -> None:
        super().__init__("body", detail, path=path, parser=parser)


class RegistryFrozenError(RuntimeError):
    """Raised when a parser is registered after generation has begun."""


class GenerationCancelled(RuntimeError):
    """A generation pass was aborted; its partial results are discarded."""
