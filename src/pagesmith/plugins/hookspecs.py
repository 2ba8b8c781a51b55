"""Pluggy hook specifications for pagesmith parser plugins.

Hooks run once, while the registry is still being configured; the
registry is frozen before any document is parsed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pagesmith.plugins.registry import ParserRegistry

hookspec = pluggy.HookspecMarker("pagesmith")
hookimpl = pluggy.HookimplMarker("pagesmith")


class PagesmithHookSpec:
    """Hook specifications for the pagesmith plugin system."""

    @hookspec
    def register_parsers(self, registry: ParserRegistry) -> None:
        """Register or override content parsers on *registry*."""
