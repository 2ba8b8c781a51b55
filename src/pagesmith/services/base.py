"""BaseService — shared foundation for pagesmith services.

Every service receives the resolved :class:`PagesmithSettings` at
construction time; services never read config files or env vars directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagesmith.config.settings import PagesmithSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class GenerateService(BaseService):
            def generate(self) -> ServiceResult:
                root = self._settings.content_root
                ...
    """

    def __init__(self, settings: PagesmithSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> PagesmithSettings:
        return self._settings
