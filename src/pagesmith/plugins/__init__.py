"""Extension layer — parser contract, registry, and plugin discovery via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from pagesmith.plugins.base import ContentParser
from pagesmith.plugins.manager import PluginManager
from pagesmith.plugins.registry import ParserRegistry, default_registry

__all__ = ["ContentParser", "ParserRegistry", "PluginManager", "default_registry"]
