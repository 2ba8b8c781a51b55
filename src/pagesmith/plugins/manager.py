"""Parser plugin discovery and application.

Plugins come from two places:

- the ``pagesmith.parsers`` entry-point group (pip-installed packages)
- single-file modules in the project's ``.pagesmith/plugins/`` directory

A plugin is any object with a ``@hookimpl``-decorated
``register_parsers(registry)`` method. INVARIANT: nothing a plugin does
can fail a run; every problem becomes a warning string.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

import pluggy

from pagesmith.plugins.hookspecs import PagesmithHookSpec

if TYPE_CHECKING:
    from pagesmith.plugins.registry import ParserRegistry

PROJECT_NAME = "pagesmith"
ENTRY_POINT_GROUP = "pagesmith.parsers"
LOCAL_MODULE_PREFIX = "pagesmith_local_plugin_"

logger = logging.getLogger(__name__)


def has_hook_impls(cls: type) -> bool:
    """True if any public attribute of *cls* is marked with ``@hookimpl``."""
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(cls, name, None), marker, None) is not None
        for name in dir(cls)
        if not name.startswith("_")
    )


def load_local_module(py_file: Path) -> ModuleType:
    """Import *py_file* under a private module name.

    Raises:
        ImportError: If no loader can be created for the file.
        Exception: Whatever executing the module raises.
    """
    module_name = LOCAL_MODULE_PREFIX + py_file.stem
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load {py_file}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def plugin_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* itself that implement at least one hook."""
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and has_hook_impls(obj):
            yield obj


class PluginManager:
    """Discovers parser plugins and lets them populate a registry."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PagesmithHookSpec)
        self._loaded = False
        self._load_warnings: list[str] = []

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def load_warnings(self) -> list[str]:
        """Problems met while discovering plugins (copy)."""
        return list(self._load_warnings)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an already-instantiated plugin."""
        resolved = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved)
        logger.debug("Registered plugin: %s", resolved)

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then *local_dir* plugins.

        Returns the names of all registered plugins.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception as exc:
            self._warn(f"Entry-point plugins failed to load: {exc}")
        self._instantiate_entry_point_classes()
        if local_dir is not None and local_dir.is_dir():
            for py_file in sorted(local_dir.glob("*.py")):
                if not py_file.name.startswith("_"):
                    self._load_local(py_file)
        self._loaded = True
        return self.plugin_names()

    def apply_parsers(self, registry: ParserRegistry) -> list[str]:
        """Call every ``register_parsers`` implementation against *registry*.

        Implementations run one at a time in registration order, so a later
        plugin can override an earlier binding and a failing plugin does
        not stop the rest. Returns one warning per failed plugin.
        """
        warnings: list[str] = []
        for impl in self._pm.hook.register_parsers.get_hookimpls():
            try:
                impl.function(registry=registry)
            except Exception as exc:
                logger.warning(
                    "Plugin %s failed to register parsers",
                    impl.plugin_name,
                    exc_info=True,
                )
                warnings.append(f"Plugin {impl.plugin_name} failed to register parsers: {exc}")
        return warnings

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _warn(self, message: str) -> None:
        logger.warning(message, exc_info=True)
        self._load_warnings.append(message)

    def _load_local(self, py_file: Path) -> None:
        try:
            module = load_local_module(py_file)
        except Exception as exc:
            self._warn(f"Local plugin {py_file.name} failed to load: {exc}")
            return
        for cls in plugin_classes(module):
            try:
                self.register_plugin(cls(), name=f"{module.__name__}.{cls.__name__}")
            except Exception as exc:
                self._warn(f"Local plugin {py_file.name}: cannot instantiate {cls.__name__}: {exc}")

    def _instantiate_entry_point_classes(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        An entry point may name a class; its hook methods would then be
        called unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not (inspect.isclass(plugin) and has_hook_impls(plugin)):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception as exc:
                self._warn(f"Entry-point plugin {name} cannot be instantiated: {exc}")
                continue
            self._pm.register(instance, name=name)
