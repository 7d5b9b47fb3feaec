"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus direct registration of built-in plugin instances.
Capabilities: document types and document lifecycle hooks.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from multipress.plugins.hookspecs import MultipressHookSpec

if TYPE_CHECKING:
    from multipress.domain.document_types import DocumentType

PROJECT_NAME = "multipress"
ENTRY_POINT_GROUP = "multipress.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MultipressHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, builtins: bool = True) -> list[str]:
        """Load entry-point plugins and, unless disabled, the built-in ones.

        Returns a list of loaded plugin names.
        """
        if builtins:
            from multipress.plugins.builtins.pages import PagesPlugin

            self.register_plugin(PagesPlugin(), name="pages")
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        """Return all registered plugins."""
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Document types
    # ------------------------------------------------------------------

    def collect_document_types(self) -> list[DocumentType]:
        """Gather document types from every plugin's ``register_document_types``.

        A plugin that raises or returns something other than a list is
        skipped with a warning; the other plugins still contribute.
        """
        collected: list[DocumentType] = []
        for plugin in self._pm.get_plugins():
            hook = getattr(plugin, "register_document_types", None)
            if hook is None:
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            try:
                types = hook()
            except Exception:
                logger.warning(
                    "Failed to collect document types from plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            if types is None:
                continue
            if not isinstance(types, list | tuple):
                logger.warning("Plugin %s returned non-list document types", plugin_name)
                continue
            collected.extend(types)
        return collected

    # ------------------------------------------------------------------
    # Entry-point normalization
    # ------------------------------------------------------------------

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("multipress")`` sets a ``multipress_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "multipress_impl", None):
                return True
        return False
