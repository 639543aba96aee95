"""
PluginManager for discovering, loading, and managing plugins.
"""
import importlib.metadata
import inspect
import logging
from typing import Any, Dict, Iterable, Optional, Type, cast

from .types import Plugin, PluginType

logger = logging.getLogger(__name__)

PLUGIN_ENTRY_POINT_GROUP = "verona_voice.plugins"

def _entry_points_for(group: str) -> Iterable[Any]:
    eps = importlib.metadata.entry_points()
    if hasattr(eps, "select"):
        return eps.select(group=group)
    if isinstance(eps, dict):
        # Python 3.9 returns a dict keyed by group.
        return eps.get(group, [])
    return []


class PluginManager:
    """
    Manages discovery, loading, and access to plugins.

    Plugin classes come from the `verona_voice.plugins` entry point group or
    are registered explicitly by the host (useful for host-specific speech
    backends and in tests). Instances are created lazily and cached by id.
    """
    def __init__(self, entry_point_group: str = PLUGIN_ENTRY_POINT_GROUP):
        self._entry_point_group = entry_point_group
        self._classes: Dict[str, Type[Plugin]] = {}
        self._sources: Dict[str, str] = {}
        self._instances: Dict[str, Plugin] = {}
        logger.debug(f"PluginManager initialized. Entry point group: '{self._entry_point_group}'")

    @staticmethod
    def is_plugin_class(obj: Any) -> bool:
        """A concrete class carrying a string `plugin_id`."""
        return (
            inspect.isclass(obj)
            and obj is not Plugin
            and isinstance(getattr(obj, "plugin_id", None), str)
            and not inspect.isabstract(obj)
        )

    async def discover_plugins(self) -> None:
        """Loads every plugin class advertised in the entry point group. Already known ids are kept."""
        try:
            entry_points = list(_entry_points_for(self._entry_point_group))
        except Exception as e:
            logger.error(f"Error iterating entry points for group '{self._entry_point_group}': {e}", exc_info=True)
            return

        for entry_point in entry_points:
            try:
                loaded = entry_point.load()
            except Exception as e:
                logger.error(f"Error loading plugin from entry point {entry_point.name}: {e}", exc_info=True)
                continue
            if not self.is_plugin_class(loaded):
                logger.warning(f"Entry point '{entry_point.name}' loaded invalid object type '{type(loaded)}' for plugin discovery.")
                continue
            plugin_id = loaded.plugin_id
            if plugin_id in self._classes:
                logger.debug(f"Plugin ID '{plugin_id}' already known from '{self._sources[plugin_id]}'. Skipping entry point '{entry_point.name}'.")
                continue
            self._classes[plugin_id] = cast(Type[Plugin], loaded)
            self._sources[plugin_id] = f"entry_point:{entry_point.name}"
        logger.info(f"Plugin discovery complete. Found {len(self._classes)} unique plugin classes.")

    def register_plugin_class(self, plugin_class: Type[Plugin], source: str = "explicit") -> None:
        """Registers a class directly. Re-registering an id with a different class drops its cached instance."""
        if not self.is_plugin_class(plugin_class):
            raise TypeError(f"'{plugin_class!r}' is not a valid plugin class (missing 'plugin_id' or abstract).")
        plugin_id = plugin_class.plugin_id
        previous = self._classes.get(plugin_id)
        if previous is not None and previous is not plugin_class:
            logger.warning(f"Plugin ID '{plugin_id}' re-registered; replacing class from '{self._sources.get(plugin_id)}'.")
            self._instances.pop(plugin_id, None)
        self._classes[plugin_id] = plugin_class
        self._sources[plugin_id] = source
        logger.debug(f"Registered plugin class '{plugin_id}' ({source}).")

    async def get_plugin_instance(self, plugin_id: str, config: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Optional[PluginType]:
        cached = self._instances.get(plugin_id)
        if cached is not None:
            return cast(PluginType, cached)
        plugin_class = self._classes.get(plugin_id)
        if plugin_class is None:
            logger.warning(f"Plugin class ID '{plugin_id}' not found.")
            return None
        try:
            instance = plugin_class(**kwargs)  # type: ignore
            await instance.setup(config=config or {})
        except Exception as e:
            logger.error(f"Error instantiating/setting up plugin '{plugin_id}': {e}", exc_info=True)
            return None
        self._instances[plugin_id] = instance
        logger.debug(f"Plugin '{plugin_id}' instantiated and set up.")
        return cast(PluginType, instance)

    async def teardown_all_plugins(self) -> None:
        logger.info(f"Tearing down {len(self._instances)} plugin instance(s)...")
        instances, self._instances = self._instances, {}
        for plugin_id, instance in instances.items():
            try:
                await instance.teardown()
            except Exception as e:
                logger.error(f"Error tearing down plugin '{plugin_id}': {e}", exc_info=True)
        logger.info("All plugin instances cleared after teardown.")

    def list_discovered_plugin_classes(self) -> Dict[str, Type[Plugin]]:
        return dict(self._classes)
