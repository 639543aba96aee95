"""Core framework components like the PluginManager and base types."""
from .plugin_manager import PluginManager
from .types import ErrorKind, Plugin, PluginType

__all__ = ["PluginManager", "Plugin", "PluginType", "ErrorKind"]
