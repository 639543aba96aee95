# src/verona_voice/core/types.py
"""Core shared types and protocols for the concierge engine."""
import logging
from typing import (
    Any,
    Dict,
    Literal,
    Optional,
    Protocol,
    TypeVar,
    runtime_checkable,
)

logger = logging.getLogger(__name__)

@runtime_checkable
class Plugin(Protocol):
    """Base protocol for all plugins."""
    @property
    def plugin_id(self) -> str:
        """A unique string identifier for this plugin instance/type."""
        ...

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Optional asynchronous setup method for plugins.

        Called by the PluginManager right after instantiation. This is where a
        plugin receives its configuration: the dictionary stored for its
        `plugin_id` in the matching `*_configurations` field of
        `ConciergeConfig`, plus any runtime collaborators (for example a
        `key_provider`) injected by the owning manager.

        Setup must not raise. A plugin that cannot initialize logs the problem
        and stays non-functional; its capability check then reports False.
        """
        pass

    async def teardown(self) -> None:
        """Optional asynchronous teardown method for plugins. Called before application shutdown."""
        pass

PluginType = TypeVar("PluginType", bound=Plugin)

# --- Error taxonomy ---
ErrorKind = Literal[
    "capability_unavailable",
    "permission_denied",
    "device_unavailable",
    "no_speech_detected",
    "network_failure",
    "malformed_response",
    "unresolved_reference",
]
