"""Abstract Base Classes/Protocols for LogAdapter Plugins."""
import logging
from typing import Any, Dict, Protocol, runtime_checkable

from verona_voice.core.types import Plugin

logger = logging.getLogger(__name__)

@runtime_checkable
class LogAdapter(Plugin, Protocol):
    """Protocol for a logging/monitoring adapter."""
    plugin_id: str
    description: str

    async def setup(self, config: Dict[str, Any]) -> None:
        """
        Configures logging handlers or integrates with external monitoring systems.
        Called once after the adapter is instantiated.
        """
        pass

    async def process_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Records a structured session event (e.g., "session.opened", "turn.resolved").
        Implementations must not raise.
        """
        pass
