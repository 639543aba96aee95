"""Protocol for KeyProvider: supplies API keys to language-model providers."""
import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

@runtime_checkable
class KeyProvider(Protocol):
    """
    Protocol for a component that provides API keys.

    The host application may implement it (vault, app settings) or use the
    bundled `EnvironmentKeyProvider`. The engine never stores keys itself.
    """
    async def get_key(self, key_name: str) -> Optional[str]:
        """
        Asynchronously retrieves the API key value for the given key name.

        Args:
            key_name: The logical name of the key (e.g., "GOOGLE_API_KEY").

        Returns:
            The key string if found, otherwise None. Implementations may log
            that a key was requested but must never log its value.
        """
        ...
