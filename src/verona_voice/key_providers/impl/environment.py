# src/verona_voice/key_providers/impl/environment.py
import logging
import os
from typing import Any, Dict, List, Optional

from verona_voice.core.types import Plugin
from verona_voice.security.key_provider import KeyProvider

logger = logging.getLogger(__name__)

class EnvironmentKeyProvider(KeyProvider, Plugin):
    plugin_id: str = "environment_key_provider_v1"
    description: str = "Provides API keys by reading them from environment variables."

    _fallback_names: Dict[str, List[str]]

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        # Hosts often export a single generic API_KEY for the storefront's model service.
        self._fallback_names = {k: list(v) for k, v in cfg.get("fallback_names", {"GOOGLE_API_KEY": ["API_KEY"]}).items()}
        logger.info(f"{self.plugin_id}: Initialized. Will read keys from environment variables.")

    async def get_key(self, key_name: str) -> Optional[str]:
        candidates = [key_name, *getattr(self, "_fallback_names", {}).get(key_name, [])]
        for candidate in candidates:
            key_value = os.environ.get(candidate)
            if key_value:
                logger.debug(f"{self.plugin_id}: Retrieved key '{key_name}' from environment variable '{candidate}' (exists).")
                return key_value
        logger.debug(f"{self.plugin_id}: Key '{key_name}' not found in environment variables.")
        return None

    async def teardown(self) -> None:
        logger.debug(f"{self.plugin_id}: Teardown complete.")
