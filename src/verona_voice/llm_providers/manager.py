# src/verona_voice/llm_providers/manager.py
import logging
from typing import Any, Dict, Optional

from verona_voice.config.models import ConciergeConfig
from verona_voice.core.plugin_manager import PluginManager
from verona_voice.security.key_provider import KeyProvider

from .abc import LLMProviderPlugin

logger = logging.getLogger(__name__)


class LLMProviderManager:
    """
    Owns the language model provider instances of one concierge.

    Providers are created on first use from the resolved configuration, with
    the concierge's KeyProvider injected unless the configuration names its own.
    """

    def __init__(self, plugin_manager: PluginManager, key_provider: KeyProvider, config: ConciergeConfig):
        self._plugin_manager = plugin_manager
        self._key_provider = key_provider
        self._config = config
        self._providers: Dict[str, LLMProviderPlugin] = {}
        logger.info("LLMProviderManager initialized.")

    def _setup_config_for(self, provider_id: str, config_override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        setup_config: Dict[str, Any] = {
            **self._config.llm_provider_configurations.get(provider_id, {}),
            **(config_override or {}),
        }
        setup_config.setdefault("key_provider", self._key_provider)
        return setup_config

    async def get_llm_provider(
        self, provider_id: Optional[str] = None, config_override: Optional[Dict[str, Any]] = None
    ) -> Optional[LLMProviderPlugin]:
        provider_id = provider_id or self._config.default_llm_provider_id
        if not provider_id:
            logger.info("LLMProviderManager: No LLM provider configured.")
            return None

        cached = self._providers.get(provider_id)
        if cached is not None:
            if config_override:
                logger.warning(f"LLM provider '{provider_id}' is already loaded; config override ignored.")
            return cached

        provider_class = self._plugin_manager.list_discovered_plugin_classes().get(provider_id)
        if provider_class is None:
            logger.error(f"LLMProviderPlugin class for ID '{provider_id}' not found in PluginManager.")
            return None

        setup_config = self._setup_config_for(provider_id, config_override)
        logger.debug(f"LLMProviderManager: setup config keys for '{provider_id}': {sorted(setup_config)}")
        try:
            provider = provider_class()  # type: ignore
            await provider.setup(config=setup_config)
        except Exception as e:
            logger.error(f"Error instantiating or setting up LLMProviderPlugin '{provider_id}': {e}", exc_info=True)
            return None
        if not isinstance(provider, LLMProviderPlugin):
            logger.error(f"Plugin '{provider_id}' is not a valid LLMProviderPlugin. Type: {type(provider)}")
            return None
        self._providers[provider_id] = provider
        logger.info(f"LLMProviderPlugin '{provider_id}' loaded and initialized.")
        return provider

    async def teardown(self) -> None:
        providers, self._providers = self._providers, {}
        for provider_id, provider in providers.items():
            try:
                await provider.teardown()
            except Exception as e:
                logger.error(f"Error tearing down LLMProviderPlugin '{provider_id}': {e}", exc_info=True)
        logger.info(f"LLMProviderManager teardown complete ({len(providers)} provider(s)).")
