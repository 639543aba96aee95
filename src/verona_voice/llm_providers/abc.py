# src/verona_voice/llm_providers/abc.py
import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from verona_voice.core.types import Plugin
from verona_voice.security.key_provider import KeyProvider

from .types import LLMCompletionResponse

logger = logging.getLogger(__name__)

class LLMProviderUnavailableError(RuntimeError):
    """Raised when a provider is asked to generate but never finished setup."""
    def __init__(self, message: str, missing_api_key: bool = False):
        super().__init__(message)
        self.missing_api_key = missing_api_key


async def read_api_key(plugin_id: str, config: Dict[str, Any], default_key_name: str) -> Optional[str]:
    """
    Fetches a provider's API key through the `key_provider` found in its setup config.

    `config["api_key_name"]` overrides `default_key_name`. Returns None, after
    logging, when no usable KeyProvider was injected or the key is unset.
    """
    key_provider = config.get("key_provider")
    if not isinstance(key_provider, KeyProvider):
        logger.error(f"{plugin_id}: KeyProvider not found in config or is invalid. Cannot fetch API key.")
        return None
    key_name = config.get("api_key_name", default_key_name)
    api_key = await key_provider.get_key(key_name)
    if not api_key:
        logger.error(f"{plugin_id}: API key '{key_name}' not found via KeyProvider.")
        return None
    return api_key

@runtime_checkable
class LLMProviderPlugin(Plugin, Protocol):
    """
    Protocol for a plugin that sends one prompt to a hosted completion service.
    """
    plugin_id: str
    description: str

    async def setup(self, config: Optional[Dict[str, Any]]) -> None:
        """
        Initializes the LLM provider.
        The 'config' dictionary is expected to contain 'key_provider: KeyProvider'
        if the specific LLM provider implementation requires API keys.
        """
        await super().setup(config)
        logger.debug(f"LLMProviderPlugin '{getattr(self, 'plugin_id', 'UnknownPluginID')}': Base setup logic (if any) completed.")

    async def generate(self, prompt: str, **kwargs: Any) -> LLMCompletionResponse:
        """
        Sends `prompt` and returns the completion.

        Recognised kwargs: `model`, `temperature`, `max_tokens`, and
        `response_format` ("text" or "json"; "json" asks the service for a
        JSON document). Transport and service errors are raised as
        RuntimeError; a provider that could not initialize raises
        LLMProviderUnavailableError.
        """
        logger.error(f"LLMProviderPlugin '{getattr(self, 'plugin_id', 'UnknownPluginID')}' generate method not implemented.")
        raise NotImplementedError(f"LLMProviderPlugin '{getattr(self, 'plugin_id', 'UnknownPluginID')}' does not implement 'generate'.")

    async def get_model_info(self) -> Dict[str, Any]:
        logger.debug(f"LLMProviderPlugin '{getattr(self, 'plugin_id', 'UnknownPluginID')}' get_model_info method not implemented. Returning empty dict.")
        return {}
