import logging
from typing import Any, Dict, Optional

from verona_voice.llm_providers.abc import (
    LLMProviderPlugin,
    LLMProviderUnavailableError,
    read_api_key,
)
from verona_voice.llm_providers.types import LLMCompletionResponse, LLMUsageInfo

logger = logging.getLogger(__name__)

try:
    from google import genai
    from google.genai import types as genai_types
    GEMINI_SDK_AVAILABLE = True
except ImportError:
    genai = None # type: ignore
    genai_types = None # type: ignore
    GEMINI_SDK_AVAILABLE = False
    logger.warning(
        "GeminiLLMProviderPlugin: 'google-genai' library not installed. "
        "This plugin will not be functional. Please install it."
    )


class GeminiLLMProviderPlugin(LLMProviderPlugin):
    plugin_id: str = "gemini_llm_provider_v1"
    description: str = "LLM provider for Google Gemini models using the google-genai SDK."

    _client: Optional[Any] = None
    _model_name: str = "gemini-2.5-flash"
    _api_key_name: str = "GOOGLE_API_KEY"
    _missing_api_key: bool = False

    async def setup(self, config: Optional[Dict[str, Any]]) -> None:
        await super().setup(config)
        if not GEMINI_SDK_AVAILABLE or not genai:
            logger.error(f"{self.plugin_id}: 'google-genai' library is not available. Cannot proceed.")
            return

        cfg = config or {}
        self._model_name = cfg.get("model_name") or self._model_name
        # No fallback to ambient Google credentials: the key must come from the KeyProvider.
        api_key = await read_api_key(self.plugin_id, cfg, self._api_key_name)
        self._missing_api_key = api_key is None
        if api_key is None:
            return
        try:
            self._client = genai.Client(api_key=api_key)
            logger.info(f"{self.plugin_id}: Initialized Gemini client for model '{self._model_name}'.")
        except Exception as e:
            logger.error(f"{self.plugin_id}: Failed to initialize Gemini client: {e}", exc_info=True)
            self._client = None

    @staticmethod
    def _finish_reason(response: Any) -> str:
        candidates = getattr(response, "candidates", None)
        if not candidates or not candidates[0].finish_reason:
            return "unknown"
        reason = candidates[0].finish_reason
        return getattr(reason, "name", str(reason)).lower()

    @staticmethod
    def _usage(response: Any) -> Optional[LLMUsageInfo]:
        usage = getattr(response, "usage_metadata", None)
        if not usage:
            return None
        return {
            "prompt_tokens": usage.prompt_token_count,
            "completion_tokens": usage.candidates_token_count,
            "total_tokens": usage.total_token_count,
        }

    def _generation_config(self, kwargs: Dict[str, Any]) -> Optional[Any]:
        settings: Dict[str, Any] = {}
        if "temperature" in kwargs:
            settings["temperature"] = kwargs.pop("temperature")
        if "max_tokens" in kwargs:
            settings["max_output_tokens"] = kwargs.pop("max_tokens")
        if kwargs.pop("response_format", "text") == "json":
            settings["response_mime_type"] = "application/json"
        return genai_types.GenerateContentConfig(**settings) if settings else None

    async def generate(self, prompt: str, **kwargs: Any) -> LLMCompletionResponse:
        if not self._client or not getattr(self._client, "aio", None):
            raise LLMProviderUnavailableError(
                f"{self.plugin_id}: Client or async client (aio) not initialized.",
                missing_api_key=self._missing_api_key,
            )

        request: Dict[str, Any] = {"model": kwargs.pop("model", self._model_name), "contents": prompt}
        generation_config = self._generation_config(kwargs)
        if generation_config is not None:
            request["config"] = generation_config
        if kwargs:
            logger.debug(f"{self.plugin_id}: Unused kwargs for generate: {kwargs}")

        try:
            response = await self._client.aio.models.generate_content(**request)
        except Exception as e:
            logger.error(f"{self.plugin_id}: Gemini API call failed: {e}", exc_info=True)
            raise RuntimeError(f"Gemini API call failed: {e}") from e

        finish_reason = self._finish_reason(response)
        usage = self._usage(response)
        return LLMCompletionResponse(
            text=response.text or "",
            finish_reason=finish_reason,
            usage=usage,
            raw_response={"model": request["model"], "finish_reason": finish_reason, "usage": usage},
        )

    async def get_model_info(self) -> Dict[str, Any]:
        return {
            "provider": "Google Gemini",
            "model_name_configured": self._model_name,
            "client_ready": self._client is not None,
        }

    async def teardown(self) -> None:
        self._client = None
        logger.info(f"{self.plugin_id}: Teardown complete.")
        await super().teardown()
