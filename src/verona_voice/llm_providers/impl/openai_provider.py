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
    from openai import APIError, AsyncOpenAI  # type: ignore
except ImportError:
    AsyncOpenAI = None # type: ignore
    APIError = Exception # type: ignore
    logger.warning(
        "OpenAILLMProviderPlugin: 'openai' library (>=1.0) not installed. "
        "This plugin will not be functional. Please install it."
    )


class OpenAILLMProviderPlugin(LLMProviderPlugin):
    """Chat-completions backend. Each prompt is sent as a single user message."""
    plugin_id: str = "openai_llm_provider_v1"
    description: str = "LLM provider for OpenAI chat models using the openai library."

    _client: Optional[Any] = None
    _model_name: str = "gpt-4o-mini"
    _api_key_name: str = "OPENAI_API_KEY"
    _missing_api_key: bool = False

    async def setup(self, config: Optional[Dict[str, Any]]) -> None:
        await super().setup(config)
        if not AsyncOpenAI:
            logger.error(f"{self.plugin_id}: 'openai' library (>=1.0) is not available. Cannot proceed.")
            return

        cfg = config or {}
        self._model_name = cfg.get("model_name") or self._model_name
        api_key = await read_api_key(self.plugin_id, cfg, self._api_key_name)
        self._missing_api_key = api_key is None
        if api_key is None:
            return
        try:
            # base_url covers Azure deployments and compatible proxies.
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=cfg.get("openai_api_base"),
                organization=cfg.get("openai_organization"),
            )
            logger.info(f"{self.plugin_id}: Initialized OpenAI client for model '{self._model_name}'.")
        except Exception as e:
            logger.error(f"{self.plugin_id}: Failed to initialize OpenAI client: {e}", exc_info=True)
            self._client = None

    @staticmethod
    def _build_request(prompt: str, model: str, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        request: Dict[str, Any] = {"model": model, "messages": [{"role": "user", "content": prompt}]}
        for name in ("temperature", "max_tokens"):
            if kwargs.get(name) is not None:
                request[name] = kwargs[name]
        if kwargs.get("response_format") == "json":
            request["response_format"] = {"type": "json_object"}
        return request

    @staticmethod
    def _usage(response: Any) -> Optional[LLMUsageInfo]:
        usage = getattr(response, "usage", None)
        if not usage:
            return None
        return {
            "prompt_tokens": usage.prompt_tokens,
            "completion_tokens": usage.completion_tokens,
            "total_tokens": usage.total_tokens,
        }

    async def generate(self, prompt: str, **kwargs: Any) -> LLMCompletionResponse:
        if not self._client:
            raise LLMProviderUnavailableError(f"{self.plugin_id}: Client not initialized.", missing_api_key=self._missing_api_key)

        request = self._build_request(prompt, kwargs.pop("model", self._model_name), kwargs)
        try:
            response = await self._client.chat.completions.create(**request)
        except APIError as e:
            status = getattr(e, "status_code", None)
            detail = getattr(e, "message", str(e))
            logger.error(f"{self.plugin_id}: OpenAI API error during generate: {status} - {detail}", exc_info=True)
            raise RuntimeError(f"OpenAI API error: {status} - {detail}") from e
        except Exception as e:
            logger.error(f"{self.plugin_id}: Unexpected error during generate: {e}", exc_info=True)
            raise RuntimeError(f"Unexpected error in OpenAI generate: {e}") from e

        choice = response.choices[0] if response.choices else None
        return LLMCompletionResponse(
            text=(choice.message.content or "") if choice else "",
            finish_reason=choice.finish_reason if choice else None,
            usage=self._usage(response),
            raw_response=response.model_dump(exclude_none=True),
        )

    async def get_model_info(self) -> Dict[str, Any]:
        return {
            "provider": "OpenAI",
            "model_name_configured": self._model_name,
            "client_ready": self._client is not None,
        }

    async def teardown(self) -> None:
        client, self._client = self._client, None
        if client:
            await client.close()
        logger.info(f"{self.plugin_id}: Teardown complete.")
        await super().teardown()
