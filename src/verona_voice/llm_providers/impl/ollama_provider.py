import json
import logging
from typing import Any, Dict, Optional

import httpx

from verona_voice.llm_providers.abc import (
    LLMProviderPlugin,
    LLMProviderUnavailableError,
)
from verona_voice.llm_providers.types import LLMCompletionResponse, LLMUsageInfo

logger = logging.getLogger(__name__)

# generate() kwargs forwarded verbatim into Ollama's "options" object.
_PASSTHROUGH_OPTIONS = ("num_ctx", "num_predict", "seed", "stop", "temperature", "top_k", "top_p")


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except json.JSONDecodeError:
        return response.text
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text


class OllamaLLMProviderPlugin(LLMProviderPlugin):
    """Non-streaming `/api/generate` calls against an Ollama server. Needs no API key."""
    plugin_id: str = "ollama_llm_provider_v1"
    description: str = "LLM provider for a local or remote Ollama instance (no API key)."

    _http_client: Optional[httpx.AsyncClient] = None
    _base_url: str = "http://localhost:11434"
    _default_model: str = "llama3.1:8b"

    async def setup(self, config: Optional[Dict[str, Any]]) -> None:
        await super().setup(config)
        cfg = config or {}
        self._base_url = (cfg.get("base_url") or self._base_url).rstrip("/")
        self._default_model = cfg.get("model_name") or self._default_model
        timeout = float(cfg.get("request_timeout_seconds", 120.0))
        self._http_client = cfg.get("http_client") or httpx.AsyncClient(timeout=timeout)
        logger.info(f"{self.plugin_id}: Using {self._base_url} with model '{self._default_model}'.")

    @staticmethod
    def _options_from(kwargs: Dict[str, Any]) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if "max_tokens" in kwargs:
            options["num_predict"] = kwargs.pop("max_tokens")
        for name in _PASSTHROUGH_OPTIONS:
            if name in kwargs:
                options[name] = kwargs.pop(name)
        return options

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self._http_client:
            raise LLMProviderUnavailableError(f"{self.plugin_id}: HTTP client not initialized.")
        url = f"{self._base_url}{endpoint}"
        logger.debug(f"{self.plugin_id}: POST {url} (model '{payload.get('model')}').")
        try:
            response = await self._http_client.post(url, json={**payload, "stream": False})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.error(f"{self.plugin_id}: {url} answered {e.response.status_code}: {detail}")
            raise RuntimeError(f"Ollama API error: {e.response.status_code} - {detail}") from e
        except httpx.RequestError as e:
            logger.error(f"{self.plugin_id}: Request to {url} failed: {e}", exc_info=True)
            raise RuntimeError(f"Ollama request failed: {e}") from e
        except json.JSONDecodeError as e:
            logger.error(f"{self.plugin_id}: {url} returned invalid JSON: {e}", exc_info=True)
            raise RuntimeError(f"Ollama response JSON decode error: {e}") from e

    async def generate(self, prompt: str, **kwargs: Any) -> LLMCompletionResponse:
        payload: Dict[str, Any] = {"model": kwargs.pop("model", self._default_model), "prompt": prompt}
        if kwargs.pop("response_format", "text") == "json":
            payload["format"] = "json"
        options = self._options_from(kwargs)
        if options:
            payload["options"] = options
        if kwargs:
            logger.debug(f"{self.plugin_id}: Ignoring unsupported kwargs: {sorted(kwargs)}")

        data = await self._post("/api/generate", payload)
        usage: LLMUsageInfo = {
            "prompt_tokens": data.get("prompt_eval_count"),
            "completion_tokens": data.get("eval_count"),
        }
        if usage["prompt_tokens"] is not None and usage["completion_tokens"] is not None:
            usage["total_tokens"] = usage["prompt_tokens"] + usage["completion_tokens"]
        return LLMCompletionResponse(
            text=data.get("response", ""),
            finish_reason="done" if data.get("done") else "unknown",
            usage=usage,
            raw_response=data,
        )

    async def get_model_info(self) -> Dict[str, Any]:
        return {"provider": "Ollama", "base_url": self._base_url, "default_model_configured": self._default_model}

    async def teardown(self) -> None:
        client, self._http_client = self._http_client, None
        if client:
            await client.aclose()
            logger.info(f"{self.plugin_id}: HTTP client closed.")
        await super().teardown()
