### tests/unit/llm_providers/impl/test_ollama_provider.py
import json
from typing import Any, Dict, List

import httpx
import pytest

from verona_voice.llm_providers.impl.ollama_provider import OllamaLLMProviderPlugin


def _transport(responses: List[httpx.Response], seen: List[Dict[str, Any]]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append({"url": str(request.url), "json": json.loads(request.content)})
        return responses.pop(0)
    return httpx.MockTransport(handler)


async def _provider_with(responses: List[httpx.Response], seen: List[Dict[str, Any]]) -> OllamaLLMProviderPlugin:
    provider = OllamaLLMProviderPlugin()
    client = httpx.AsyncClient(transport=_transport(responses, seen))
    await provider.setup(config={"base_url": "http://mock-ollama:11434/", "model_name": "test-ollama-model", "http_client": client})
    return provider


@pytest.mark.asyncio
async def test_ollama_generate_success():
    seen: List[Dict[str, Any]] = []
    provider = await _provider_with(
        [httpx.Response(200, json={"response": '{"intent": "GENERAL_QUERY", "message": "Hello"}', "done": True, "prompt_eval_count": 10, "eval_count": 5})],
        seen,
    )
    result = await provider.generate("Explain Llamas.", response_format="json", temperature=0.5, max_tokens=64)

    assert result["text"] == '{"intent": "GENERAL_QUERY", "message": "Hello"}'
    assert result["finish_reason"] == "done"
    assert result["usage"] == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
    assert seen[0]["url"] == "http://mock-ollama:11434/api/generate"
    payload = seen[0]["json"]
    assert payload["model"] == "test-ollama-model"
    assert payload["prompt"] == "Explain Llamas."
    assert payload["format"] == "json"
    assert payload["stream"] is False
    assert payload["options"] == {"num_predict": 64, "temperature": 0.5}
    await provider.teardown()


@pytest.mark.asyncio
async def test_ollama_http_error_raises_runtime_error():
    seen: List[Dict[str, Any]] = []
    provider = await _provider_with([httpx.Response(404, json={"error": "model not found"})], seen)
    with pytest.raises(RuntimeError, match="Ollama API error: 404 - model not found"):
        await provider.generate("hi")
    await provider.teardown()


@pytest.mark.asyncio
async def test_ollama_request_error_raises_runtime_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = OllamaLLMProviderPlugin()
    await provider.setup(config={"http_client": httpx.AsyncClient(transport=httpx.MockTransport(handler))})
    with pytest.raises(RuntimeError, match="Ollama request failed"):
        await provider.generate("hi")
    await provider.teardown()


@pytest.mark.asyncio
async def test_ollama_model_info_defaults():
    provider = OllamaLLMProviderPlugin()
    await provider.setup(config={"http_client": httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))})
    info = await provider.get_model_info()
    assert info == {"provider": "Ollama", "base_url": "http://localhost:11434", "default_model_configured": "llama3.1:8b"}
    await provider.teardown()
    assert provider._http_client is None
