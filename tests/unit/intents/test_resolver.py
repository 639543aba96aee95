### tests/unit/intents/test_resolver.py
import asyncio
import logging
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from verona_voice.config.models import ConciergeMessages
from verona_voice.conversation.types import ConversationContext
from verona_voice.intents.resolver import IntentResolver, ResolutionFailed, Resolved
from verona_voice.intents.types import AddToCart, ErrorIntent, GetProductRecommendation
from verona_voice.llm_providers.abc import LLMProviderUnavailableError

FALLBACK = "I'm sorry, I encountered an issue. Please try again or rephrase your request."
MISSING_KEY = "The concierge is currently unavailable. API key is missing."


def _provider(text: Optional[str] = None, side_effect: Optional[Any] = None) -> MagicMock:
    provider = MagicMock()
    provider.plugin_id = "mock_llm_provider_v1"
    provider.generate = AsyncMock(
        return_value={"text": text, "finish_reason": "stop", "usage": None, "raw_response": None},
        side_effect=side_effect,
    )
    return provider


@pytest.mark.asyncio
async def test_resolve_success_requests_json(sample_products, sample_faqs):
    provider = _provider('{"intent": "ADD_TO_CART", "productId": "d1", "message": "Adding Summer Dress."}')
    resolver = IntentResolver(provider, generation_kwargs={"temperature": 0.1})

    result = await resolver.resolve("add the summer dress", sample_products, sample_faqs)

    assert isinstance(result, Resolved)
    assert isinstance(result.response, AddToCart)
    assert result.response.product_id == "d1"
    prompt = provider.generate.call_args.args[0]
    assert "add the summer dress" in prompt
    assert provider.generate.call_args.kwargs == {"temperature": 0.1, "response_format": "json"}


@pytest.mark.asyncio
async def test_resolve_context_is_embedded_in_prompt(sample_products, sample_faqs):
    provider = _provider('{"intent": "ADD_TO_CART", "productId": "d1", "message": "Adding Summer Dress."}')
    resolver = IntentResolver(provider)
    context = ConversationContext(last_recommended_product_ids=("d1", "d2"))

    result = await resolver.resolve("add it to cart", sample_products, sample_faqs, context)

    prompt = provider.generate.call_args.args[0]
    assert "- Summer Dress (ID: d1)" in prompt
    assert "- Linen Shirt (ID: d2)" in prompt
    assert result.response.product_id == "d1"


@pytest.mark.asyncio
async def test_resolve_fenced_reply(sample_products, sample_faqs):
    provider = _provider('```json\n{"intent": "GET_PRODUCT_RECOMMENDATION", "query": "summer", "message": "Try it."}\n```')
    result = await IntentResolver(provider).resolve("summer", sample_products, sample_faqs)
    assert isinstance(result, Resolved)
    assert isinstance(result.response, GetProductRecommendation)
    assert result.response.suggested_product_ids == []


@pytest.mark.asyncio
async def test_resolve_without_provider_reports_missing_key(sample_products, sample_faqs):
    result = await IntentResolver(None).resolve("hello", sample_products, sample_faqs)
    assert isinstance(result, ResolutionFailed)
    assert result.kind == "capability_unavailable"
    assert isinstance(result.response, ErrorIntent)
    assert result.response.message == MISSING_KEY


@pytest.mark.asyncio
async def test_resolve_provider_missing_key(sample_products, sample_faqs):
    provider = _provider(side_effect=LLMProviderUnavailableError("no key", missing_api_key=True))
    result = await IntentResolver(provider).resolve("hello", sample_products, sample_faqs)
    assert result.kind == "capability_unavailable"
    assert result.response.message == MISSING_KEY


@pytest.mark.asyncio
async def test_resolve_provider_unavailable_without_key_flag(sample_products, sample_faqs):
    provider = _provider(side_effect=LLMProviderUnavailableError("client not initialized"))
    result = await IntentResolver(provider).resolve("hello", sample_products, sample_faqs)
    assert result.kind == "capability_unavailable"
    assert result.response.message == FALLBACK


@pytest.mark.asyncio
async def test_resolve_network_failure_is_logged_not_surfaced(sample_products, sample_faqs, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.ERROR, logger="verona_voice.intents.resolver")
    provider = _provider(side_effect=RuntimeError("Gemini API call failed: 503 upstream"))
    result = await IntentResolver(provider).resolve("hello", sample_products, sample_faqs)
    assert isinstance(result, ResolutionFailed)
    assert result.kind == "network_failure"
    assert result.response.message == FALLBACK
    assert "503 upstream" in result.detail
    assert "503 upstream" not in result.response.message
    assert "503 upstream" in caplog.text


@pytest.mark.asyncio
async def test_resolve_timeout(sample_products, sample_faqs):
    async def never_answers(prompt: str, **kwargs: Any):
        await asyncio.sleep(10)

    provider = MagicMock()
    provider.plugin_id = "slow_llm_provider_v1"
    provider.generate = never_answers
    result = await IntentResolver(provider, request_timeout_seconds=0.01).resolve("hello", sample_products, sample_faqs)
    assert result.kind == "network_failure"
    assert result.response.message == FALLBACK


@pytest.mark.parametrize(
    "reply",
    [
        "Sure! I'd recommend the Summer Dress.",
        '{"intent": "DANCE", "message": "Let us dance."}',
        '{"intent": "GENERAL_QUERY", "message": ""}',
        None,
    ],
)
@pytest.mark.asyncio
async def test_resolve_malformed_reply(reply, sample_products, sample_faqs):
    result = await IntentResolver(_provider(reply)).resolve("hello", sample_products, sample_faqs)
    assert isinstance(result, ResolutionFailed)
    assert result.kind == "malformed_response"
    assert result.response.message == FALLBACK


@pytest.mark.asyncio
async def test_resolve_uses_configured_messages(sample_products, sample_faqs):
    messages = ConciergeMessages(fallback_error="Please try again later.")
    provider = _provider(side_effect=RuntimeError("down"))
    result = await IntentResolver(provider, messages=messages).resolve("hello", sample_products, sample_faqs)
    assert result.response.message == "Please try again later."
