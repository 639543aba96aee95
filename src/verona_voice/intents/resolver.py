# src/verona_voice/intents/resolver.py
import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Literal, Optional, Union

from verona_voice.catalog.types import FaqCatalog, ProductCatalog
from verona_voice.config.models import ConciergeMessages
from verona_voice.llm_providers.abc import (
    LLMProviderPlugin,
    LLMProviderUnavailableError,
)

from .parser import MalformedReplyError, parse_intent_reply
from .prompt import build_intent_prompt
from .types import ErrorIntent, IntentResponse

if TYPE_CHECKING:
    from verona_voice.conversation.types import ConversationContext

logger = logging.getLogger(__name__)

FailureKind = Literal["network_failure", "malformed_response", "capability_unavailable"]


@dataclass(frozen=True)
class Resolved:
    response: IntentResponse
    raw_text: str = ""


@dataclass(frozen=True)
class ResolutionFailed:
    """A failed resolution. `response` is the Error intent to act on; `detail` is for logs only."""
    response: ErrorIntent
    kind: FailureKind
    detail: str


ResolutionResult = Union[Resolved, ResolutionFailed]


class IntentResolver:
    """
    Turns one utterance into a validated IntentResponse.

    Stateless between calls: the catalogs and conversation context are passed
    to every `resolve`. `resolve` never raises; each failure path returns a
    `ResolutionFailed` whose response is the ERROR intent with a fixed message.
    """

    def __init__(
        self,
        provider: Optional[LLMProviderPlugin],
        messages: Optional[ConciergeMessages] = None,
        request_timeout_seconds: Optional[float] = 30.0,
        store_name: str = "StyleSphere",
        persona_name: str = "Luca",
        generation_kwargs: Optional[Dict[str, Any]] = None,
    ):
        self._provider = provider
        self._messages = messages or ConciergeMessages()
        self._timeout = request_timeout_seconds
        self._store_name = store_name
        self._persona_name = persona_name
        self._generation_kwargs = dict(generation_kwargs or {})

    def _failed(self, kind: FailureKind, detail: str, message: Optional[str] = None) -> ResolutionFailed:
        return ResolutionFailed(
            response=ErrorIntent(message=message or self._messages.fallback_error),
            kind=kind,
            detail=detail,
        )

    async def resolve(
        self,
        utterance: str,
        product_catalog: ProductCatalog,
        faq_catalog: FaqCatalog,
        context: Optional["ConversationContext"] = None,
    ) -> ResolutionResult:
        if self._provider is None:
            logger.error("IntentResolver: No language-model provider configured (API key missing or provider disabled).")
            return self._failed("capability_unavailable", "no provider configured", self._messages.missing_api_key)

        context_ids = list(context.last_recommended_product_ids) if context else []
        try:
            prompt = build_intent_prompt(
                utterance,
                product_catalog,
                faq_catalog,
                context_product_ids=context_ids,
                store_name=self._store_name,
                persona_name=self._persona_name,
            )
        except Exception as e:
            logger.error(f"IntentResolver: Failed to build prompt: {e}", exc_info=True)
            return self._failed("malformed_response", f"prompt construction failed: {e}")

        provider_id = getattr(self._provider, "plugin_id", type(self._provider).__name__)
        request_kwargs = {**self._generation_kwargs, "response_format": "json"}
        try:
            completion = await asyncio.wait_for(self._provider.generate(prompt, **request_kwargs), timeout=self._timeout)
        except LLMProviderUnavailableError as e:
            logger.error(f"IntentResolver: Provider '{provider_id}' unavailable: {e}")
            message = self._messages.missing_api_key if e.missing_api_key else None
            return self._failed("capability_unavailable", str(e), message)
        except asyncio.TimeoutError:
            logger.warning(f"IntentResolver: Provider '{provider_id}' did not answer within {self._timeout}s.")
            return self._failed("network_failure", f"timeout after {self._timeout}s")
        except Exception as e:
            logger.error(f"IntentResolver: Provider '{provider_id}' call failed: {e}", exc_info=True)
            return self._failed("network_failure", str(e))

        raw_text = (completion or {}).get("text") or ""
        try:
            response = parse_intent_reply(raw_text)
        except MalformedReplyError as e:
            logger.warning(f"IntentResolver: Malformed reply from '{provider_id}': {e} Raw reply (first 500 chars): {raw_text[:500]!r}")
            return self._failed("malformed_response", str(e))

        logger.info(f"IntentResolver: Resolved utterance to '{response.intent}'.")
        return Resolved(response=response, raw_text=raw_text)
