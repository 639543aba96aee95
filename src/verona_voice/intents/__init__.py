"""Intent schema, prompt construction, reply validation and the IntentResolver."""
from .parser import MalformedReplyError, parse_intent_reply
from .prompt import build_intent_prompt
from .resolver import IntentResolver, Resolved, ResolutionFailed, ResolutionResult
from .types import (
    INTENT_TAGS,
    AddToCart,
    AnswerFaq,
    ErrorIntent,
    GeneralQuery,
    GetProductRecommendation,
    IntentResponse,
    IntentTag,
    NavigateToCheckout,
    NavigateToProduct,
)

__all__ = [
    "IntentResolver",
    "Resolved",
    "ResolutionFailed",
    "ResolutionResult",
    "MalformedReplyError",
    "parse_intent_reply",
    "build_intent_prompt",
    "INTENT_TAGS",
    "IntentTag",
    "IntentResponse",
    "AddToCart",
    "NavigateToProduct",
    "GetProductRecommendation",
    "AnswerFaq",
    "NavigateToCheckout",
    "GeneralQuery",
    "ErrorIntent",
]
