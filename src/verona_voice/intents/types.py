# src/verona_voice/intents/types.py
"""
Intent schema for the language-model reply.

The reply is one JSON object tagged by `intent`. Keys are camelCase on the
wire (`productId`, `suggestedProductIds`, ...) and snake_case in Python.
"""
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

IntentTag = Literal[
    "ADD_TO_CART",
    "NAVIGATE_TO_PRODUCT",
    "GET_PRODUCT_RECOMMENDATION",
    "ANSWER_FAQ",
    "NAVIGATE_TO_CHECKOUT",
    "GENERAL_QUERY",
    "ERROR",
]

INTENT_TAGS: Tuple[str, ...] = (
    "ADD_TO_CART",
    "NAVIGATE_TO_PRODUCT",
    "GET_PRODUCT_RECOMMENDATION",
    "ANSWER_FAQ",
    "NAVIGATE_TO_CHECKOUT",
    "GENERAL_QUERY",
    "ERROR",
)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    raise ValueError(f"Expected a string, got {type(value).__name__}.")


def _unit_count(value: Any) -> int:
    """A positive whole count, or 1 for anything else (absent, zero, negative, fractional, text)."""
    if isinstance(value, bool):
        return 1
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value >= 1:
        return value
    return 1


def _text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, int)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Expected a list, got {type(value).__name__}.")
    return [text for text in (_optional_text(v) for v in value) if text]


class _IntentBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    message: str

    @field_validator("message", mode="before")
    @classmethod
    def message_non_empty(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("'message' must be a string.")
        value = value.strip()
        if not value:
            raise ValueError("'message' must not be empty.")
        return value


class AddToCart(_IntentBase):
    intent: Literal["ADD_TO_CART"] = "ADD_TO_CART"
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    quantity: int = 1

    @field_validator("product_id", "product_name", mode="before")
    @classmethod
    def normalize_refs(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, value: Any) -> int:
        return _unit_count(value)


class NavigateToProduct(_IntentBase):
    intent: Literal["NAVIGATE_TO_PRODUCT"] = "NAVIGATE_TO_PRODUCT"
    product_id: Optional[str] = None
    product_name: Optional[str] = None

    @field_validator("product_id", "product_name", mode="before")
    @classmethod
    def normalize_refs(cls, value: Any) -> Optional[str]:
        return _optional_text(value)


class GetProductRecommendation(_IntentBase):
    intent: Literal["GET_PRODUCT_RECOMMENDATION"] = "GET_PRODUCT_RECOMMENDATION"
    query: Optional[str] = None
    suggested_product_ids: List[str] = Field(default_factory=list)
    suggested_keywords: List[str] = Field(default_factory=list)

    @field_validator("query", mode="before")
    @classmethod
    def normalize_query(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @field_validator("suggested_product_ids", "suggested_keywords", mode="before")
    @classmethod
    def normalize_lists(cls, value: Any) -> List[str]:
        return _text_list(value)


class AnswerFaq(_IntentBase):
    intent: Literal["ANSWER_FAQ"] = "ANSWER_FAQ"
    question_key: Optional[str] = None
    answer: Optional[str] = None

    @field_validator("question_key", "answer", mode="before")
    @classmethod
    def normalize_fields(cls, value: Any) -> Optional[str]:
        return _optional_text(value)


class NavigateToCheckout(_IntentBase):
    intent: Literal["NAVIGATE_TO_CHECKOUT"] = "NAVIGATE_TO_CHECKOUT"


class GeneralQuery(_IntentBase):
    intent: Literal["GENERAL_QUERY"] = "GENERAL_QUERY"


class ErrorIntent(_IntentBase):
    intent: Literal["ERROR"] = "ERROR"


IntentResponse = Annotated[
    Union[
        AddToCart,
        NavigateToProduct,
        GetProductRecommendation,
        AnswerFaq,
        NavigateToCheckout,
        GeneralQuery,
        ErrorIntent,
    ],
    Field(discriminator="intent"),
]

INTENT_RESPONSE_ADAPTER: TypeAdapter = TypeAdapter(IntentResponse)
