# src/verona_voice/llm_providers/types.py
from typing import Any, Literal, Optional, TypedDict

ResponseFormat = Literal["text", "json"]

class LLMUsageInfo(TypedDict, total=False):
    """Represents token usage information from an LLM response."""
    prompt_tokens: Optional[int]
    completion_tokens: Optional[int]
    total_tokens: Optional[int]

class LLMCompletionResponse(TypedDict):
    """Standardized response for a single-prompt completion call."""
    text: str
    finish_reason: Optional[str] # e.g., "stop", "length", "done"
    usage: Optional[LLMUsageInfo]
    raw_response: Any # The original, unprocessed response from the provider
