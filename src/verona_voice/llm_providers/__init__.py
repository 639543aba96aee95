# src/verona_voice/llm_providers/__init__.py
"""
LLM provider plugins: the protocol used by the intent resolver, the manager
that instantiates them, and the Gemini/OpenAI/Ollama implementations.
"""
from .abc import LLMProviderPlugin, LLMProviderUnavailableError
from .impl.gemini_provider import GeminiLLMProviderPlugin
from .impl.ollama_provider import OllamaLLMProviderPlugin
from .impl.openai_provider import OpenAILLMProviderPlugin
from .manager import LLMProviderManager
from .types import LLMCompletionResponse, LLMUsageInfo, ResponseFormat

__all__ = [
    "LLMProviderPlugin",
    "LLMProviderUnavailableError",
    "LLMProviderManager",
    "LLMCompletionResponse",
    "LLMUsageInfo",
    "ResponseFormat",
    "GeminiLLMProviderPlugin",
    "OllamaLLMProviderPlugin",
    "OpenAILLMProviderPlugin",
]
