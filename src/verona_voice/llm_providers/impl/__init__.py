"""Concrete LLM provider implementations."""
from .gemini_provider import GeminiLLMProviderPlugin
from .ollama_provider import OllamaLLMProviderPlugin
from .openai_provider import OpenAILLMProviderPlugin

__all__ = ["GeminiLLMProviderPlugin", "OllamaLLMProviderPlugin", "OpenAILLMProviderPlugin"]
