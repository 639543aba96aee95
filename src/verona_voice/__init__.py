### src/verona_voice/__init__.py
"""
verona-voice
-----------------------------

A voice concierge engine for storefronts: speech in, intent resolution with a
hosted language model, cart and navigation actions, speech out.
Async-first, with swappable speech and language-model plugins.
"""
__version__ = "0.1.0"

# Key exports for ease of use
from .cart.abc import CartOps
from .cart.impl.in_memory_cart import InMemoryCart
from .catalog.types import FaqItem, Product
from .concierge import Concierge
from .config.features import FeatureSettings
from .config.models import ConciergeConfig, ConciergeMessages
from .conversation.orchestrator import ConversationOrchestrator
from .conversation.types import ChatMessage, ConversationContext, SessionState, SessionStatus
from .core.plugin_manager import PluginManager
from .core.types import ErrorKind, Plugin
from .dispatch.dispatcher import ActionDispatcher
from .intents.resolver import IntentResolver, Resolved, ResolutionFailed
from .intents.types import IntentResponse
from .llm_providers.abc import LLMProviderPlugin
from .log_adapters.abc import LogAdapter as LogAdapterPlugin
from .security.key_provider import KeyProvider
from .speech.input.abc import SpeechRecognizerPlugin
from .speech.output.abc import SpeechSynthesizerPlugin

__all__ = [
    "__version__",
    "Concierge",
    "ConciergeConfig",
    "ConciergeMessages",
    "FeatureSettings",
    "ConversationOrchestrator",
    "ChatMessage",
    "ConversationContext",
    "SessionState",
    "SessionStatus",
    "IntentResolver",
    "Resolved",
    "ResolutionFailed",
    "IntentResponse",
    "ActionDispatcher",
    "CartOps",
    "InMemoryCart",
    "Product",
    "FaqItem",
    "PluginManager",
    "Plugin",
    "ErrorKind",
    "KeyProvider",
    "LLMProviderPlugin",
    "LogAdapterPlugin",
    "SpeechRecognizerPlugin",
    "SpeechSynthesizerPlugin",
]
