# src/verona_voice/concierge.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple, cast

from .cart.abc import CartOps
from .cart.impl.in_memory_cart import InMemoryCart
from .catalog.sample_data import SAMPLE_FAQS, SAMPLE_PRODUCTS
from .catalog.types import FaqCatalog, ProductCatalog
from .config.models import ConciergeConfig
from .config.resolver import ConfigResolver, canonical_plugin_id
from .conversation.history import MessageListener
from .conversation.orchestrator import ConversationOrchestrator, StateListener, StatusListener
from .conversation.types import ChatMessage, ConversationContext, SessionState, SessionStatus
from .core.plugin_manager import PluginManager
from .dispatch.dispatcher import ActionDispatcher
from .dispatch.types import Navigate
from .intents.resolver import IntentResolver
from .llm_providers.manager import LLMProviderManager
from .log_adapters.abc import LogAdapter as LogAdapterPlugin
from .log_adapters.impl.default_adapter import DefaultLogAdapter
from .security.key_provider import KeyProvider
from .speech.input.abc import SpeechRecognizerPlugin
from .speech.input.controller import SpeechInputController
from .speech.output.abc import SpeechSynthesizerPlugin
from .speech.output.controller import SpeechOutputController

logger = logging.getLogger(__name__)


def _log_navigation(path: str) -> None:
    logger.info(f"Concierge: navigate('{path}') requested but no navigator was supplied.")


class Concierge:
    """
    Facade over one voice concierge session.

    Wires the plugin-backed capabilities (language model, speech input and
    output, key provider, log adapter) into a `ConversationOrchestrator` and
    exposes its commands and observables to the host.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        key_provider: KeyProvider,
        config: ConciergeConfig,
        llm_provider_manager: LLMProviderManager,
        log_adapter: LogAdapterPlugin,
        orchestrator: ConversationOrchestrator,
        cart: CartOps,
    ):
        self._plugin_manager: Optional[PluginManager] = plugin_manager
        self._key_provider = key_provider
        self._config = config
        self._llm_provider_manager: Optional[LLMProviderManager] = llm_provider_manager
        self._log_adapter: Optional[LogAdapterPlugin] = log_adapter
        self._orchestrator = orchestrator
        self.cart = cart

    @classmethod
    async def create(
        cls,
        config: ConciergeConfig,
        key_provider_instance: Optional[KeyProvider] = None,
        plugin_manager: Optional[PluginManager] = None,
        products: ProductCatalog = SAMPLE_PRODUCTS,
        faqs: FaqCatalog = SAMPLE_FAQS,
        cart: Optional[CartOps] = None,
        navigate: Optional[Navigate] = None,
    ) -> Concierge:
        """
        Creates the concierge and all of its components.

        Args:
            config: The concierge configuration. `FeatureSettings` select the
                language model and speech backends in one place.
            key_provider_instance: An optional KeyProvider to use instead of the
                one named by `config.key_provider_id`.
            plugin_manager: An optional, pre-populated PluginManager. When
                omitted, a new one is created and entry points are discovered.
            products: The host's product catalog. Defaults to the sample data.
            faqs: The host's FAQ catalog. Defaults to the sample data.
            cart: The host's cart operations. Defaults to an `InMemoryCart`.
            navigate: The host's routing callable. Defaults to logging the path.

        Returns:
            A ready Concierge whose session is still closed.
        """
        if plugin_manager:
            pm = plugin_manager
            logger.info("Using pre-configured PluginManager provided to Concierge.create().")
        else:
            pm = PluginManager()
            await pm.discover_plugins()

        actual_key_provider: KeyProvider
        if key_provider_instance:
            actual_key_provider = key_provider_instance
            logger.info("Using pre-configured KeyProvider provided to Concierge.create().")
        else:
            kp_id_to_load = canonical_plugin_id(config.key_provider_id or "env_keys")
            kp_any = await pm.get_plugin_instance(kp_id_to_load)
            if not kp_any or not isinstance(kp_any, KeyProvider):
                raise RuntimeError(f"Failed to load KeyProvider with ID '{kp_id_to_load}'.")
            actual_key_provider = cast(KeyProvider, kp_any)
        logger.info(f"Using KeyProvider: {type(actual_key_provider).__name__} (ID: {getattr(actual_key_provider, 'plugin_id', 'N/A')})")

        resolved_config = ConfigResolver().resolve(config, key_provider_instance=actual_key_provider)

        log_adapter_id = resolved_config.default_log_adapter_id or DefaultLogAdapter.plugin_id
        log_adapter_config = {"log_level": resolved_config.default_log_level, **resolved_config.log_adapter_configurations.get(log_adapter_id, {})}
        log_adapter_any = await pm.get_plugin_instance(log_adapter_id, config=log_adapter_config)
        log_adapter: LogAdapterPlugin
        if log_adapter_any and isinstance(log_adapter_any, LogAdapterPlugin):
            log_adapter = cast(LogAdapterPlugin, log_adapter_any)
        else:
            logger.warning(f"Failed to load configured LogAdapter '{log_adapter_id}'. Falling back to DefaultLogAdapter.")
            log_adapter = DefaultLogAdapter()
            await log_adapter.setup({"log_level": resolved_config.default_log_level})
        logger.info(f"Using LogAdapter: {log_adapter.plugin_id}")

        llm_provider_manager = LLMProviderManager(pm, actual_key_provider, resolved_config)
        provider = await llm_provider_manager.get_llm_provider()

        recognizer = await cls._load_plugin(
            pm, resolved_config.default_speech_input_id, resolved_config.speech_input_configurations, SpeechRecognizerPlugin
        )
        synthesizer = await cls._load_plugin(
            pm, resolved_config.default_speech_output_id, resolved_config.speech_output_configurations, SpeechSynthesizerPlugin
        )

        messages = resolved_config.messages
        actual_cart = cart if cart is not None else InMemoryCart(products)
        orchestrator = ConversationOrchestrator(
            speech_input=SpeechInputController(recognizer, language=resolved_config.recognition_language),
            speech_output=SpeechOutputController(synthesizer, language=resolved_config.recognition_language),
            resolver=IntentResolver(
                provider,
                messages=messages,
                request_timeout_seconds=resolved_config.request_timeout_seconds,
                store_name=resolved_config.store_name,
                persona_name=resolved_config.persona_name,
            ),
            dispatcher=ActionDispatcher(default_reply=messages.default_reply),
            products=products,
            faqs=faqs,
            cart=actual_cart,
            navigate=navigate or _log_navigation,
            messages=messages,
            log_adapter=log_adapter,
        )
        logger.info("Concierge initialized.")
        return cls(
            plugin_manager=pm,
            key_provider=actual_key_provider,
            config=resolved_config,
            llm_provider_manager=llm_provider_manager,
            log_adapter=log_adapter,
            orchestrator=orchestrator,
            cart=actual_cart,
        )

    @staticmethod
    async def _load_plugin(
        pm: PluginManager, plugin_id: Optional[str], configurations: Dict[str, Dict[str, Any]], protocol: type
    ) -> Optional[Any]:
        if not plugin_id:
            return None
        instance = await pm.get_plugin_instance(plugin_id, config=configurations.get(plugin_id, {}))
        if instance is None:
            logger.error(f"Plugin '{plugin_id}' could not be loaded.")
            return None
        if not isinstance(instance, protocol):
            logger.error(f"Plugin '{plugin_id}' is not a valid {protocol.__name__}. Type: {type(instance)}")
            return None
        return instance

    # --- Session commands ---

    async def open(self) -> None:
        await self._orchestrator.open()

    async def close(self) -> None:
        await self._orchestrator.close()

    async def toggle_capture(self) -> None:
        await self._orchestrator.toggle_capture()

    def clear_history(self) -> bool:
        return self._orchestrator.clear_history()

    # --- Observables ---

    @property
    def config(self) -> ConciergeConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._orchestrator.state

    @property
    def status(self) -> Optional[SessionStatus]:
        return self._orchestrator.status

    @property
    def history(self) -> Tuple[ChatMessage, ...]:
        return self._orchestrator.history

    @property
    def context(self) -> ConversationContext:
        return self._orchestrator.context

    @property
    def capture_enabled(self) -> bool:
        return self._orchestrator.capture_enabled

    @property
    def interim_transcript(self) -> str:
        return self._orchestrator.interim_transcript

    def subscribe_messages(self, listener: MessageListener) -> Callable[[], None]:
        return self._orchestrator.subscribe_messages(listener)

    def subscribe_state(self, listener: StateListener) -> Callable[[], None]:
        return self._orchestrator.subscribe_state(listener)

    def subscribe_status(self, listener: StatusListener) -> Callable[[], None]:
        return self._orchestrator.subscribe_status(listener)

    async def teardown(self) -> None:
        """Closes the session and tears down every plugin. Safe to call twice."""
        if self._plugin_manager is None:
            logger.warning("Concierge.teardown() called on an already torn-down instance.")
            return
        await self._orchestrator.close()
        self._orchestrator.detach()
        if self._llm_provider_manager:
            await self._llm_provider_manager.teardown()
        await self._plugin_manager.teardown_all_plugins()
        self._plugin_manager = None
        self._llm_provider_manager = None
        self._log_adapter = None
        logger.info("Concierge teardown complete.")
