# src/verona_voice/conversation/orchestrator.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from verona_voice.cart.abc import CartOps
from verona_voice.catalog.types import FaqCatalog, ProductCatalog, get_product_by_id
from verona_voice.config.models import ConciergeMessages
from verona_voice.core.types import ErrorKind
from verona_voice.dispatch.dispatcher import ActionDispatcher
from verona_voice.dispatch.types import Navigate
from verona_voice.intents.resolver import IntentResolver, ResolutionFailed, ResolutionResult
from verona_voice.intents.types import GetProductRecommendation, IntentResponse
from verona_voice.log_adapters.abc import LogAdapter
from verona_voice.speech.input.controller import SpeechInputController
from verona_voice.speech.output.controller import SpeechOutputController
from verona_voice.speech.types import CaptureErrorCode, CaptureTerminated

from .history import ConversationHistory, MessageListener
from .types import ChatMessage, ConversationContext, SessionState, SessionStatus

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]
StatusListener = Callable[[Optional[SessionStatus]], None]


@dataclass(frozen=True)
class _CaptureEnded:
    generation: int
    event: CaptureTerminated


@dataclass(frozen=True)
class _SpeechEnded:
    generation: int
    speech_token: int


@dataclass(frozen=True)
class _ResolutionEnded:
    generation: int
    turn_token: int
    result: ResolutionResult


_Event = Union[_CaptureEnded, _SpeechEnded, _ResolutionEnded]
_STOP = object()

_CAPTURE_ERROR_KINDS: Dict[CaptureErrorCode, ErrorKind] = {
    "permission-denied": "permission_denied",
    "device-unavailable": "device_unavailable",
    "no-speech": "no_speech_detected",
    "network": "network_failure",
    "unsupported-language": "capability_unavailable",
    "generic": "device_unavailable",
}


class ConversationOrchestrator:
    """
    Turn-taking state machine for one conversational session.

    The orchestrator owns the session state, the conversation context and the
    chat history. Every asynchronous notification (capture terminated,
    utterance completed, resolution completed) is posted to one queue and
    handled in order by a single task started in `open()`. Intent resolution
    runs in its own task so the state machine never waits on the network.

    Stale notifications are dropped: each open/close bumps a generation
    counter, each resolution carries a turn token, and each utterance a
    speech token. Anything whose tokens are not current is logged and
    discarded.
    """

    def __init__(
        self,
        speech_input: SpeechInputController,
        speech_output: SpeechOutputController,
        resolver: IntentResolver,
        dispatcher: ActionDispatcher,
        products: ProductCatalog,
        faqs: FaqCatalog,
        cart: CartOps,
        navigate: Navigate,
        messages: Optional[ConciergeMessages] = None,
        log_adapter: Optional[LogAdapter] = None,
        history: Optional[ConversationHistory] = None,
    ):
        self._speech_input = speech_input
        self._speech_output = speech_output
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._products = products
        self._faqs = faqs
        self._cart = cart
        self._navigate = navigate
        self._messages = messages or ConciergeMessages()
        self._log_adapter = log_adapter
        self._history = history or ConversationHistory()

        self._state = SessionState.CLOSED
        self._status: Optional[SessionStatus] = None
        self._context = ConversationContext()
        self._capture_enabled = False

        self._generation = 0
        self._turn_token = 0
        self._capture_session_id: Optional[int] = None
        self._speech_counter = 0
        self._speech_token: Optional[int] = None
        self._speech_purpose: Optional[str] = None

        self._queue: Optional["asyncio.Queue[Any]"] = None
        self._event_task: Optional["asyncio.Task[None]"] = None
        self._resolution_task: Optional["asyncio.Task[None]"] = None

        self._state_listeners: List[StateListener] = []
        self._status_listeners: List[StatusListener] = []
        self._unsubscribe_capture = self._speech_input.subscribe(self._on_capture_terminated)

    # --- Observable surface ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> Optional[SessionStatus]:
        return self._status

    @property
    def context(self) -> ConversationContext:
        return self._context

    @property
    def history(self) -> Tuple[ChatMessage, ...]:
        return self._history.messages

    @property
    def capture_enabled(self) -> bool:
        return self._capture_enabled

    @property
    def interim_transcript(self) -> str:
        return self._speech_input.interim_transcript

    def subscribe_messages(self, listener: MessageListener) -> Callable[[], None]:
        return self._history.subscribe(listener)

    def subscribe_state(self, listener: StateListener) -> Callable[[], None]:
        self._state_listeners.append(listener)
        return lambda: self._state_listeners.remove(listener) if listener in self._state_listeners else None

    def subscribe_status(self, listener: StatusListener) -> Callable[[], None]:
        self._status_listeners.append(listener)
        return lambda: self._status_listeners.remove(listener) if listener in self._status_listeners else None

    # --- Commands ---

    async def open(self) -> None:
        if self._state is not SessionState.CLOSED:
            logger.debug(f"ConversationOrchestrator: open() ignored, session already in state {self._state.name}.")
            return
        self._generation += 1
        self._queue = asyncio.Queue()
        self._event_task = asyncio.get_running_loop().create_task(
            self._run_events(self._queue), name=f"concierge-events-{self._generation}"
        )
        self._set_state(SessionState.AWAITING_WELCOME)

        input_ok = self._speech_input.is_supported
        output_ok = self._speech_output.is_supported
        await self._emit("session.opened", {"generation": self._generation, "speech_input": input_ok, "speech_output": output_ok})
        if not (input_ok and output_ok):
            message = self._messages.speech_output_unsupported if input_ok else self._messages.speech_input_unsupported
            logger.warning(f"ConversationOrchestrator: Capture disabled (speech_input={input_ok}, speech_output={output_ok}).")
            self._capture_enabled = False
            self._publish_status(SessionStatus(kind="capability_unavailable", message=message, persistent=True))
            return

        self._capture_enabled = True
        welcome = self._messages.welcome
        if len(self._history) == 0:
            self._history.append("agent", welcome)
        self._speak(welcome, purpose="welcome")

    async def close(self) -> None:
        """Ends the session. History is kept until `clear_history()`. Calling it again is a no-op."""
        if self._state is SessionState.CLOSED:
            logger.debug("ConversationOrchestrator: close() ignored, session already closed.")
            return
        queue, self._queue = self._queue, None
        task, self._event_task = self._event_task, None
        self._generation += 1
        self._capture_session_id = None
        self._speech_token = None
        self._speech_purpose = None

        self._speech_input.abort()
        self._speech_output.cancel()
        self._speech_input.reset()

        self._context = ConversationContext()
        self._capture_enabled = False
        self._publish_status(None)
        self._set_state(SessionState.CLOSED)

        if queue is not None:
            queue.put_nowait(_STOP)
        if task is not None and task is not asyncio.current_task():
            await task
        await self._emit("session.closed", {"generation": self._generation, "history_length": len(self._history)})

    async def toggle_capture(self) -> None:
        if self._state in (SessionState.CLOSED, SessionState.THINKING) or not self._capture_enabled:
            logger.debug(f"ConversationOrchestrator: toggle_capture() ignored in state {self._state.name} (capture_enabled={self._capture_enabled}).")
            return
        if self._speech_token is not None:
            self._speech_token = None
            self._speech_purpose = None
            self._speech_output.cancel()
        if self._state is SessionState.LISTENING:
            self._speech_input.stop()
            return
        self._speech_input.reset()
        self._start_listening()

    def clear_history(self) -> bool:
        if self._state is not SessionState.CLOSED:
            logger.warning("ConversationOrchestrator: clear_history() is only allowed while the session is closed.")
            return False
        self._history.clear()
        return True

    def detach(self) -> None:
        """Stops listening to the speech input controller. Used on teardown."""
        self._unsubscribe_capture()

    # --- Event channel ---

    def _post(self, event: _Event) -> None:
        if self._queue is None:
            logger.debug(f"ConversationOrchestrator: Dropping {type(event).__name__} posted while closed.")
            return
        self._queue.put_nowait(event)

    def _on_capture_terminated(self, event: CaptureTerminated) -> None:
        self._post(_CaptureEnded(generation=self._generation, event=event))

    async def _run_events(self, queue: "asyncio.Queue[Any]") -> None:
        while True:
            event = await queue.get()
            if event is _STOP:
                break
            try:
                if isinstance(event, _CaptureEnded):
                    await self._handle_capture_ended(event)
                elif isinstance(event, _SpeechEnded):
                    await self._handle_speech_ended(event)
                elif isinstance(event, _ResolutionEnded):
                    await self._handle_resolution_ended(event)
            except Exception as e:
                logger.error(f"ConversationOrchestrator: Error handling {type(event).__name__}: {e}", exc_info=True)

    async def _handle_capture_ended(self, ev: _CaptureEnded) -> None:
        session_id = ev.event["session_id"]
        if ev.generation != self._generation or session_id != self._capture_session_id:
            logger.debug(f"ConversationOrchestrator: Ignoring stale capture termination for session {session_id}.")
            return
        self._capture_session_id = None
        if self._state is not SessionState.LISTENING:
            logger.debug(f"ConversationOrchestrator: Capture ended outside LISTENING (state {self._state.name}).")
            return

        transcript = (ev.event["transcript"] or "").strip()
        error = ev.event["error"]
        if transcript:
            message = self._history.append("user", transcript)
            self._set_state(SessionState.THINKING)
            turn_token = self._begin_resolution(transcript)
            await self._emit("turn.user_message", {"turn": turn_token, "message_id": message.id, "text": transcript})
            return

        if error == "no-speech":
            apology = self._messages.no_speech_apology
            self._history.append("agent", apology)
            self._set_state(SessionState.SPEAKING)
            self._speak(apology, purpose="apology")
            return

        self._set_state(SessionState.AWAITING_WELCOME)
        if error in ("permission-denied", "device-unavailable"):
            self._capture_enabled = False
            message = self._messages.permission_denied if error == "permission-denied" else self._messages.device_unavailable
            logger.error(f"ConversationOrchestrator: Capture failed with '{error}'. Voice capture disabled.")
            self._publish_status(SessionStatus(kind=_CAPTURE_ERROR_KINDS[error], message=message, persistent=True))
        elif error is not None:
            logger.warning(f"ConversationOrchestrator: Capture ended with '{error}' and no transcript.")
            self._publish_status(SessionStatus(kind=_CAPTURE_ERROR_KINDS.get(error, "device_unavailable"), message=self._messages.capture_failed))

    async def _handle_speech_ended(self, ev: _SpeechEnded) -> None:
        if ev.generation != self._generation or ev.speech_token != self._speech_token:
            logger.debug(f"ConversationOrchestrator: Ignoring stale utterance completion (token {ev.speech_token}).")
            return
        purpose = self._speech_purpose
        self._speech_token = None
        self._speech_purpose = None
        logger.debug(f"ConversationOrchestrator: Finished speaking the {purpose} utterance.")
        if self._state in (SessionState.AWAITING_WELCOME, SessionState.SPEAKING) and self._capture_enabled:
            self._speech_input.reset()
            self._start_listening()

    async def _handle_resolution_ended(self, ev: _ResolutionEnded) -> None:
        if ev.generation != self._generation or ev.turn_token != self._turn_token or self._state is not SessionState.THINKING:
            logger.info(f"ConversationOrchestrator: Discarding stale resolution for turn {ev.turn_token}.")
            await self._emit("turn.stale_result", {"turn": ev.turn_token, "intent": ev.result.response.intent})
            return

        result = ev.result
        outcome = result.kind if isinstance(result, ResolutionFailed) else "resolved"
        resolved_data: Dict[str, Any] = {"turn": ev.turn_token, "intent": result.response.intent, "outcome": outcome}
        if isinstance(result, ResolutionFailed):
            resolved_data["detail"] = result.detail

        try:
            reply = self._dispatcher.dispatch(result.response, self._products, self._cart, self._navigate)
        except Exception as e:
            logger.error(f"ConversationOrchestrator: Dispatch of '{result.response.intent}' failed: {e}", exc_info=True)
            reply = self._messages.fallback_error

        self._update_context(result.response)
        self._history.append("agent", reply)
        self._set_state(SessionState.SPEAKING)
        self._speak(reply, purpose="turn")
        await self._emit("turn.resolved", resolved_data)
        await self._emit("turn.dispatched", {"turn": ev.turn_token, "reply": reply, "context": list(self._context.last_recommended_product_ids)})

    # --- Internals ---

    def _begin_resolution(self, utterance: str) -> int:
        self._turn_token += 1
        turn_token = self._turn_token
        generation = self._generation
        self._resolution_task = asyncio.get_running_loop().create_task(
            self._resolve(generation, turn_token, utterance, self._context), name=f"concierge-resolve-{turn_token}"
        )
        return turn_token

    async def _resolve(self, generation: int, turn_token: int, utterance: str, context: ConversationContext) -> None:
        result = await self._resolver.resolve(utterance, self._products, self._faqs, context)
        if generation != self._generation:
            logger.info(f"ConversationOrchestrator: Resolution for turn {turn_token} finished after its session closed.")
            await self._emit("turn.stale_result", {"turn": turn_token, "intent": result.response.intent})
            return
        self._post(_ResolutionEnded(generation=generation, turn_token=turn_token, result=result))

    def _update_context(self, response: IntentResponse) -> None:
        if not isinstance(response, GetProductRecommendation):
            return
        valid_ids = tuple(pid for pid in response.suggested_product_ids if get_product_by_id(self._products, pid))
        if valid_ids:
            self._context = ConversationContext(last_recommended_product_ids=valid_ids)
            logger.debug(f"ConversationOrchestrator: Context updated to {list(valid_ids)}.")

    def _speak(self, text: str, purpose: str) -> None:
        self._speech_counter += 1
        speech_token = self._speech_counter
        generation = self._generation
        self._speech_token = speech_token
        self._speech_purpose = purpose
        utterance_id = self._speech_output.speak(
            text, on_complete=lambda _uid: self._post(_SpeechEnded(generation=generation, speech_token=speech_token))
        )
        if utterance_id is None:
            logger.debug(f"ConversationOrchestrator: Speech output declined the {purpose} utterance; treating it as complete.")
            self._post(_SpeechEnded(generation=generation, speech_token=speech_token))

    def _start_listening(self) -> None:
        if self._status is not None and not self._status.persistent:
            self._publish_status(None)
        session_id = self._speech_input.start()
        if session_id is None:
            logger.warning("ConversationOrchestrator: Speech input did not start a capture session.")
            self._set_state(SessionState.AWAITING_WELCOME)
            return
        self._capture_session_id = session_id
        self._set_state(SessionState.LISTENING)

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.debug(f"ConversationOrchestrator: {self._state.name} -> {state.name}")
        self._state = state
        for listener in list(self._state_listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"ConversationOrchestrator: State listener raised: {e}", exc_info=True)

    def _publish_status(self, status: Optional[SessionStatus]) -> None:
        if status == self._status:
            return
        self._status = status
        for listener in list(self._status_listeners):
            try:
                listener(status)
            except Exception as e:
                logger.error(f"ConversationOrchestrator: Status listener raised: {e}", exc_info=True)

    async def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        if self._log_adapter is None:
            return
        try:
            await self._log_adapter.process_event(event_type, data)
        except Exception as e:
            logger.error(f"ConversationOrchestrator: Log adapter failed on '{event_type}': {e}", exc_info=True)
