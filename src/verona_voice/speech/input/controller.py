# src/verona_voice/speech/input/controller.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from verona_voice.speech.types import (
    CaptureErrorCode,
    CaptureTerminated,
    classify_capture_error,
)

from .abc import SpeechRecognizerPlugin

logger = logging.getLogger(__name__)

CaptureListener = Callable[[CaptureTerminated], None]
InterimListener = Callable[[str], None]


@dataclass
class _CaptureSession:
    session_id: int
    stop_event: asyncio.Event
    transcript: str = ""
    interim: str = ""
    finished: bool = False
    task: Optional["asyncio.Task[None]"] = None


class SpeechInputController:
    """
    Owns the microphone: at most one capture session at a time.

    Sessions run as asyncio tasks over a `SpeechRecognizerPlugin`. When a
    session ends (naturally, on `stop()`, on error, or on `abort()`), every
    subscriber receives one `CaptureTerminated` event carrying the
    accumulated final transcript and the classified error, if any.
    """

    def __init__(self, recognizer: Optional[SpeechRecognizerPlugin] = None, language: str = "en-US"):
        self._recognizer = recognizer
        self._language = language
        self._session: Optional[_CaptureSession] = None
        self._next_session_id = 0
        self._last_transcript = ""
        self._last_error: Optional[CaptureErrorCode] = None
        self._listeners: List[CaptureListener] = []
        self._interim_listeners: List[InterimListener] = []

    @property
    def is_supported(self) -> bool:
        if self._recognizer is None:
            return False
        try:
            return bool(self._recognizer.is_available())
        except Exception as e:
            logger.error(f"SpeechInputController: Availability check failed for '{getattr(self._recognizer, 'plugin_id', '?')}': {e}", exc_info=True)
            return False

    @property
    def is_listening(self) -> bool:
        return self._session is not None

    @property
    def transcript(self) -> str:
        return self._session.transcript if self._session else self._last_transcript

    @property
    def interim_transcript(self) -> str:
        return self._session.interim if self._session else ""

    @property
    def last_error(self) -> Optional[CaptureErrorCode]:
        return self._last_error

    def subscribe(self, listener: CaptureListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def subscribe_interim(self, listener: InterimListener) -> Callable[[], None]:
        self._interim_listeners.append(listener)
        return lambda: self._interim_listeners.remove(listener) if listener in self._interim_listeners else None

    def start(self) -> Optional[int]:
        """Starts a capture session and returns its id, or None if unsupported or already listening."""
        if not self.is_supported:
            logger.info("SpeechInputController: start() ignored, speech input unsupported.")
            return None
        if self._session is not None:
            logger.warning(f"SpeechInputController: Already listening (session {self._session.session_id}). start() ignored.")
            return None
        self._next_session_id += 1
        session = _CaptureSession(session_id=self._next_session_id, stop_event=asyncio.Event())
        self._last_transcript = ""
        self._last_error = None
        self._session = session
        session.task = asyncio.get_running_loop().create_task(
            self._run_session(session), name=f"speech-capture-{session.session_id}"
        )
        logger.debug(f"SpeechInputController: Capture session {session.session_id} started (language={self._language}).")
        return session.session_id

    def stop(self) -> None:
        """Requests graceful termination; the termination event follows asynchronously."""
        if self._session is None:
            logger.debug("SpeechInputController: stop() with no active session.")
            return
        self._session.stop_event.set()

    def abort(self) -> None:
        """Cancels the active session immediately. Its termination event is still delivered, flagged aborted."""
        session = self._session
        if session is None:
            return
        if session.task and not session.task.done():
            session.task.cancel()
        self._finish(session, error=None, aborted=True)
        logger.debug(f"SpeechInputController: Capture session {session.session_id} aborted.")

    def reset(self) -> None:
        if self._session is not None:
            self._session.transcript = ""
            self._set_interim(self._session, "")
        self._last_transcript = ""

    def _set_interim(self, session: _CaptureSession, text: str) -> None:
        if session.interim == text:
            return
        session.interim = text
        if self._session is not session and text:
            return
        for listener in list(self._interim_listeners):
            try:
                listener(text)
            except Exception as e:
                logger.error(f"SpeechInputController: Interim listener raised: {e}", exc_info=True)

    async def _run_session(self, session: _CaptureSession) -> None:
        assert self._recognizer is not None
        error: Optional[CaptureErrorCode] = None
        try:
            async for segment in self._recognizer.recognize(self._language, session.stop_event):
                text = segment.get("text", "")
                if segment.get("is_final"):
                    session.transcript += text
                    self._set_interim(session, "")
                else:
                    self._set_interim(session, text)
        except asyncio.CancelledError:
            self._finish(session, error=None, aborted=True)
            raise
        except Exception as e:
            error = classify_capture_error(e)
            logger.warning(f"SpeechInputController: Capture session {session.session_id} ended with '{error}': {e}")
        self._finish(session, error=error, aborted=False)

    def _finish(self, session: _CaptureSession, error: Optional[CaptureErrorCode], aborted: bool) -> None:
        if session.finished:
            return
        session.finished = True
        self._set_interim(session, "")
        if self._session is session:
            self._session = None
            self._last_transcript = session.transcript
            self._last_error = error
        event = CaptureTerminated(
            session_id=session.session_id,
            transcript=session.transcript,
            error=error,
            aborted=aborted,
        )
        logger.debug(f"SpeechInputController: Session {session.session_id} terminated (error={error}, aborted={aborted}, chars={len(session.transcript)}).")
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"SpeechInputController: Termination listener raised: {e}", exc_info=True)
