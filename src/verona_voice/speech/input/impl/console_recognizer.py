import asyncio
import logging
import sys
from typing import Any, AsyncIterator, Callable, Dict, Optional

from verona_voice.speech.input.abc import SpeechRecognizerPlugin
from verona_voice.speech.types import RecognitionError, RecognitionSegment

logger = logging.getLogger(__name__)

class ConsoleSpeechRecognizerPlugin(SpeechRecognizerPlugin):
    """
    Treats one line typed on stdin as one spoken utterance.

    An empty line behaves like a microphone that heard nothing ("no-speech").
    The blocking read runs in the default executor. A read that is still
    pending when a session is stopped is kept and reused by the next session,
    so two threads never compete for the same line of input.
    """
    plugin_id: str = "console_speech_recognizer_v1"
    description: str = "Reads user utterances from the terminal instead of a microphone."

    _prompt: str = "You: "
    _input_func: Callable[[str], str] = input
    _pending_read: Optional["asyncio.Future[str]"] = None

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        self._prompt = cfg.get("prompt", self._prompt)
        self._input_func = cfg.get("input_func", input)
        self._pending_read = None
        logger.info(f"{self.plugin_id}: Initialized. Reading utterances from stdin.")

    def is_available(self) -> bool:
        return sys.stdin is not None

    def _read_line(self) -> str:
        try:
            return self._input_func(self._prompt)
        except EOFError:
            return ""

    async def recognize(self, language: str, stop_event: asyncio.Event) -> AsyncIterator[RecognitionSegment]:
        loop = asyncio.get_running_loop()
        if self._pending_read is None:
            self._pending_read = loop.run_in_executor(None, self._read_line)
        read_future = self._pending_read
        stop_waiter = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({read_future, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_waiter.cancel()
        if not read_future.done():
            logger.debug(f"{self.plugin_id}: Session stopped before a line was entered.")
            return
        self._pending_read = None
        line = read_future.result().strip()
        if not line:
            raise RecognitionError("no-speech")
        yield RecognitionSegment(text=line, is_final=True)

    async def teardown(self) -> None:
        self._pending_read = None
        logger.debug(f"{self.plugin_id}: Teardown complete.")
