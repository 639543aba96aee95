# src/verona_voice/speech/output/controller.py
import asyncio
import logging
from typing import Callable, Optional

from .abc import SpeechSynthesizerPlugin

logger = logging.getLogger(__name__)

UtteranceCallback = Callable[[int], None]


class SpeechOutputController:
    """
    Owns audio output: exactly one utterance plays at a time.

    `speak` cancels whatever is playing and starts the new utterance as a
    task. Its `on_complete` callback receives the utterance id and fires once,
    after natural completion or after a playback error. It does not fire for
    an utterance that was cancelled.
    """

    def __init__(self, synthesizer: Optional[SpeechSynthesizerPlugin] = None, language: str = "en-US"):
        self._synthesizer = synthesizer
        self._language = language
        self._active_task: Optional["asyncio.Task[None]"] = None
        self._active_id: Optional[int] = None
        self._next_id = 0

    @property
    def is_supported(self) -> bool:
        if self._synthesizer is None:
            return False
        try:
            return bool(self._synthesizer.is_available())
        except Exception as e:
            logger.error(f"SpeechOutputController: Availability check failed for '{getattr(self._synthesizer, 'plugin_id', '?')}': {e}", exc_info=True)
            return False

    @property
    def is_speaking(self) -> bool:
        return self._active_id is not None

    def speak(self, text: str, on_complete: Optional[UtteranceCallback] = None) -> Optional[int]:
        if not self.is_supported:
            logger.info("SpeechOutputController: speak() ignored, speech output unsupported.")
            return None
        self.cancel()
        self._next_id += 1
        utterance_id = self._next_id
        self._active_id = utterance_id
        self._active_task = asyncio.get_running_loop().create_task(
            self._play(utterance_id, text or "", on_complete), name=f"speech-utterance-{utterance_id}"
        )
        logger.debug(f"SpeechOutputController: Utterance {utterance_id} started ({len(text or '')} chars).")
        return utterance_id

    def cancel(self) -> None:
        task, utterance_id = self._active_task, self._active_id
        self._active_task = None
        self._active_id = None
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"SpeechOutputController: Utterance {utterance_id} cancelled.")

    async def _play(self, utterance_id: int, text: str, on_complete: Optional[UtteranceCallback]) -> None:
        if text.strip():
            assert self._synthesizer is not None
            try:
                await self._synthesizer.speak(text, self._language)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"SpeechOutputController: Playback of utterance {utterance_id} failed: {e}", exc_info=True)
        if self._active_id == utterance_id:
            self._active_id = None
            self._active_task = None
        if on_complete is not None:
            try:
                on_complete(utterance_id)
            except Exception as e:
                logger.error(f"SpeechOutputController: on_complete for utterance {utterance_id} raised: {e}", exc_info=True)
