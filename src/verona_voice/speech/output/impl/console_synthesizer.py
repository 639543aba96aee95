import asyncio
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from verona_voice.speech.output.abc import SpeechSynthesizerPlugin

logger = logging.getLogger(__name__)

class ConsoleSpeechSynthesizerPlugin(SpeechSynthesizerPlugin):
    """Prints agent replies to a text stream, optionally pacing them like speech."""
    plugin_id: str = "console_speech_synthesizer_v1"
    description: str = "Writes spoken replies to the terminal instead of an audio device."

    _stream: Optional[TextIO] = None
    _speaker_label: str = "Luca"
    _words_per_minute: int = 0

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        self._stream = cfg.get("stream") or sys.stdout
        self._speaker_label = cfg.get("speaker_label", self._speaker_label)
        self._words_per_minute = max(0, int(cfg.get("words_per_minute", self._words_per_minute)))
        logger.info(f"{self.plugin_id}: Initialized (words_per_minute={self._words_per_minute}).")

    def is_available(self) -> bool:
        return self._stream is not None

    async def speak(self, text: str, language: str) -> None:
        if self._stream is None:
            raise RuntimeError(f"{self.plugin_id}: Output stream not initialized.")
        self._stream.write(f"{self._speaker_label}: {text}\n")
        self._stream.flush()
        if self._words_per_minute:
            await asyncio.sleep(len(text.split()) * 60.0 / self._words_per_minute)

    async def teardown(self) -> None:
        self._stream = None
        logger.debug(f"{self.plugin_id}: Teardown complete.")
