"""Protocol for speech synthesizer backends."""
import logging
from typing import Protocol, runtime_checkable

from verona_voice.core.types import Plugin

logger = logging.getLogger(__name__)

@runtime_checkable
class SpeechSynthesizerPlugin(Plugin, Protocol):
    """
    A platform text-to-speech backend.

    `speak` returns when the utterance has finished playing and raises on a
    playback error. It must stop promptly when its task is cancelled.
    """
    plugin_id: str
    description: str

    def is_available(self) -> bool:
        ...

    async def speak(self, text: str, language: str) -> None:
        ...
