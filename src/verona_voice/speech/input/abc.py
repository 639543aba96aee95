"""Protocol for speech recognizer backends."""
import asyncio
import logging
from typing import AsyncIterator, Protocol, runtime_checkable

from verona_voice.core.types import Plugin
from verona_voice.speech.types import RecognitionSegment

logger = logging.getLogger(__name__)

@runtime_checkable
class SpeechRecognizerPlugin(Plugin, Protocol):
    """
    A platform speech-to-text backend.

    One call to `recognize` is one capture session. The backend yields
    interim and final segments and returns when the speaker pauses or when
    `stop_event` is set. Failures are raised: `RecognitionError` with a raw
    platform code, or the underlying OS/device exception. An empty session
    that heard nothing raises `RecognitionError("no-speech")`.
    """
    plugin_id: str
    description: str

    def is_available(self) -> bool:
        """False when the backend cannot capture on this machine (missing library or device API)."""
        ...

    def recognize(self, language: str, stop_event: asyncio.Event) -> AsyncIterator[RecognitionSegment]:
        ...
