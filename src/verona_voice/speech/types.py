# src/verona_voice/speech/types.py
import logging
from typing import Dict, Literal, Optional, TypedDict, Union

logger = logging.getLogger(__name__)

CaptureErrorCode = Literal[
    "permission-denied",
    "device-unavailable",
    "no-speech",
    "network",
    "unsupported-language",
    "generic",
]

# Raw platform codes, as reported by browser-style recognition services.
_RAW_CODE_MAP: Dict[str, CaptureErrorCode] = {
    "not-allowed": "permission-denied",
    "service-not-allowed": "permission-denied",
    "permission-denied": "permission-denied",
    "audio-capture": "device-unavailable",
    "device-unavailable": "device-unavailable",
    "no-speech": "no-speech",
    "network": "network",
    "language-not-supported": "unsupported-language",
    "unsupported-language": "unsupported-language",
}


class RecognitionSegment(TypedDict):
    """One recognized piece of speech. Interim text previews an unfinished segment."""
    text: str
    is_final: bool


class CaptureTerminated(TypedDict):
    """Delivered exactly once per capture session, however it ended."""
    session_id: int
    transcript: str
    error: Optional[CaptureErrorCode]
    aborted: bool


class RecognitionError(Exception):
    """Raised by recognizer backends with a raw platform error code."""
    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or f"Speech recognition error: {code}")
        self.code = code


def classify_capture_error(error: Union[BaseException, str]) -> CaptureErrorCode:
    """Maps a raw platform code or a backend exception onto the capture error taxonomy."""
    if isinstance(error, str):
        return _RAW_CODE_MAP.get(error, "generic")
    if isinstance(error, RecognitionError):
        return _RAW_CODE_MAP.get(error.code, "generic")
    if isinstance(error, PermissionError):
        return "permission-denied"
    if isinstance(error, (ConnectionError, TimeoutError)):
        return "network"
    if isinstance(error, OSError):
        # sounddevice.PortAudioError derives from Exception, not OSError.
        return "device-unavailable"
    if type(error).__name__ == "PortAudioError":
        return "device-unavailable"
    return "generic"
