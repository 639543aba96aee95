"""Speech capture and playback: controllers, backend protocols and backends."""
from .types import (
    CaptureErrorCode,
    CaptureTerminated,
    RecognitionError,
    RecognitionSegment,
    classify_capture_error,
)

__all__ = [
    "CaptureErrorCode",
    "CaptureTerminated",
    "RecognitionError",
    "RecognitionSegment",
    "classify_capture_error",
]
