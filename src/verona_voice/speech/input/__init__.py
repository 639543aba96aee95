"""Speech-to-text capture."""
from .abc import SpeechRecognizerPlugin
from .controller import SpeechInputController

__all__ = ["SpeechRecognizerPlugin", "SpeechInputController"]
