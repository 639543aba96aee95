"""Text-to-speech playback."""
from .abc import SpeechSynthesizerPlugin
from .controller import SpeechOutputController

__all__ = ["SpeechSynthesizerPlugin", "SpeechOutputController"]
