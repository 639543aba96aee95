"""Concrete speech recognizer backends."""
from .console_recognizer import ConsoleSpeechRecognizerPlugin
from .whisper_recognizer import WhisperSpeechRecognizerPlugin

__all__ = ["ConsoleSpeechRecognizerPlugin", "WhisperSpeechRecognizerPlugin"]
