"""Concrete speech synthesizer backends."""
from .console_synthesizer import ConsoleSpeechSynthesizerPlugin

__all__ = ["ConsoleSpeechSynthesizerPlugin"]
