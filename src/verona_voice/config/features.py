# src/verona_voice/config/features.py
from typing import Literal, Optional

from pydantic import BaseModel, Field


class FeatureSettings(BaseModel):
    """
    High-level feature choices for a concierge session. ConfigResolver turns
    these into canonical plugin ids and per-plugin configuration on
    ConciergeConfig.
    """

    # Language model
    llm: Literal["gemini", "openai", "ollama", "none"] = Field(
        default="gemini", description="Completion service used to resolve intents."
    )
    llm_gemini_model_name: Optional[str] = Field(
        default="gemini-2.5-flash", description="Model for Gemini if 'gemini' is chosen for llm."
    )
    llm_openai_model_name: Optional[str] = Field(
        default="gpt-4o-mini", description="Model for OpenAI if 'openai' is chosen for llm."
    )
    llm_ollama_model_name: Optional[str] = Field(
        default="llama3.1:8b", description="Model for Ollama if 'ollama' is chosen for llm."
    )
    llm_ollama_base_url: Optional[str] = Field(
        default="http://localhost:11434", description="Base URL of the Ollama server."
    )

    # Speech input
    speech_input: Literal["console", "whisper", "none"] = Field(
        default="console", description="Speech-to-text backend."
    )
    speech_input_whisper_model: str = Field(
        default="base.en", description="faster-whisper model size or path."
    )
    speech_input_whisper_device: str = Field(
        default="cpu", description="Inference device for faster-whisper ('cpu', 'cuda', 'auto')."
    )
    speech_input_whisper_compute_type: str = Field(
        default="int8", description="faster-whisper compute type."
    )

    # Speech output
    speech_output: Literal["console", "none"] = Field(
        default="console", description="Text-to-speech backend."
    )
    speech_output_console_words_per_minute: int = Field(
        default=0, ge=0, description="Simulated speaking rate for the console voice; 0 prints instantly."
    )

    # Logging
    logging_adapter: Literal["default_log_adapter", "none"] = Field(
        default="default_log_adapter", description="Adapter used for structured session events."
    )
