# src/verona_voice/config/models.py
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .features import FeatureSettings

logger = logging.getLogger(__name__)

class ConciergeMessages(BaseModel):
    """Fixed user-facing texts spoken or shown by the concierge."""
    model_config = ConfigDict(extra="ignore")

    welcome: str = "Welcome to Verona Voice. I'm Luca, your concierge for effortless shopping. How may I assist you?"
    no_speech_apology: str = "I didn't catch that. Could you please speak again?"
    fallback_error: str = "I'm sorry, I encountered an issue. Please try again or rephrase your request."
    missing_api_key: str = "The concierge is currently unavailable. API key is missing."
    default_reply: str = "Sorry, I didn't quite understand that."
    speech_input_unsupported: str = "Sorry, voice input is not supported on your current browser. Please try Chrome or Edge."
    speech_output_unsupported: str = "Sorry, spoken replies are not supported on this device."
    permission_denied: str = "Microphone access was denied. Please allow microphone access to talk to the concierge."
    device_unavailable: str = "No microphone was found. Please connect a microphone and try again."
    capture_failed: str = "Voice capture stopped unexpectedly. Tap the microphone to try again."

    @field_validator("*")
    @classmethod
    def non_blank(cls, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Concierge messages must be non-empty strings.")
        return value


class ConciergeConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    features: FeatureSettings = Field(
        default_factory=FeatureSettings,
        description="High-level feature configuration settings."
    )
    default_log_level: str = Field(default="INFO")
    key_provider_id: Optional[str] = Field(
        default=None,
        description="Plugin ID of the KeyProvider to use if no instance is passed to Concierge.create."
    )

    default_llm_provider_id: Optional[str] = Field(default=None)
    llm_provider_configurations: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    default_speech_input_id: Optional[str] = Field(default=None)
    speech_input_configurations: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    default_speech_output_id: Optional[str] = Field(default=None)
    speech_output_configurations: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    default_log_adapter_id: Optional[str] = Field(
        default=None, description="Default LogAdapterPlugin ID."
    )
    log_adapter_configurations: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Configurations for LogAdapterPlugins."
    )

    recognition_language: str = Field(default="en-US", description="BCP-47 language tag passed to the speech recognizer.")
    request_timeout_seconds: Optional[float] = Field(
        default=30.0, gt=0, description="Upper bound for one intent resolution call. None disables the timeout."
    )
    store_name: str = Field(default="StyleSphere")
    persona_name: str = Field(default="Luca")
    messages: ConciergeMessages = Field(default_factory=ConciergeMessages)

    @field_validator("default_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        log_level_upper = value.upper()
        if log_level_upper not in valid_levels:
            logger.warning(f"Invalid log_level '{value}' in ConciergeConfig. Defaulting to INFO.")
            return "INFO"
        return log_level_upper
