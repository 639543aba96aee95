### tests/unit/config/test_resolver.py
import logging
from unittest.mock import MagicMock

import pytest

from verona_voice.config.features import FeatureSettings
from verona_voice.config.models import ConciergeConfig, ConciergeMessages
from verona_voice.config.resolver import PLUGIN_ID_ALIASES, ConfigResolver
from verona_voice.security.key_provider import KeyProvider


@pytest.fixture
def mock_kp_instance_for_resolver() -> MagicMock:
    kp = MagicMock(spec=KeyProvider)
    kp.plugin_id = "mock_kp_instance_id_for_resolver"
    return kp

@pytest.fixture
def config_resolver() -> ConfigResolver:
    return ConfigResolver()


def test_resolver_defaults_select_gemini_and_console(config_resolver: ConfigResolver, mock_kp_instance_for_resolver: MagicMock):
    resolved = config_resolver.resolve(ConciergeConfig(), mock_kp_instance_for_resolver)
    gemini_id = PLUGIN_ID_ALIASES["gemini"]
    assert resolved.default_llm_provider_id == gemini_id
    assert resolved.llm_provider_configurations[gemini_id]["model_name"] == "gemini-2.5-flash"
    assert resolved.llm_provider_configurations[gemini_id]["key_provider"] is mock_kp_instance_for_resolver
    assert resolved.default_speech_input_id == PLUGIN_ID_ALIASES["console_input"]
    assert resolved.default_speech_output_id == PLUGIN_ID_ALIASES["console_output"]
    assert resolved.default_log_adapter_id == PLUGIN_ID_ALIASES["default_log_adapter"]
    assert resolved.key_provider_id == "mock_kp_instance_id_for_resolver"


def test_resolver_llm_feature_ollama(config_resolver: ConfigResolver, mock_kp_instance_for_resolver: MagicMock):
    user_config = ConciergeConfig(
        features=FeatureSettings(llm="ollama", llm_ollama_model_name="test-ollama-model", llm_ollama_base_url="http://ollama:1234")
    )
    resolved = config_resolver.resolve(user_config, mock_kp_instance_for_resolver)
    ollama_id = PLUGIN_ID_ALIASES["ollama"]
    assert resolved.default_llm_provider_id == ollama_id
    assert resolved.llm_provider_configurations[ollama_id]["model_name"] == "test-ollama-model"
    assert resolved.llm_provider_configurations[ollama_id]["base_url"] == "http://ollama:1234"
    assert "key_provider" not in resolved.llm_provider_configurations[ollama_id]


def test_resolver_llm_feature_openai_with_key_provider(config_resolver: ConfigResolver, mock_kp_instance_for_resolver: MagicMock):
    user_config = ConciergeConfig(features=FeatureSettings(llm="openai", llm_openai_model_name="test-gpt"))
    resolved = config_resolver.resolve(user_config, mock_kp_instance_for_resolver)
    openai_id = PLUGIN_ID_ALIASES["openai"]
    assert resolved.default_llm_provider_id == openai_id
    assert resolved.llm_provider_configurations[openai_id]["model_name"] == "test-gpt"
    assert resolved.llm_provider_configurations[openai_id]["key_provider"] is mock_kp_instance_for_resolver


def test_resolver_llm_none_and_speech_none(config_resolver: ConfigResolver):
    user_config = ConciergeConfig(features=FeatureSettings(llm="none", speech_input="none", speech_output="none", logging_adapter="none"))
    resolved = config_resolver.resolve(user_config)
    assert resolved.default_llm_provider_id is None
    assert resolved.default_speech_input_id is None
    assert resolved.default_speech_output_id is None
    assert resolved.default_log_adapter_id is None
    assert resolved.key_provider_id == PLUGIN_ID_ALIASES["env_keys"]


def test_resolver_whisper_feature_settings(config_resolver: ConfigResolver):
    user_config = ConciergeConfig(
        features=FeatureSettings(speech_input="whisper", speech_input_whisper_model="small", speech_input_whisper_device="cuda", speech_input_whisper_compute_type="float16")
    )
    resolved = config_resolver.resolve(user_config)
    whisper_id = PLUGIN_ID_ALIASES["whisper_input"]
    assert resolved.default_speech_input_id == whisper_id
    assert resolved.speech_input_configurations[whisper_id] == {
        "model_size_or_path": "small", "device": "cuda", "compute_type": "float16"
    }


def test_resolver_explicit_config_overrides_features_and_canonicalizes_aliases(config_resolver: ConfigResolver, mock_kp_instance_for_resolver: MagicMock):
    user_config = ConciergeConfig(
        features=FeatureSettings(llm="gemini", speech_output="console", speech_output_console_words_per_minute=150),
        llm_provider_configurations={"gemini": {"model_name": "gemini-custom", "temperature": 0.1}},
        speech_output_configurations={"console_output": {"speaker_label": "Concierge"}},
    )
    resolved = config_resolver.resolve(user_config, mock_kp_instance_for_resolver)
    gemini_id = PLUGIN_ID_ALIASES["gemini"]
    output_id = PLUGIN_ID_ALIASES["console_output"]
    assert "gemini" not in resolved.llm_provider_configurations
    assert resolved.llm_provider_configurations[gemini_id]["model_name"] == "gemini-custom"
    assert resolved.llm_provider_configurations[gemini_id]["temperature"] == 0.1
    assert resolved.llm_provider_configurations[gemini_id]["key_provider"] is mock_kp_instance_for_resolver
    assert resolved.speech_output_configurations[output_id] == {"words_per_minute": 150, "speaker_label": "Concierge"}


def test_resolver_explicit_default_id_alias_wins(config_resolver: ConfigResolver):
    user_config = ConciergeConfig(features=FeatureSettings(llm="gemini"), default_llm_provider_id="ollama")
    resolved = config_resolver.resolve(user_config)
    assert resolved.default_llm_provider_id == PLUGIN_ID_ALIASES["ollama"]


def test_resolver_key_provider_id_alias(config_resolver: ConfigResolver):
    resolved = config_resolver.resolve(ConciergeConfig(key_provider_id="env_keys"))
    assert resolved.key_provider_id == PLUGIN_ID_ALIASES["env_keys"]


def test_resolver_carries_plain_settings(config_resolver: ConfigResolver):
    messages = ConciergeMessages(welcome="Hi there!")
    user_config = ConciergeConfig(store_name="Demo Shop", recognition_language="sv-SE", request_timeout_seconds=5, messages=messages)
    resolved = config_resolver.resolve(user_config)
    assert resolved.store_name == "Demo Shop"
    assert resolved.recognition_language == "sv-SE"
    assert resolved.request_timeout_seconds == 5
    assert resolved.messages.welcome == "Hi there!"
    assert resolved.messages.no_speech_apology == "I didn't catch that. Could you please speak again?"


def test_resolver_debug_dump_hides_key_provider(config_resolver: ConfigResolver, mock_kp_instance_for_resolver: MagicMock, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger="verona_voice.config.resolver")
    config_resolver.resolve(ConciergeConfig(), mock_kp_instance_for_resolver)
    assert "<KeyProvider instance MagicMock>" in caplog.text


def test_config_invalid_log_level_falls_back(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.WARNING)
    config = ConciergeConfig(default_log_level="chatty")
    assert config.default_log_level == "INFO"
    assert "Invalid log_level 'chatty'" in caplog.text


def test_messages_reject_blank_text():
    with pytest.raises(ValueError):
        ConciergeMessages(welcome="   ")
