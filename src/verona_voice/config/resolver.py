# src/verona_voice/config/resolver.py
import json
import logging
from copy import deepcopy
from typing import Any, Dict, Optional, Tuple

from .features import FeatureSettings
from .models import ConciergeConfig

logger = logging.getLogger(__name__)

PLUGIN_ID_ALIASES: Dict[str, str] = {
    "gemini": "gemini_llm_provider_v1",
    "openai": "openai_llm_provider_v1",
    "ollama": "ollama_llm_provider_v1",
    "env_keys": "environment_key_provider_v1",
    "console_input": "console_speech_recognizer_v1",
    "whisper_input": "whisper_speech_recognizer_v1",
    "console_output": "console_speech_synthesizer_v1",
    "default_log_adapter": "default_log_adapter_v1",
}

# LLM choices whose plugins read an API key through the KeyProvider.
_KEYED_LLM_ALIASES = ("gemini", "openai")
_SPEECH_INPUT_ALIASES = {"console": "console_input", "whisper": "whisper_input"}


def canonical_plugin_id(alias_or_id: str) -> str:
    return PLUGIN_ID_ALIASES.get(alias_or_id, alias_or_id)


class ConfigResolver:
    """
    Expands the high-level `FeatureSettings` of a `ConciergeConfig` into
    canonical plugin ids and per-plugin configuration dictionaries.

    Anything the user set explicitly on the config wins over what the
    features imply. Aliases (e.g. "gemini", "console_input") are accepted
    wherever a plugin id is expected and are canonicalized.
    """

    def resolve(self, user_config: ConciergeConfig, key_provider_instance: Optional[Any] = None) -> ConciergeConfig:
        resolved = ConciergeConfig()
        if "features" in user_config.model_fields_set:
            resolved.features = user_config.features.model_copy(deep=True)

        self._apply_llm_feature(resolved, key_provider_instance)
        self._apply_speech_features(resolved)
        if resolved.features.logging_adapter != "none":
            resolved.default_log_adapter_id = PLUGIN_ID_ALIASES.get(resolved.features.logging_adapter)

        self._merge_explicit_settings(resolved, user_config.model_copy(deep=True), key_provider_instance)
        resolved.key_provider_id = self._pick_key_provider_id(user_config, key_provider_instance)
        logger.debug(f"Resolved ConciergeConfig (excluding features/messages): {self._loggable_dump(resolved)}")
        return resolved

    # --- Feature expansion ---

    def _llm_feature_settings(self, features: FeatureSettings) -> Tuple[Optional[str], Dict[str, Any]]:
        if features.llm == "gemini":
            return PLUGIN_ID_ALIASES["gemini"], {"model_name": features.llm_gemini_model_name}
        if features.llm == "openai":
            return PLUGIN_ID_ALIASES["openai"], {"model_name": features.llm_openai_model_name}
        if features.llm == "ollama":
            return PLUGIN_ID_ALIASES["ollama"], {
                "model_name": features.llm_ollama_model_name,
                "base_url": features.llm_ollama_base_url,
            }
        return None, {}

    def _apply_llm_feature(self, resolved: ConciergeConfig, key_provider_instance: Optional[Any]) -> None:
        llm_id, llm_conf = self._llm_feature_settings(resolved.features)
        if llm_id is None:
            return
        if key_provider_instance and self._needs_key_provider("llm_provider_configurations", llm_id):
            llm_conf["key_provider"] = key_provider_instance
        resolved.default_llm_provider_id = llm_id
        resolved.llm_provider_configurations.setdefault(llm_id, {}).update(llm_conf)

    def _apply_speech_features(self, resolved: ConciergeConfig) -> None:
        features = resolved.features
        input_alias = _SPEECH_INPUT_ALIASES.get(features.speech_input)
        if input_alias:
            input_id = PLUGIN_ID_ALIASES[input_alias]
            input_conf: Dict[str, Any] = {}
            if features.speech_input == "whisper":
                input_conf = {
                    "model_size_or_path": features.speech_input_whisper_model,
                    "device": features.speech_input_whisper_device,
                    "compute_type": features.speech_input_whisper_compute_type,
                }
            resolved.default_speech_input_id = input_id
            resolved.speech_input_configurations.setdefault(input_id, {}).update(input_conf)

        if features.speech_output == "console":
            output_id = PLUGIN_ID_ALIASES["console_output"]
            resolved.default_speech_output_id = output_id
            resolved.speech_output_configurations.setdefault(output_id, {})["words_per_minute"] = (
                features.speech_output_console_words_per_minute
            )

    # --- Explicit settings ---

    def _needs_key_provider(self, field_name: str, plugin_id: str) -> bool:
        return field_name == "llm_provider_configurations" and plugin_id in {PLUGIN_ID_ALIASES[a] for a in _KEYED_LLM_ALIASES}

    def _merge_plugin_configurations(
        self, field_name: str, target: Dict[str, Dict[str, Any]], user_value: Dict[str, Any], key_provider_instance: Optional[Any]
    ) -> None:
        for alias, user_plugin_conf in user_value.items():
            plugin_id = canonical_plugin_id(alias)
            explicit = deepcopy(user_plugin_conf or {})
            merged = {**target.get(plugin_id, {}), **explicit}
            if key_provider_instance and "key_provider" not in explicit and self._needs_key_provider(field_name, plugin_id):
                merged["key_provider"] = key_provider_instance
            target[plugin_id] = merged
            if alias != plugin_id:
                target.pop(alias, None)

    def _merge_explicit_settings(self, resolved: ConciergeConfig, explicit: ConciergeConfig, key_provider_instance: Optional[Any]) -> None:
        for field_name in explicit.model_fields_set:
            if field_name in ("features", "key_provider_id"):
                continue
            value = getattr(explicit, field_name)
            if field_name.endswith("_configurations") and isinstance(value, dict):
                self._merge_plugin_configurations(field_name, getattr(resolved, field_name), value, key_provider_instance)
            elif field_name.startswith("default_") and field_name.endswith("_id"):
                setattr(resolved, field_name, canonical_plugin_id(str(value)) if value is not None else None)
            else:
                setattr(resolved, field_name, value)

    def _pick_key_provider_id(self, user_config: ConciergeConfig, key_provider_instance: Optional[Any]) -> str:
        if user_config.key_provider_id is not None:
            return canonical_plugin_id(user_config.key_provider_id)
        if key_provider_instance is not None and hasattr(key_provider_instance, "plugin_id"):
            return key_provider_instance.plugin_id
        return PLUGIN_ID_ALIASES["env_keys"]

    # --- Logging ---

    def _loggable_dump(self, resolved: ConciergeConfig) -> str:
        try:
            dump = resolved.model_dump(exclude={"features", "messages"}, exclude_none=True)
            for field_name, plugin_confs in dump.items():
                if not field_name.endswith("_configurations"):
                    continue
                for plugin_conf in plugin_confs.values():
                    key_provider = plugin_conf.get("key_provider") if isinstance(plugin_conf, dict) else None
                    if key_provider is not None and not isinstance(key_provider, (str, int, float, bool)):
                        plugin_conf["key_provider"] = f"<KeyProvider instance {type(key_provider).__name__}>"
            return json.dumps(dump, indent=2, default=str)
        except Exception as e:
            logger.error(f"Error serializing resolved ConciergeConfig for logging: {e}")
            return "<unserializable>"
