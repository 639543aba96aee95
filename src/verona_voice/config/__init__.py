"""Configuration models and the feature-to-plugin resolver."""
from .features import FeatureSettings
from .models import ConciergeConfig, ConciergeMessages
from .resolver import PLUGIN_ID_ALIASES, ConfigResolver

__all__ = [
    "FeatureSettings",
    "ConciergeConfig",
    "ConciergeMessages",
    "ConfigResolver",
    "PLUGIN_ID_ALIASES",
]
