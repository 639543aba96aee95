"""Security-related components, primarily the KeyProvider protocol."""
from .key_provider import KeyProvider

__all__ = ["KeyProvider"]
