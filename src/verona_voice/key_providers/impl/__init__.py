"""Concrete KeyProvider implementations."""
from .environment import EnvironmentKeyProvider

__all__ = ["EnvironmentKeyProvider"]
