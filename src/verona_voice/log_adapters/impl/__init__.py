"""Concrete LogAdapter implementations."""
from .default_adapter import DefaultLogAdapter

__all__ = ["DefaultLogAdapter"]
