"""Concrete cart implementations."""
from .in_memory_cart import InMemoryCart

__all__ = ["InMemoryCart"]
