"""Cart capability consumed by the dispatcher, plus an in-memory reference cart."""
from .abc import CartOps
from .impl.in_memory_cart import InMemoryCart
from .types import CartItem

__all__ = ["CartOps", "CartItem", "InMemoryCart"]
