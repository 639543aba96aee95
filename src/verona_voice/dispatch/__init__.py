"""Maps resolved intents to cart and navigation side effects."""
from .dispatcher import ActionDispatcher
from .types import CART_PATH, Navigate, product_path

__all__ = ["ActionDispatcher", "Navigate", "CART_PATH", "product_path"]
