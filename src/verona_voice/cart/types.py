# src/verona_voice/cart/types.py
from verona_voice.catalog.types import Product


class CartItem(Product):
    """A catalog product plus the quantity held in the cart."""
    quantity: int
