# src/verona_voice/dispatch/types.py
from typing import Callable

Navigate = Callable[[str], None]
"""Host routing capability. Receives an app path such as '/products/2319076'."""

CART_PATH = "/cart"


def product_path(product_id: str) -> str:
    return f"/products/{product_id}"
