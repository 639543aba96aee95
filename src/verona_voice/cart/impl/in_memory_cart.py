import logging
from typing import Dict, List, Optional

from verona_voice.cart.abc import CartOps
from verona_voice.cart.types import CartItem
from verona_voice.catalog.types import ProductCatalog, get_product_by_id

logger = logging.getLogger(__name__)

class InMemoryCart(CartOps):
    """Insertion-ordered cart backed by the host's product catalog."""

    def __init__(self, catalog: ProductCatalog):
        self._catalog = catalog
        self._items: Dict[str, CartItem] = {}

    def add(self, product_id: str, quantity: int = 1) -> None:
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}.")
        existing = self._items.get(product_id)
        if existing is not None:
            existing["quantity"] += quantity
            logger.debug(f"InMemoryCart: '{product_id}' quantity now {existing['quantity']}.")
            return
        product = get_product_by_id(self._catalog, product_id)
        if product is None:
            raise KeyError(f"Product '{product_id}' is not in the catalog.")
        self._items[product_id] = CartItem(**product, quantity=quantity)
        logger.debug(f"InMemoryCart: Added '{product_id}' x{quantity}.")

    def has_item(self, product_id: str) -> bool:
        return product_id in self._items

    def remove(self, product_id: str) -> None:
        if self._items.pop(product_id, None) is not None:
            logger.debug(f"InMemoryCart: Removed '{product_id}'.")

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        item = self._items.get(product_id)
        if item is not None:
            item["quantity"] = quantity

    def get_item(self, product_id: str) -> Optional[CartItem]:
        item = self._items.get(product_id)
        return CartItem(**item) if item is not None else None

    @property
    def items(self) -> List[CartItem]:
        return [CartItem(**item) for item in self._items.values()]

    @property
    def item_count(self) -> int:
        return sum(item["quantity"] for item in self._items.values())

    @property
    def total_price(self) -> float:
        return sum(item["price"] * item["quantity"] for item in self._items.values())
