"""Protocol for the host's cart operations."""
import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

@runtime_checkable
class CartOps(Protocol):
    """
    Cart mutations the dispatcher is allowed to perform.

    `add` increments the quantity of an item already in the cart, otherwise
    inserts it with `quantity`. Both calls are synchronous.
    """
    def add(self, product_id: str, quantity: int = 1) -> None:
        ...

    def has_item(self, product_id: str) -> bool:
        ...
