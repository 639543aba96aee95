# src/verona_voice/dispatch/dispatcher.py
import logging
from typing import Optional

from verona_voice.cart.abc import CartOps
from verona_voice.catalog.types import Product, ProductCatalog, get_product_by_id
from verona_voice.intents.types import (
    AddToCart,
    GetProductRecommendation,
    IntentResponse,
    NavigateToCheckout,
    NavigateToProduct,
)

from .types import CART_PATH, Navigate, product_path

logger = logging.getLogger(__name__)

DEFAULT_REPLY = "Sorry, I didn't quite understand that."


class ActionDispatcher:
    """
    Performs the side effect for a resolved intent and returns the text to speak.

    Side effects go only through the injected `cart_ops` and `navigate`.
    Exceptions raised by those host capabilities propagate to the caller.
    """

    def __init__(self, default_reply: str = DEFAULT_REPLY):
        self._default_reply = default_reply

    def resolve_product(self, catalog: ProductCatalog, product_id: Optional[str], product_name: Optional[str]) -> Optional[Product]:
        """Explicit id in the catalog first, then the first case-insensitive name containment match."""
        product = get_product_by_id(catalog, product_id)
        if product is not None:
            return product
        if product_name:
            needle = product_name.lower()
            return next((p for p in catalog if needle in p["name"].lower()), None)
        return None

    def dispatch(self, response: IntentResponse, catalog: ProductCatalog, cart_ops: CartOps, navigate: Navigate) -> str:
        if isinstance(response, AddToCart):
            text = self._add_to_cart(response, catalog, cart_ops)
        elif isinstance(response, NavigateToProduct):
            text = self._navigate_to_product(response, catalog, navigate)
        elif isinstance(response, GetProductRecommendation):
            text = self._recommend(response, catalog, navigate)
        elif isinstance(response, NavigateToCheckout):
            navigate(CART_PATH)
            text = response.message
        else:
            # ANSWER_FAQ, GENERAL_QUERY and ERROR speak the model's message as is.
            text = response.message
        if not text or not text.strip():
            logger.debug(f"ActionDispatcher: Empty reply for '{response.intent}', using default.")
            return self._default_reply
        return text

    def _add_to_cart(self, response: AddToCart, catalog: ProductCatalog, cart_ops: CartOps) -> str:
        product = self.resolve_product(catalog, response.product_id, response.product_name)
        if product is None:
            logger.info(f"ActionDispatcher: Unresolved product for ADD_TO_CART (id={response.product_id!r}, name={response.product_name!r}).")
            if response.product_name:
                return f'Sorry, I couldn\'t find a product named "{response.product_name}" to add to your cart.'
            if response.product_id:
                return f"Sorry, I could not find the product with ID {response.product_id}."
            return "I couldn't figure out which product to add. Can you be more specific?"
        cart_ops.add(product["id"], response.quantity)
        logger.info(f"ActionDispatcher: Added '{product['id']}' x{response.quantity} to cart.")
        return f"{product['name']} has been added to your cart."

    def _navigate_to_product(self, response: NavigateToProduct, catalog: ProductCatalog, navigate: Navigate) -> str:
        product = self.resolve_product(catalog, response.product_id, response.product_name)
        if product is None:
            logger.info(f"ActionDispatcher: Unresolved product for NAVIGATE_TO_PRODUCT (id={response.product_id!r}, name={response.product_name!r}).")
            if response.product_name:
                return f'Sorry, I couldn\'t find a product named "{response.product_name}".'
            if response.product_id:
                return f"Sorry, I could not find the product with ID {response.product_id}."
            return "I'm not sure which product you want to see. Can you tell me the name or ID?"
        navigate(product_path(product["id"]))
        return f"Taking you to {product['name']}."

    def _recommend(self, response: GetProductRecommendation, catalog: ProductCatalog, navigate: Navigate) -> str:
        product = next(
            (p for p in (get_product_by_id(catalog, pid) for pid in response.suggested_product_ids) if p is not None),
            None,
        )
        if product is None:
            if response.suggested_keywords:
                logger.debug(f"ActionDispatcher: Keyword-only recommendation {response.suggested_keywords}; no navigation.")
            return response.message
        navigate(product_path(product["id"]))
        if response.query:
            return f'Based on your request for "{response.query}", I think you might like {product["name"]}. I\'m taking you to its page now!'
        return f"Based on your request, I think you might like {product['name']}. I'm taking you to its page now!"
