# src/verona_voice/catalog/types.py
"""Host-owned storefront records read by the concierge."""
from typing import Optional, Sequence, TypedDict


class Product(TypedDict):
    id: str
    name: str
    description: str
    price: float
    category: str
    image_url: str


class FaqItem(TypedDict):
    id: str
    question: str
    answer: str


ProductCatalog = Sequence[Product]
FaqCatalog = Sequence[FaqItem]


def get_product_by_id(catalog: ProductCatalog, product_id: Optional[str]) -> Optional[Product]:
    if not product_id:
        return None
    return next((p for p in catalog if p["id"] == product_id), None)
