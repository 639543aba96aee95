"""Product and FAQ catalog types plus the StyleSphere sample storefront data."""
from .sample_data import SAMPLE_FAQS, SAMPLE_PRODUCTS, STORE_NAME
from .types import FaqCatalog, FaqItem, Product, ProductCatalog, get_product_by_id

__all__ = [
    "Product",
    "FaqItem",
    "ProductCatalog",
    "FaqCatalog",
    "get_product_by_id",
    "SAMPLE_PRODUCTS",
    "SAMPLE_FAQS",
    "STORE_NAME",
]
