# src/verona_voice/catalog/sample_data.py
"""StyleSphere demo catalog used by the console example and tests."""
from typing import Tuple

from .types import FaqItem, Product

STORE_NAME = "StyleSphere"


def _product(product_id: str, name: str, description: str, price: float, image_url: str = "") -> Product:
    return Product(
        id=product_id,
        name=name,
        description=description,
        price=price,
        category="Apparel",
        image_url=image_url or f"https://picsum.photos/seed/{product_id}/400/300",
    )


SAMPLE_PRODUCTS: Tuple[Product, ...] = (
    _product("2319076", "Charlene Dress Stone", "Elegant stone-colored dress from Tuxer, perfect for any occasion.", 899),
    _product("2319075", "Charlene Dress Olivine", "Stylish olivine green dress from Tuxer with modern design.", 899),
    _product("2310841", "Högalid Dress Grey Melange", "Premium grey melange dress from Sätila of Sweden with sophisticated styling.", 1995,
             "https://images.footway.com/02/61209-21_001.png"),
    _product("2301425", "Högalid Dress Grey Melange", "Classic grey melange dress from Sätila of Sweden, versatile and comfortable.", 1995),
    _product("2301424", "Högalid Dress Beige", "Elegant beige dress from Sätila of Sweden with timeless appeal.", 1995,
             "https://images.footway.com/02/61202-34_001.png"),
    _product("2193051", "Club Dress Black", "Athletic black dress from adidas Tennis, perfect for active wear.", 669,
             "https://images.footway.com/02/61114-34_001.png"),
    _product("2182757", "Dress Pink Lady", "Vibrant pink dress from Champion, ideal for children's wear.", 350,
             "https://images.footway.com/02/61106-03_001.png"),
    _product("2182439", "Carmen Dress Dark Navy", "Sophisticated dark navy dress from Tuxer with elegant design.", 499,
             "https://images.footway.com/02/61105-79_001.png"),
    _product("2182438", "Carmen Dress Navy Stripes", "Stylish navy striped dress from Tuxer with classic nautical appeal.", 499,
             "https://images.footway.com/02/61105-78_001.png"),
    _product("2177298", "Essentials 3-Stripes Single Jersey Boyfriend Tee Dress Pink",
             "Comfortable pink boyfriend tee dress from adidas with iconic 3-stripes design.", 469,
             "https://images.footway.com/02/61103-46_001.png"),
    _product("2177149", "Essentials 3-Stripes Single Jersey Boyfriend Tee Dress Medium Grey Heather / White",
             "Relaxed grey heather and white boyfriend tee dress from adidas.", 469,
             "https://images.footway.com/02/61101-97_001.png"),
    _product("2151753", "W Pique Dress White", "Premium white pique dress from Peak Performance with athletic styling.", 1199,
             "https://images.footway.com/02/61081-66_001.png"),
    _product("2107501", "Hmlfreja Gymsuit Rose Brown", "Comfortable rose brown gymsuit from Hummel, perfect for active children.", 500),
    _product("2107500", "Hmlfreja Gymsuit Asphalt", "Durable asphalt-colored gymsuit from Hummel for active kids.", 500),
)

SAMPLE_FAQS: Tuple[FaqItem, ...] = (
    FaqItem(id="faq1", question="What is your return policy?",
            answer="We offer a 30-day free return policy on all eligible items. Items must be in new and unused condition with original packaging."),
    FaqItem(id="faq2", question="How long does shipping take?",
            answer="Standard shipping typically takes 3-5 business days. Expedited options are available at checkout."),
    FaqItem(id="faq3", question="Do you ship internationally?",
            answer="Currently, we only ship within the United States. We are working on expanding our shipping options in the future."),
    FaqItem(id="faq4", question="How can I track my order?",
            answer="Once your order ships, you will receive an email with a tracking number and a link to track your package."),
)
