"""
Product grid layout helpers.

Pure functions that decide how a product card sits in the storefront grid.
Layout depends only on the card's zero-based index, so a product keeps its
shape no matter how often the page is rendered.

The grid repeats in cycles of five cards:

    index % 5 == 0   featured card, spans two columns, tall image
    odd position     regular card, portrait image
    even position    regular card, square image

Class names are Tailwind utility classes consumed by the React client.
"""

from typing import Any, Dict, Optional

from models.product import Product


LAYOUT_CYCLE = 5

CARD_BASE_CLASSES = "flex flex-col cursor-pointer group bg-white"
FEATURED_CARD_CLASSES = "col-span-2 row-span-2"
REGULAR_CARD_CLASSES = "col-span-1"

FEATURED_IMAGE_CLASSES = "h-[480px] md:h-[640px]"
PORTRAIT_IMAGE_CLASSES = "h-[320px] md:h-[420px]"
SQUARE_IMAGE_CLASSES = "h-[240px] md:h-[320px]"

DEFAULT_CURRENCY = "SEK"

# Shown when a product has no images
PLACEHOLDER_IMAGE_SVG = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' "
    "width='200' height='200' viewBox='0 0 200 200'%3E"
    "%3Crect fill='%23f3f4f6' width='200' height='200'/%3E"
    "%3Ctext x='100' y='105' font-family='Arial,sans-serif' font-size='12' "
    "fill='%239ca3af' text-anchor='middle'%3ENO IMAGE%3C/text%3E"
    "%3C/svg%3E"
)


def is_featured(index: int) -> bool:
    """Whether the card at index is a double-width featured card."""
    return index % LAYOUT_CYCLE == 0


def get_product_layout_classes(index: int) -> str:
    """
    Container classes for the card at a zero-based grid index.

    Example:
        >>> get_product_layout_classes(0)
        'flex flex-col cursor-pointer group bg-white col-span-2 row-span-2'
        >>> get_product_layout_classes(1)
        'flex flex-col cursor-pointer group bg-white col-span-1'
    """
    span = FEATURED_CARD_CLASSES if is_featured(index) else REGULAR_CARD_CLASSES
    return f"{CARD_BASE_CLASSES} {span}"


def get_image_height_classes(index: int) -> str:
    """Image height classes for the card at a zero-based grid index."""
    if is_featured(index):
        return FEATURED_IMAGE_CLASSES
    if (index % LAYOUT_CYCLE) % 2 == 1:
        return PORTRAIT_IMAGE_CLASSES
    return SQUARE_IMAGE_CLASSES


def capitalize_first_letter(text: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    if not text:
        return ""
    return text[0].upper() + text[1:]


def format_price(amount: Optional[str], currency: str = DEFAULT_CURRENCY) -> str:
    """Format a price for display, e.g. '249 SEK'. Empty amount gives ''."""
    if amount is None or amount == "":
        return ""
    return f"{amount} {currency}"


def build_product_card(
    product: Product,
    index: int,
    currency: str = DEFAULT_CURRENCY,
) -> Dict[str, Any]:
    """
    Everything the client needs to render one grid card.

    A product on sale shows its regular price struck through next to the
    current price; ``regular_price_text`` is empty otherwise.
    """
    image = product.primary_image
    on_sale = product.is_on_sale

    return {
        "id": product.id,
        "name": capitalize_first_letter(product.name),
        "image_src": image.src if image else PLACEHOLDER_IMAGE_SVG,
        "image_alt": (image.alt or product.name) if image else product.name,
        "layout_classes": get_product_layout_classes(index),
        "image_classes": get_image_height_classes(index),
        "featured": is_featured(index),
        "on_sale": on_sale,
        "price_text": format_price(product.price, currency),
        "regular_price_text": format_price(product.regular_price, currency) if on_sale else "",
    }
