import re
from typing import Optional

REAL_REAL_MARKER = "real real"
REAL_REAL_BASE_URL = "https://www.therealreal.com/products"

# First match wins.
_CATEGORY_KEYWORDS = (
    (("sneaker", "shoe", "yeezy"), "men/shoes/sneakers"),
    (("jacket", "coat"), "men/clothing/jackets"),
    (("shirt", "tee", "t-shirt"), "men/clothing/shirts"),
    (("pant", "jean", "trouser"), "men/clothing/pants"),
    (("sweater", "hoodie", "pullover"), "men/clothing/sweaters"),
    (("watch",), "men/watches"),
    (("bag", "backpack", "briefcase"), "men/accessories/bags"),
)
_DEFAULT_CATEGORY = "men"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_DASHES = re.compile(r"-+")


def slugify(name: str) -> str:
    slug = _NON_SLUG_CHARS.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _REPEATED_DASHES.sub("-", slug)
    return slug.strip("-").strip()


def guess_category(name: str) -> str:
    lowered = name.lower()
    for keywords, category in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return _DEFAULT_CATEGORY


def resolve_product_url(
    name: str,
    store_name: Optional[str],
    product_url: Optional[str] = None,
) -> Optional[str]:
    """Stored link if there is one, else a generated listing URL where we know the shop."""
    if product_url:
        return product_url
    if not store_name or REAL_REAL_MARKER not in store_name.lower():
        return None
    return f"{REAL_REAL_BASE_URL}/{guess_category(name)}/{slugify(name)}"


__all__ = ["guess_category", "resolve_product_url", "slugify"]
