"""Product catalog helpers."""

from typing import Iterable, Optional

from bizdash.domain.entities import LOW_STOCK_THRESHOLD, Product


def search_products(products: Iterable[Product], term: Optional[str]) -> list[Product]:
    """Products whose name or description contains ``term`` (case-insensitive).

    An empty term matches everything.
    """
    if not term or not term.strip():
        return list(products)
    needle = term.strip().casefold()
    return [
        p
        for p in products
        if needle in p.name.casefold() or needle in (p.description or "").casefold()
    ]


def low_stock_products(
    products: Iterable[Product], threshold: int = LOW_STOCK_THRESHOLD
) -> list[Product]:
    """Products at or below ``threshold`` units in stock."""
    return [p for p in products if p.quantity <= threshold]
