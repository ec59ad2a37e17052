"""Tests for product catalog helpers."""

from bizdash.domain.catalog import low_stock_products, search_products
from bizdash.domain.entities import Product


def product(id, name, quantity=10, description=None):
    return Product(
        id=id, owner_id="o", name=name, price=1000, quantity=quantity, description=description
    )


PRODUCTS = [
    product(1, "Argan oil shampoo", 5, "Repairs dry hair"),
    product(2, "Conditioner", 6),
    product(3, "Hair wax", 0, "Strong hold"),
]


def test_search_by_name_case_insensitive():
    assert [p.id for p in search_products(PRODUCTS, "SHAMPOO")] == [1]


def test_search_matches_description():
    assert [p.id for p in search_products(PRODUCTS, "hold")] == [3]
    assert [p.id for p in search_products(PRODUCTS, "hair")] == [1, 3]


def test_empty_search_returns_everything():
    assert search_products(PRODUCTS, None) == PRODUCTS
    assert search_products(PRODUCTS, "   ") == PRODUCTS


def test_low_stock_boundary():
    """Five units or fewer is low stock."""
    assert [p.id for p in low_stock_products(PRODUCTS)] == [1, 3]


def test_low_stock_custom_threshold():
    assert [p.id for p in low_stock_products(PRODUCTS, threshold=0)] == [3]
