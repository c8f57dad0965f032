"""Pytest fixtures for the cart pricing engine."""

from datetime import datetime

import pytest

from cart_engine.cart import Cart
from cart_engine.catalog import Catalog, default_catalog
from cart_engine.config import PricingConfig
from cart_engine.pricing import PricingCalculator

MONDAY = datetime(2024, 1, 1, 12, 0)
TUESDAY = datetime(2024, 1, 2, 12, 0)


class FixedRandom:
    """Stands in for random.Random: returns the queued indexes in order."""

    def __init__(self, *indexes: int):
        self.indexes = list(indexes)
        self.calls = 0

    def randrange(self, stop: int) -> int:
        idx = self.indexes[self.calls % len(self.indexes)]
        self.calls += 1
        assert 0 <= idx < stop
        return idx


@pytest.fixture
def config() -> PricingConfig:
    return PricingConfig()


@pytest.fixture
def catalog(config) -> Catalog:
    return default_catalog(config)


@pytest.fixture
def cart(catalog) -> Cart:
    return Cart(catalog)


@pytest.fixture
def calculator(config) -> PricingCalculator:
    return PricingCalculator(config)


def fill(cart: Cart, product_id: str, qty: int) -> None:
    for _ in range(qty):
        cart.add_or_increment(product_id)
