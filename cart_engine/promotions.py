from __future__ import annotations

import logging
import random
from typing import Callable, Optional, Protocol

from cart_engine.cart import Cart
from cart_engine.catalog import Catalog
from cart_engine.config import PricingConfig
from cart_engine.models import Product
from cart_engine.money import discounted, round_half_up

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def sale_price(product: Product, config: PricingConfig) -> int:
    """Unit price for the product's active sale flags, lightning applied before suggestion."""
    price = product.base_price
    if product.on_lightning_sale:
        price = round_half_up(discounted(price, config.lightning_rate))
    if product.on_suggested_sale:
        price = round_half_up(discounted(price, config.suggest_rate))
    return price


class PromotionEngine:
    """
    Randomized sale events driven by an external scheduler.

    The scheduler decides when to call `tick_lightning` / `tick_suggest`;
    each tick either activates one product's sale and returns it, or
    returns None.
    """

    def __init__(
        self,
        catalog: Catalog,
        cart: Cart,
        config: Optional[PricingConfig] = None,
        rng: Optional[RandomSource] = None,
        announce: Optional[Callable[[str], None]] = None,
    ):
        self.catalog = catalog
        self.cart = cart
        self.config = config or catalog.config
        self.rng = rng or random.Random()
        self.announce = announce

    def _announce(self, message: str) -> None:
        self.catalog.log(f"[promo] {message}")
        if self.announce:
            self.announce(message)

    def tick_lightning(self) -> Optional[Product]:
        products = self.catalog.get_all()
        if not products:
            return None

        product = products[self.rng.randrange(len(products))]
        if self.catalog.is_out_of_stock(product) or product.on_lightning_sale:
            logger.debug("lightning tick skipped: %s not eligible", product.id)
            return None

        product.on_lightning_sale = True
        product.unit_price = sale_price(product, self.config)
        self._announce(f"Lightning sale! {product.name} is {self.config.lightning_rate * 100:.0f}% off!")
        return product

    def tick_suggest(self, last_selected_id: Optional[str]) -> Optional[Product]:
        if self.cart.is_empty() or not last_selected_id:
            return None

        suggestion = next(
            (
                p
                for p in self.catalog.get_all()
                if p.id != last_selected_id
                and not self.catalog.is_out_of_stock(p)
                and not p.on_suggested_sale
            ),
            None,
        )
        if not suggestion:
            logger.debug("suggest tick skipped: no eligible product")
            return None

        suggestion.on_suggested_sale = True
        suggestion.unit_price = round_half_up(discounted(suggestion.unit_price, self.config.suggest_rate))
        self._announce(
            f"How about {suggestion.name}? Buy now for an extra {self.config.suggest_rate * 100:.0f}% off!"
        )
        return suggestion
