from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Optional

from cart_engine.cart import Cart, CartOutcome
from cart_engine.catalog import Catalog, default_catalog
from cart_engine.config import PricingConfig
from cart_engine.models import PricingResult, Product
from cart_engine.pricing import PricingCalculator
from cart_engine.promotions import PromotionEngine, RandomSource


class ShopSession:
    """
    One shopper's catalog, cart and promotions behind a single lock.

    User actions and scheduler ticks may arrive from different threads;
    each one runs to completion before the next starts, and `price()` only
    ever sees state between mutations.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[PricingConfig] = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], datetime] = datetime.now,
        announce: Optional[Callable[[str], None]] = None,
    ):
        self.config = config or (catalog.config if catalog else PricingConfig())
        self.catalog = catalog or default_catalog(self.config)
        self.cart = Cart(self.catalog)
        self.promotions = PromotionEngine(self.catalog, self.cart, self.config, rng=rng, announce=announce)
        self.calculator = PricingCalculator(self.config)
        self.clock = clock
        self._lock = threading.RLock()

    def add(self, product_id: str) -> CartOutcome:
        with self._lock:
            return self.cart.add_or_increment(product_id)

    def change_quantity(self, product_id: str, delta: int) -> CartOutcome:
        with self._lock:
            return self.cart.change_quantity(product_id, delta)

    def remove(self, product_id: str) -> CartOutcome:
        with self._lock:
            return self.cart.remove(product_id)

    def tick_lightning(self) -> Optional[Product]:
        with self._lock:
            return self.promotions.tick_lightning()

    def tick_suggest(self) -> Optional[Product]:
        with self._lock:
            return self.promotions.tick_suggest(self.cart.last_selected)

    def price(self, now: Optional[datetime] = None) -> PricingResult:
        with self._lock:
            return self.calculator.compute(self.cart, self.catalog, now or self.clock())
