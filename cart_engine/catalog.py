from __future__ import annotations

import logging
from typing import Dict, List, Optional

from cart_engine.config import (
    KEYBOARD_ID,
    MONITOR_ARM_ID,
    MOUSE_ID,
    POUCH_ID,
    SPEAKER_ID,
    PricingConfig,
)
from cart_engine.models import Product

logger = logging.getLogger(__name__)


class Catalog:
    """
    In-memory product store for one shopping session.

    Holds the products in seed order and the session's event log. Nothing
    here mutates stock or prices: the Cart owns stock changes and the
    PromotionEngine owns sale state.
    """

    def __init__(self, config: Optional[PricingConfig] = None) -> None:
        self.config = config or PricingConfig()
        self.products: Dict[str, Product] = {}

        self.logs: List[str] = []

    def log(self, message: str) -> None:
        self.logs.append(message)
        logger.info(message)

    # Seed helpers
    def add_product(self, product_id: str, name: str, price: int, stock: int) -> Product:
        if product_id in self.products:
            raise ValueError(f"Product {product_id} already exists")
        if price < 0:
            raise ValueError("price must be >= 0")
        if stock < 0:
            raise ValueError("stock must be >= 0")
        product = Product(
            id=product_id,
            name=name,
            base_price=price,
            unit_price=price,
            stock=stock,
            initial_stock=stock,
        )
        self.products[product_id] = product
        return product

    def get_all(self) -> List[Product]:
        return list(self.products.values())

    def find_by_id(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    def total_stock(self) -> int:
        return sum(p.stock for p in self.products.values())

    def needs_restock(self) -> bool:
        return self.total_stock() < self.config.stock_alert_threshold

    def is_out_of_stock(self, product: Product) -> bool:
        return product.stock <= self.config.out_of_stock_threshold

    def low_stock_products(self) -> List[Product]:
        return [
            p
            for p in self.products.values()
            if not self.is_out_of_stock(p) and p.stock < self.config.low_stock_threshold
        ]

    def stock_warnings(self) -> List[str]:
        warnings: List[str] = []
        for p in self.products.values():
            if self.is_out_of_stock(p):
                warnings.append(f"{p.name}: out of stock")
            elif p.stock < self.config.low_stock_threshold:
                warnings.append(f"{p.name}: low stock ({p.stock} left)")
        return warnings


def default_catalog(config: Optional[PricingConfig] = None) -> Catalog:
    catalog = Catalog(config)
    catalog.add_product(KEYBOARD_ID, "Bug-Zapping Keyboard", price=10000, stock=50)
    catalog.add_product(MOUSE_ID, "Productivity Mouse", price=20000, stock=30)
    catalog.add_product(MONITOR_ARM_ID, "Neck-Saver Monitor Arm", price=30000, stock=20)
    catalog.add_product(POUCH_ID, "Error-Proof Laptop Pouch", price=15000, stock=0)  # Out of stock
    catalog.add_product(SPEAKER_ID, "Lo-Fi Coding Speaker", price=25000, stock=10)
    return catalog
