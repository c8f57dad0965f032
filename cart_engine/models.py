from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass(slots=True)
class Product:
    id: str
    name: str
    base_price: int
    unit_price: int
    stock: int
    initial_stock: int = 0
    on_lightning_sale: bool = False
    on_suggested_sale: bool = False

    @property
    def is_on_sale(self) -> bool:
        return self.on_lightning_sale or self.on_suggested_sale


@dataclass(slots=True)
class CartLine:
    product_id: str
    quantity: int


@dataclass(slots=True)
class LineDiscount:
    product_name: str
    discount_percent: int


@dataclass(slots=True)
class PricingResult:
    """
    Snapshot of what the cart costs right now.

    Never stored: recomputed from Cart + Catalog whenever something changes.
    `per_line_discounts` lists every qualifying line even when the bulk
    discount overrides them; check `bulk_discount_applied` before showing them.
    """

    subtotal: int = 0
    item_count: int = 0
    per_line_discounts: List[LineDiscount] = field(default_factory=list)
    order_discount_rate: Decimal = Decimal("0")
    total: int = 0
    loyalty_points: int = 0
    points_detail: List[str] = field(default_factory=list)
    bulk_discount_applied: bool = False
    tuesday_discount_applied: bool = False
    line_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.line_count == 0

    @property
    def saved_amount(self) -> int:
        return self.subtotal - self.total
