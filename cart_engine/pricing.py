from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Set, Tuple

from cart_engine.cart import Cart
from cart_engine.catalog import Catalog
from cart_engine.config import PricingConfig
from cart_engine.models import LineDiscount, PricingResult
from cart_engine.money import discounted, round_half_up

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LineTotals:
    subtotal: int = 0
    item_count: int = 0
    discounted_total: Decimal = Decimal("0")
    line_discounts: List[LineDiscount] = field(default_factory=list)
    product_ids: Set[str] = field(default_factory=set)


class PricingCalculator:
    """
    Turns the current Cart + Catalog into a PricingResult.

    Discount precedence:
    1. per-line volume discount (line quantity >= 10, rate from the product table)
    2. bulk discount (item count >= 30) replaces step 1 entirely: 25% off subtotal
    3. Tuesday discount multiplies whatever is left by 0.9

    Rounding happens once, on the final total; points are computed from the
    rounded total. Nothing in Cart or Catalog is modified.
    """

    def __init__(self, config: Optional[PricingConfig] = None):
        self.config = config or PricingConfig()

    def is_tuesday(self, now: datetime) -> bool:
        return now.weekday() == self.config.tuesday_weekday

    def _sum_lines(self, cart: Cart, catalog: Catalog) -> LineTotals:
        totals = LineTotals()
        for line in cart.lines():
            product = catalog.find_by_id(line.product_id)
            if not product:
                logger.warning("skipping cart line for unknown product %s", line.product_id)
                continue

            line_total = product.unit_price * line.quantity
            totals.subtotal += line_total
            totals.item_count += line.quantity
            totals.product_ids.add(product.id)

            rate = Decimal("0")
            if line.quantity >= self.config.item_discount_min_qty:
                rate = self.config.item_rate(product.id)
                if rate > 0:
                    totals.line_discounts.append(
                        LineDiscount(product_name=product.name, discount_percent=int(rate * 100))
                    )
            totals.discounted_total += discounted(line_total, rate)
        return totals

    def _loyalty_points(
        self, total: int, item_count: int, product_ids: Set[str], tuesday: bool
    ) -> Tuple[int, List[str]]:
        cfg = self.config
        detail: List[str] = []

        base_points = total // cfg.points_divisor
        points = 0
        if base_points > 0:
            points = base_points
            detail.append(f"base: {base_points}p")
            if tuesday:
                points = base_points * cfg.tuesday_points_multiplier
                detail.append(f"Tuesday x{cfg.tuesday_points_multiplier}")

        has_keyboard = cfg.keyboard_id in product_ids
        has_mouse = cfg.mouse_id in product_ids
        if has_keyboard and has_mouse:
            points += cfg.keyboard_mouse_bonus
            detail.append(f"keyboard+mouse set +{cfg.keyboard_mouse_bonus}p")
            if cfg.monitor_arm_id in product_ids:
                points += cfg.full_set_bonus
                detail.append(f"full set +{cfg.full_set_bonus}p")

        tier, bonus = cfg.quantity_bonus(item_count)
        if bonus:
            points += bonus
            detail.append(f"bulk purchase ({tier}+) +{bonus}p")
        return points, detail

    def compute(self, cart: Cart, catalog: Catalog, now: Optional[datetime] = None) -> PricingResult:
        now = now or datetime.now()
        line_count = len(cart.lines())
        if line_count == 0:
            return PricingResult()

        totals = self._sum_lines(cart, catalog)
        subtotal = totals.subtotal
        discounted_total = totals.discounted_total

        bulk = totals.item_count >= self.config.bulk_discount_min_items
        if bulk:
            discounted_total = discounted(subtotal, self.config.bulk_discount_rate)

        rate = Decimal("0")
        if subtotal > 0:
            rate = (subtotal - discounted_total) / subtotal

        tuesday = self.is_tuesday(now)
        tuesday_applied = False
        if tuesday and discounted_total > 0:
            discounted_total = discounted(discounted_total, self.config.tuesday_discount_rate)
            rate = Decimal("1") - discounted_total / subtotal
            tuesday_applied = True

        total = round_half_up(discounted_total)
        points, detail = self._loyalty_points(total, totals.item_count, totals.product_ids, tuesday)

        logger.debug(
            "priced cart: subtotal=%s items=%s rate=%s total=%s points=%s",
            subtotal, totals.item_count, rate, total, points,
        )
        return PricingResult(
            subtotal=subtotal,
            item_count=totals.item_count,
            per_line_discounts=totals.line_discounts,
            order_discount_rate=rate,
            total=total,
            loyalty_points=points,
            points_detail=detail,
            bulk_discount_applied=bulk,
            tuesday_discount_applied=tuesday_applied,
            line_count=line_count,
        )
