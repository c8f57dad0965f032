from __future__ import annotations

import argparse
import logging
import random
from datetime import datetime, timedelta

from cart_engine.config import PricingConfig
from cart_engine.models import PricingResult
from cart_engine.session import ShopSession


def parse_add(value: str) -> tuple[str, int]:
    product_id, _, qty = value.partition(":")
    try:
        count = int(qty) if qty else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"bad quantity in {value!r}") from None
    if count <= 0:
        raise argparse.ArgumentTypeError("quantity must be > 0")
    return product_id, count


def next_tuesday(now: datetime) -> datetime:
    return now + timedelta(days=(1 - now.weekday()) % 7)


def print_summary(session: ShopSession, result: PricingResult) -> None:
    print("\n=== CART ===")
    if result.is_empty:
        print("cart is empty")
        return

    for line in session.cart.lines():
        product = session.catalog.find_by_id(line.product_id)
        if product:
            print(f"{product.name} x {line.quantity}: {product.unit_price * line.quantity:,}")
    print(f"subtotal: {result.subtotal:,}")
    if result.bulk_discount_applied:
        print(f"bulk discount ({session.config.bulk_discount_min_items}+ items): -{session.config.bulk_discount_rate * 100:.0f}%")
    else:
        for d in result.per_line_discounts:
            print(f"{d.product_name} ({session.config.item_discount_min_qty}+): -{d.discount_percent}%")
    if result.tuesday_discount_applied:
        print(f"Tuesday discount: -{session.config.tuesday_discount_rate * 100:.0f}%")
    print(f"total: {result.total:,} (saved {result.saved_amount:,}, {result.order_discount_rate * 100:.1f}%)")
    print(f"loyalty points: {result.loyalty_points}p ({', '.join(result.points_detail)})")

    if session.catalog.needs_restock():
        print(f"total stock low: {session.catalog.total_stock()} units left")
    warnings = session.catalog.stock_warnings()
    if warnings:
        print("\n".join(warnings))


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    p = argparse.ArgumentParser(description="Fill a cart, fire some promotions and print the priced result.")
    p.add_argument("--add", action="append", type=parse_add, default=[], help="Product to add, ID or ID:QTY (repeatable)")
    p.add_argument("--ticks", type=int, default=0, help="Promotion rounds to simulate before pricing")
    p.add_argument("--seed", type=int, default=None, help="Seed for the promotion random source")
    p.add_argument("--tuesday", action="store_true", help="Price the cart as if today were Tuesday")
    p.add_argument("--config", type=str, default=None, help="JSON file overriding pricing constants")
    args = p.parse_args()

    config = PricingConfig.from_json_file(args.config) if args.config else PricingConfig()
    clock = (lambda: next_tuesday(datetime.now())) if args.tuesday else datetime.now
    session = ShopSession(config=config, rng=random.Random(args.seed), clock=clock)

    for product_id, count in args.add:
        for _ in range(count):
            outcome = session.add(product_id)
            if not outcome.changed:
                print(f"could not add {product_id}: {outcome.value}")
                break

    for _ in range(args.ticks):
        session.tick_lightning()
        session.tick_suggest()

    print_summary(session, session.price())


if __name__ == "__main__":
    main()
