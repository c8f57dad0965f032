from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from cart_engine.catalog import Catalog
from cart_engine.models import CartLine


class CartOutcome(Enum):
    ADDED = "added"
    INCREMENTED = "incremented"
    UPDATED = "updated"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_STOCK = "insufficient_stock"

    @property
    def changed(self) -> bool:
        return self in (CartOutcome.ADDED, CartOutcome.INCREMENTED, CartOutcome.UPDATED, CartOutcome.REMOVED)

    @property
    def is_stock_shortage(self) -> bool:
        return self in (CartOutcome.OUT_OF_STOCK, CartOutcome.INSUFFICIENT_STOCK)


class Cart:
    """
    Ordered cart lines, one per product, keyed by product id.

    Every quantity moved into a line is taken from the product's stock and
    every quantity leaving a line goes back, so stock + quantity in cart
    always equals the product's initial stock.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._lines: Dict[str, CartLine] = {}
        self.last_selected: Optional[str] = None

    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def contains(self, product_id: str) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self.get_line(product_id)
        return line.quantity if line else 0

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def add_or_increment(self, product_id: str) -> CartOutcome:
        product = self.catalog.find_by_id(product_id)
        if not product:
            return CartOutcome.NOT_FOUND
        if self.catalog.is_out_of_stock(product):
            self.catalog.log(f"[cart] {product_id} out of stock, not added")
            return CartOutcome.OUT_OF_STOCK

        line = self._lines.get(product_id)
        if line:
            line.quantity += 1
            outcome = CartOutcome.INCREMENTED
        else:
            line = CartLine(product_id=product_id, quantity=1)
            self._lines[product_id] = line
            outcome = CartOutcome.ADDED
        product.stock -= 1
        self.last_selected = product_id
        self.catalog.log(f"[cart] {outcome.value}: {product_id} qty={line.quantity} (stock={product.stock})")
        return outcome

    def change_quantity(self, product_id: str, delta: int) -> CartOutcome:
        product = self.catalog.find_by_id(product_id)
        line = self._lines.get(product_id)
        if not product or not line:
            return CartOutcome.NOT_FOUND

        current = line.quantity
        new_qty = current + delta
        if new_qty <= 0:
            return self.remove(product_id)
        if new_qty > product.stock + current:
            self.catalog.log(
                f"[cart] insufficient stock for {product_id}: have={product.stock + current}, need={new_qty}"
            )
            return CartOutcome.INSUFFICIENT_STOCK

        line.quantity = new_qty
        product.stock -= delta
        self.catalog.log(f"[cart] updated: {product_id} qty={new_qty} (stock={product.stock})")
        return CartOutcome.UPDATED

    def remove(self, product_id: str) -> CartOutcome:
        line = self._lines.pop(product_id, None)
        if not line:
            return CartOutcome.NOT_FOUND
        product = self.catalog.find_by_id(product_id)
        if product:
            product.stock += line.quantity
            self.catalog.log(f"[cart] removed: {product_id} qty={line.quantity} (stock={product.stock})")
        return CartOutcome.REMOVED
