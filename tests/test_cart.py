"""Tests for cart mutations and stock bookkeeping."""
import random

from cart_engine.cart import Cart, CartOutcome
from cart_engine.catalog import default_catalog
from cart_engine.config import PricingConfig
from conftest import fill


def _stock_is_conserved(catalog, cart) -> bool:
    return all(p.stock + cart.quantity_of(p.id) == p.initial_stock for p in catalog.get_all())


def test_add_creates_line_and_takes_stock(catalog, cart):
    """Test add creates line and takes stock."""
    outcome = cart.add_or_increment("p1")

    assert outcome is CartOutcome.ADDED
    assert cart.quantity_of("p1") == 1
    assert catalog.find_by_id("p1").stock == 49
    assert cart.last_selected == "p1"


def test_add_twice_increments_same_line(catalog, cart):
    """Test add twice increments same line."""
    cart.add_or_increment("p1")
    outcome = cart.add_or_increment("p1")

    assert outcome is CartOutcome.INCREMENTED
    assert len(cart.lines()) == 1
    assert cart.quantity_of("p1") == 2
    assert catalog.find_by_id("p1").stock == 48


def test_lines_keep_insertion_order(cart):
    """Test lines keep insertion order."""
    cart.add_or_increment("p3")
    cart.add_or_increment("p1")
    cart.add_or_increment("p3")

    assert [line.product_id for line in cart.lines()] == ["p3", "p1"]


def test_add_unknown_product_is_noop(catalog, cart):
    """Test add unknown product is noop."""
    outcome = cart.add_or_increment("ghost")

    assert outcome is CartOutcome.NOT_FOUND
    assert cart.is_empty()
    assert cart.last_selected is None


def test_add_out_of_stock_product_is_noop(catalog, cart):
    """Test add out of stock product is noop."""
    outcome = cart.add_or_increment("p4")

    assert outcome is CartOutcome.OUT_OF_STOCK
    assert outcome.is_stock_shortage
    assert cart.is_empty()
    assert catalog.find_by_id("p4").stock == 0


def test_add_stops_when_stock_runs_out(catalog, cart):
    """Test add stops when stock runs out."""
    fill(cart, "p5", 10)

    assert cart.add_or_increment("p5") is CartOutcome.OUT_OF_STOCK
    assert cart.quantity_of("p5") == 10
    assert catalog.find_by_id("p5").stock == 0


def test_change_quantity_up_and_down(catalog, cart):
    """Test change quantity up and down."""
    cart.add_or_increment("p2")

    assert cart.change_quantity("p2", 4) is CartOutcome.UPDATED
    assert cart.quantity_of("p2") == 5
    assert catalog.find_by_id("p2").stock == 25

    assert cart.change_quantity("p2", -2) is CartOutcome.UPDATED
    assert cart.quantity_of("p2") == 3
    assert catalog.find_by_id("p2").stock == 27


def test_change_quantity_to_zero_removes_line(catalog, cart):
    """Test change quantity to zero removes line."""
    fill(cart, "p2", 3)

    outcome = cart.change_quantity("p2", -3)

    assert outcome is CartOutcome.REMOVED
    assert not cart.contains("p2")
    assert catalog.find_by_id("p2").stock == 30


def test_change_quantity_below_zero_returns_full_quantity(catalog, cart):
    """Test change quantity below zero returns full quantity."""
    fill(cart, "p2", 3)

    assert cart.change_quantity("p2", -10) is CartOutcome.REMOVED
    assert catalog.find_by_id("p2").stock == 30


def test_change_quantity_beyond_stock_is_rejected_without_changes(catalog, cart):
    """Test change quantity beyond stock is rejected without changes."""
    fill(cart, "p5", 4)
    before_lines = [(l.product_id, l.quantity) for l in cart.lines()]
    before_stock = [(p.id, p.stock, p.unit_price) for p in catalog.get_all()]

    outcome = cart.change_quantity("p5", 7)  # 4 + 7 > 10 available

    assert outcome is CartOutcome.INSUFFICIENT_STOCK
    assert not outcome.changed
    assert [(l.product_id, l.quantity) for l in cart.lines()] == before_lines
    assert [(p.id, p.stock, p.unit_price) for p in catalog.get_all()] == before_stock


def test_change_quantity_up_to_exact_stock_is_allowed(catalog, cart):
    """Test change quantity up to exact stock is allowed."""
    fill(cart, "p5", 4)

    assert cart.change_quantity("p5", 6) is CartOutcome.UPDATED
    assert cart.quantity_of("p5") == 10
    assert catalog.find_by_id("p5").stock == 0


def test_change_quantity_unknown_line_is_noop(catalog, cart):
    """Test change quantity unknown line is noop."""
    assert cart.change_quantity("p1", 1) is CartOutcome.NOT_FOUND
    assert cart.change_quantity("ghost", 1) is CartOutcome.NOT_FOUND
    assert catalog.find_by_id("p1").stock == 50


def test_remove_returns_stock(catalog, cart):
    """Test remove returns stock."""
    fill(cart, "p3", 7)

    assert cart.remove("p3") is CartOutcome.REMOVED
    assert cart.is_empty()
    assert catalog.find_by_id("p3").stock == 20
    assert cart.remove("p3") is CartOutcome.NOT_FOUND


def test_add_then_remove_round_trip(catalog, cart):
    """Test add then remove round trip."""
    cart.add_or_increment("p1")
    before_lines = [(l.product_id, l.quantity) for l in cart.lines()]
    before_stock = [(p.id, p.stock) for p in catalog.get_all()]

    cart.add_or_increment("p2")
    cart.change_quantity("p2", -1)

    assert [(l.product_id, l.quantity) for l in cart.lines()] == before_lines
    assert [(p.id, p.stock) for p in catalog.get_all()] == before_stock


def test_stock_conservation_over_random_operations(catalog):
    """Test stock conservation over random operations."""
    rng = random.Random(1234)
    cart = Cart(catalog)
    ids = [p.id for p in catalog.get_all()] + ["ghost"]

    for _ in range(500):
        product_id = rng.choice(ids)
        op = rng.randrange(3)
        if op == 0:
            cart.add_or_increment(product_id)
        elif op == 1:
            cart.change_quantity(product_id, rng.randint(-5, 5))
        else:
            cart.remove(product_id)

        assert _stock_is_conserved(catalog, cart)
        assert all(p.stock >= 0 for p in catalog.get_all())
        assert all(line.quantity >= 1 for line in cart.lines())


def test_item_count_and_get_line(cart):
    """Test item count across lines and line lookup."""
    fill(cart, "p1", 3)
    fill(cart, "p2", 2)

    assert cart.item_count() == 5
    assert cart.get_line("p2").quantity == 2
    assert cart.get_line("p3") is None


def test_add_respects_out_of_stock_threshold():
    """Test that a product at the out-of-stock threshold cannot be added."""
    catalog = default_catalog(PricingConfig(out_of_stock_threshold=10))
    cart = Cart(catalog)

    assert cart.add_or_increment("p5") is CartOutcome.OUT_OF_STOCK
    assert catalog.find_by_id("p5").stock == 10
    assert cart.add_or_increment("p3") is CartOutcome.ADDED
