from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

KEYBOARD_ID = "p1"
MOUSE_ID = "p2"
MONITOR_ARM_ID = "p3"
POUCH_ID = "p4"
SPEAKER_ID = "p5"

TUESDAY = 1  # datetime.weekday()


def _default_item_rates() -> Dict[str, Decimal]:
    return {
        KEYBOARD_ID: Decimal("0.10"),
        MOUSE_ID: Decimal("0.15"),
        MONITOR_ARM_ID: Decimal("0.20"),
        POUCH_ID: Decimal("0"),
        SPEAKER_ID: Decimal("0.25"),
    }


def _default_quantity_bonuses() -> Tuple[Tuple[int, int], ...]:
    # (min item count, bonus points), highest tier first
    return ((30, 100), (20, 50), (10, 20))


_RATE_FIELDS = ("bulk_discount_rate", "tuesday_discount_rate", "lightning_rate", "suggest_rate")


@dataclass(frozen=True, slots=True)
class PricingConfig:
    """
    Every tunable number the pricing and promotion rules depend on.

    Defaults reproduce the shop's standard rules; override them with
    `from_mapping` / `from_json_file` instead of patching module constants.
    """

    item_discount_rates: Dict[str, Decimal] = field(default_factory=_default_item_rates)
    item_discount_min_qty: int = 10
    bulk_discount_min_items: int = 30
    bulk_discount_rate: Decimal = Decimal("0.25")
    tuesday_discount_rate: Decimal = Decimal("0.10")
    tuesday_weekday: int = TUESDAY
    lightning_rate: Decimal = Decimal("0.20")
    suggest_rate: Decimal = Decimal("0.05")

    points_divisor: int = 1000
    tuesday_points_multiplier: int = 2
    keyboard_mouse_bonus: int = 50
    full_set_bonus: int = 100
    quantity_bonuses: Tuple[Tuple[int, int], ...] = field(default_factory=_default_quantity_bonuses)

    keyboard_id: str = KEYBOARD_ID
    mouse_id: str = MOUSE_ID
    monitor_arm_id: str = MONITOR_ARM_ID

    low_stock_threshold: int = 5
    out_of_stock_threshold: int = 0
    stock_alert_threshold: int = 30

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        for name in _RATE_FIELDS:
            object.__setattr__(self, name, Decimal(str(getattr(self, name))))
        object.__setattr__(
            self,
            "item_discount_rates",
            {str(pid): Decimal(str(rate)) for pid, rate in self.item_discount_rates.items()},
        )

        for name in _RATE_FIELDS:
            value = getattr(self, name)
            if not Decimal("0") <= value <= Decimal("1"):
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        for product_id, rate in self.item_discount_rates.items():
            if not Decimal("0") <= rate <= Decimal("1"):
                raise ValueError(f"discount rate for {product_id} must be between 0 and 1, got {rate}")
        if self.points_divisor <= 0:
            raise ValueError("points_divisor must be > 0")
        if not 0 <= self.tuesday_weekday <= 6:
            raise ValueError("tuesday_weekday must be a weekday number 0..6")

    def item_rate(self, product_id: str) -> Decimal:
        return self.item_discount_rates.get(product_id, Decimal("0"))

    def quantity_bonus(self, item_count: int) -> Tuple[int, int]:
        """Return (tier, bonus) for the highest tier reached, or (0, 0)."""
        for tier, bonus in sorted(self.quantity_bonuses, reverse=True):
            if item_count >= tier:
                return tier, bonus
        return 0, 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PricingConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "quantity_bonuses":
                kwargs[key] = tuple((int(tier), int(bonus)) for tier, bonus in value)
            else:
                kwargs[key] = value
        return cls(**kwargs)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "PricingConfig":
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return cls.from_mapping(data)
