# backend/menu/deal_items.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from utils.money import ZERO, is_json_number, json_number, to_decimal


@dataclass(frozen=True)
class DealItem:
    menu_item_id: str
    name: str
    quantity: int
    deal_price_per_item: Decimal
    original_price_per_item: Decimal

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError("Deal item quantity must be a positive whole number.")
        if self.deal_price_per_item < 0:
            raise ValueError("Deal price must be a non-negative number.")
        if self.original_price_per_item < 0:
            raise ValueError("Original price must be a non-negative number.")

    @property
    def line_total(self) -> Decimal:
        return self.deal_price_per_item * self.quantity

    def to_blob(self) -> dict:
        return {
            "menuItemId": self.menu_item_id,
            "name": self.name,
            "quantity": self.quantity,
            "dealPricePerItem": json_number(self.deal_price_per_item),
            "originalPricePerItem": json_number(self.original_price_per_item),
        }

    @classmethod
    def from_blob(cls, raw) -> "DealItem":
        if not isinstance(raw, dict):
            raise ValueError("Deal item must be an object.")
        menu_item_id = raw.get("menuItemId")
        name = raw.get("name")
        quantity = raw.get("quantity")
        if not isinstance(menu_item_id, str) or not menu_item_id:
            raise ValueError("Deal item menuItemId must be a string.")
        if not isinstance(name, str):
            raise ValueError("Deal item name must be a string.")
        for key in ("quantity", "dealPricePerItem", "originalPricePerItem"):
            if not is_json_number(raw.get(key)):
                raise ValueError(f"Deal item {key} must be a number.")
        if quantity != int(quantity):
            raise ValueError("Deal item quantity must be a positive whole number.")
        return cls(
            menu_item_id=menu_item_id,
            name=name,
            quantity=int(quantity),
            deal_price_per_item=to_decimal(raw["dealPricePerItem"]),
            original_price_per_item=to_decimal(raw["originalPricePerItem"]),
        )


def deal_total(items: Iterable[DealItem]) -> Decimal:
    return sum((item.line_total for item in items), ZERO)


def deal_items_from_blob(raw) -> List[DealItem]:
    if not isinstance(raw, list):
        raise ValueError("Deal items must be an array.")
    return [DealItem.from_blob(entry) for entry in raw]


def deal_items_to_blob(items: Iterable[DealItem]) -> list:
    return [item.to_blob() for item in items]
