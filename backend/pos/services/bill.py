# backend/pos/services/bill.py
"""
In-progress bill: ordered line items, quantity edits, removals and totals.

Pure Python on purpose: nothing here touches the database or the
request. Removals hand back a ``RemovedLine`` that the caller persists in the
deleted item log.
"""
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, List, Optional

from utils.money import ZERO, is_json_number, json_number, to_decimal

from . import errors

REASON_REMOVED = "removed by cashier"
REASON_QUANTITY_ZERO = "quantity reduced to zero"


def new_bill_item_id() -> str:
    return f"billItem_{uuid.uuid4().hex}"


@dataclass(frozen=True)
class DealContext:
    deal_id: str
    deal_name: str
    original_price_per_item: Optional[Decimal] = None

    def to_blob(self) -> dict:
        blob = {"dealId": self.deal_id, "dealName": self.deal_name}
        if self.original_price_per_item is not None:
            blob["originalPricePerItem"] = json_number(self.original_price_per_item)
        return blob

    @classmethod
    def from_blob(cls, raw) -> "DealContext":
        if not isinstance(raw, dict):
            raise ValueError("dealContext must be an object.")
        deal_id = raw.get("dealId")
        deal_name = raw.get("dealName")
        if not isinstance(deal_id, str) or not isinstance(deal_name, str):
            raise ValueError("dealContext needs string dealId and dealName.")
        original = raw.get("originalPricePerItem")
        if original is not None and not is_json_number(original):
            raise ValueError("dealContext originalPricePerItem must be a number.")
        return cls(
            deal_id=deal_id,
            deal_name=deal_name,
            original_price_per_item=to_decimal(original) if original is not None else None,
        )


@dataclass(frozen=True)
class BillItem:
    bill_item_id: str
    menu_item_id: str
    code: str
    name: str
    price: Decimal
    quantity: int
    category: Optional[str] = None
    deal_context: Optional[DealContext] = None

    @property
    def total_price(self) -> Decimal:
        return self.price * self.quantity

    @property
    def is_deal_item(self) -> bool:
        return self.deal_context is not None

    def to_blob(self) -> dict:
        blob = {
            "billItemId": self.bill_item_id,
            "menuItemId": self.menu_item_id,
            "code": self.code,
            "name": self.name,
            "price": json_number(self.price),
            "quantity": self.quantity,
            "totalPrice": json_number(self.total_price),
        }
        if self.category:
            blob["category"] = self.category
        if self.deal_context is not None:
            blob["dealContext"] = self.deal_context.to_blob()
        return blob

    @classmethod
    def from_blob(cls, raw) -> "BillItem":
        if not isinstance(raw, dict):
            raise ValueError("Bill item must be an object.")
        for key in ("billItemId", "menuItemId", "code", "name"):
            if not isinstance(raw.get(key), str):
                raise ValueError(f"Bill item {key} must be a string.")
        for key in ("price", "quantity", "totalPrice"):
            if not is_json_number(raw.get(key)):
                raise ValueError(f"Bill item {key} must be a number.")
        quantity = raw["quantity"]
        if quantity != int(quantity) or quantity < 1:
            raise ValueError("Bill item quantity must be a positive whole number.")
        price = to_decimal(raw["price"])
        if price < 0:
            raise ValueError("Bill item price must be non-negative.")
        item = cls(
            bill_item_id=raw["billItemId"],
            menu_item_id=raw["menuItemId"],
            code=raw["code"],
            name=raw["name"],
            price=price,
            quantity=int(quantity),
            category=raw.get("category") or None,
            deal_context=DealContext.from_blob(raw["dealContext"]) if raw.get("dealContext") else None,
        )
        if to_decimal(raw["totalPrice"]) != item.total_price:
            raise ValueError(f"Bill item {item.bill_item_id} totalPrice does not match price x quantity.")
        return item


@dataclass(frozen=True)
class RemovedLine:
    item: BillItem
    quantity_removed: int
    reason: str


@dataclass
class BillComposer:
    items: List[BillItem] = field(default_factory=list)
    id_factory: Callable[[], str] = new_bill_item_id

    def _index_of(self, bill_item_id: str) -> Optional[int]:
        for idx, item in enumerate(self.items):
            if item.bill_item_id == bill_item_id:
                return idx
        return None

    def get(self, bill_item_id: str) -> Optional[BillItem]:
        idx = self._index_of(bill_item_id)
        return None if idx is None else self.items[idx]

    @property
    def is_empty(self) -> bool:
        return not self.items

    def subtotal(self) -> Decimal:
        return sum((item.total_price for item in self.items), ZERO)

    def add_menu_item(self, menu_item) -> BillItem:
        menu_item_id = str(menu_item.id)
        price = to_decimal(menu_item.price)
        for idx, item in enumerate(self.items):
            if item.deal_context is None and item.menu_item_id == menu_item_id and item.price == price:
                merged = replace(item, quantity=item.quantity + 1)
                self.items[idx] = merged
                return merged

        line = BillItem(
            bill_item_id=self.id_factory(),
            menu_item_id=menu_item_id,
            code=menu_item.code,
            name=menu_item.name,
            price=price,
            quantity=1,
            category=getattr(menu_item, "category", None) or None,
        )
        self.items.append(line)
        return line

    def add_lines(self, lines: List[BillItem]) -> None:
        # one extend so a deal's lines land together or not at all
        self.items = [*self.items, *lines]

    def update_quantity(self, bill_item_id: str, new_quantity: int) -> Optional[RemovedLine]:
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise errors.ValidationError("Quantity must be a whole number.")
        idx = self._index_of(bill_item_id)
        if idx is None:
            return None
        item = self.items[idx]

        if new_quantity < 1:
            del self.items[idx]
            return RemovedLine(item=item, quantity_removed=item.quantity, reason=REASON_QUANTITY_ZERO)

        if item.deal_context is not None and new_quantity != item.quantity:
            raise errors.DealLineLocked()

        self.items[idx] = replace(item, quantity=new_quantity)
        return None

    def remove_item(self, bill_item_id: str) -> Optional[RemovedLine]:
        idx = self._index_of(bill_item_id)
        if idx is None:
            return None
        item = self.items.pop(idx)
        return RemovedLine(item=item, quantity_removed=item.quantity, reason=REASON_REMOVED)

    def clear(self) -> None:
        self.items = []

    def to_blob(self) -> list:
        return [item.to_blob() for item in self.items]

    @classmethod
    def from_blob(cls, raw, id_factory: Callable[[], str] = new_bill_item_id) -> "BillComposer":
        if not isinstance(raw, list):
            raise ValueError("Bill items must be an array.")
        return cls(items=[BillItem.from_blob(entry) for entry in raw], id_factory=id_factory)
