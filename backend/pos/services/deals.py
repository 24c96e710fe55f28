# backend/pos/services/deals.py
import logging
from dataclasses import dataclass, field
from typing import Callable, List

from .bill import BillComposer, BillItem, DealContext
from . import errors

logger = logging.getLogger(__name__)


@dataclass
class DealExpansion:
    deal_id: str
    deal_name: str
    lines: List[BillItem] = field(default_factory=list)
    skipped: list = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped)

    def skipped_notice(self) -> str:
        if not self.skipped:
            return ""
        names = ", ".join(f"{item.name} ({item.menu_item_id})" for item in self.skipped)
        return f"Menu items not found, skipped: {names}."


def expand_deal(deal, resolve: Callable, id_factory: Callable[[], str]) -> DealExpansion:
    """
    Turn a deal into price-frozen bill lines.

    ``resolve(menu_item_id)`` returns the current menu item, or None / raises
    ReferenceNotFound when it is gone; such sub-items are skipped and listed.
    Lines copy the deal price at add time: later edits to the deal never
    reach a bill that already holds it.
    """
    if not deal.is_active:
        raise errors.ValidationError(f'Deal "{deal.name}" is not active.', code="deal_inactive")

    expansion = DealExpansion(deal_id=str(deal.id), deal_name=deal.name)
    for deal_item in deal.deal_items:
        try:
            menu_item = resolve(deal_item.menu_item_id)
            if menu_item is None:
                raise errors.ReferenceNotFound(deal_item.menu_item_id)
        except errors.ReferenceNotFound:
            logger.warning(
                "Deal %s: menu item %s (%s) not found, skipping",
                deal.id,
                deal_item.name,
                deal_item.menu_item_id,
            )
            expansion.skipped.append(deal_item)
            continue

        expansion.lines.append(
            BillItem(
                bill_item_id=id_factory(),
                menu_item_id=str(menu_item.id),
                code=menu_item.code,
                name=menu_item.name,
                price=deal_item.deal_price_per_item,
                quantity=deal_item.quantity,
                category=getattr(menu_item, "category", None) or None,
                deal_context=DealContext(
                    deal_id=str(deal.id),
                    deal_name=deal.name,
                    original_price_per_item=deal_item.original_price_per_item,
                ),
            )
        )
    return expansion


def add_deal_to_bill(composer: BillComposer, deal, resolve: Callable) -> DealExpansion:
    expansion = expand_deal(deal, resolve, composer.id_factory)
    if expansion.lines:
        composer.add_lines(expansion.lines)
    return expansion
