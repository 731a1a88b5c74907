"""Request-scoped cart, mirroring what a kiosk form holds before submit."""
import logging
from typing import List, Optional

from app.services.menu.base import KioskProfile, MenuItem
from app.services.ordering.models import FlavorCount, OrderLineItem, Selection, SocialDiscounts
from app.services.ordering.pricing import (
    OrderTotals,
    apply_promotions,
    compute_totals,
    resolve_unit_price,
)
from app.services.ordering.validator import InvalidSelectionError, OrderValidator

logger = logging.getLogger(__name__)


class Cart:
    """Priced line items for one kiosk; promotions are re-run on every change."""

    def __init__(self, kiosk: KioskProfile):
        self.kiosk = kiosk
        self.validator = OrderValidator(kiosk)
        self.items: List[OrderLineItem] = []

    def add(self, selection: Selection) -> OrderLineItem:
        """Validate, price and append a selection."""
        try:
            menu_item = self.validator.validate_selection(selection)
        except InvalidSelectionError as e:
            suggestions = self.validator.suggest_alternatives(selection.product)
            if self.validator.get_menu_item(selection) is None and suggestions:
                raise InvalidSelectionError(
                    f"{e}. Did you mean: {', '.join(suggestions)}?"
                ) from e
            raise

        selection = self._canonical(menu_item, selection)
        price = resolve_unit_price(
            menu_item,
            self.kiosk.half_price_rule,
            flavor=selection.flavor,
            is_half=selection.is_half,
            quantity=selection.quantity,
            choices=selection.choices,
            with_drink=selection.with_drink,
        )
        item = self._build_line(menu_item.name, selection, price)
        self.items = apply_promotions(self.items + [item], self.kiosk.promotions)
        logger.debug(f"[CART] {self.kiosk.id}: added {item.product} at {item.price}")
        return self.items[-1]

    def remove(self, index: int) -> OrderLineItem:
        """Remove the line at ``index`` and re-price what remains."""
        if not 0 <= index < len(self.items):
            raise IndexError(f"No cart line at position {index}")
        removed = self.items[index]
        remaining = self.items[:index] + self.items[index + 1:]
        self.items = apply_promotions(remaining, self.kiosk.promotions)
        return removed

    def totals(self, social: Optional[SocialDiscounts] = None) -> OrderTotals:
        return compute_totals(self.items, social)

    @staticmethod
    def _canonical(menu_item: MenuItem, selection: Selection) -> Selection:
        """Use the menu's spelling of the chosen flavour and combo options."""
        update = {}
        if selection.flavor and menu_item.flavors and not menu_item.is_quantity_based:
            update["flavor"] = menu_item.get_flavor(selection.flavor).name
        if selection.selected_flavors and menu_item.is_quantity_based:
            update["selected_flavors"] = [
                FlavorCount(name=menu_item.get_flavor(f.name).name, count=f.count)
                for f in selection.selected_flavors
            ]
        if selection.choices and menu_item.groups:
            update["choices"] = [
                next(o.name for o in group.options if o.name.lower() == choice.lower())
                for group, choice in zip(menu_item.groups, selection.choices)
            ]
        return selection.model_copy(update=update) if update else selection

    def _build_line(self, name: str, selection: Selection, price: float) -> OrderLineItem:
        if self.kiosk.column_layout == "classic":
            # The classic ledger records the chosen option(s) as the item and
            # the menu entry as its category.
            product = " + ".join(selection.choices) if selection.choices else selection.flavor
            return OrderLineItem(
                product=product or name,
                price=price,
                quantity=selection.quantity or 1,
                category=name,
            )
        if selection.selected_flavors:
            return OrderLineItem(
                product=name,
                flavor="Mixed",
                price=price,
                quantity=selection.quantity,
                selected_flavors=selection.selected_flavors,
            )
        return OrderLineItem(
            product=name,
            flavor=selection.flavor or self.kiosk.default_flavor,
            is_half=selection.is_half,
            price=price,
            with_drink=selection.with_drink,
        )
