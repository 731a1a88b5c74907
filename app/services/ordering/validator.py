"""Selection validation service."""
from typing import List, Optional
from app.services.menu.base import KioskProfile, MenuItem
from app.services.menu.repository import find_menu_item
from app.services.ordering.models import Selection


class InvalidSelectionError(ValueError):
    """Raised when a menu selection cannot be added to a cart."""


class OrderValidator:
    """Service for validating menu selections against a kiosk's menu."""

    def __init__(self, kiosk: KioskProfile):
        self.kiosk = kiosk

    def get_menu_item(self, selection: Selection) -> Optional[MenuItem]:
        return find_menu_item(self.kiosk, selection.product)

    def get_selection_error(self, selection: Selection) -> Optional[str]:
        """
        Determine whether a selection is invalid.

        Returns:
            Error message if the selection cannot be ordered, None otherwise
        """
        menu_item = self.get_menu_item(selection)
        if menu_item is None:
            return f"'{selection.product}' is not on the {self.kiosk.name} menu"

        if menu_item.is_quantity_based:
            return self._get_bulk_error(menu_item, selection)

        if selection.selected_flavors:
            return f"{menu_item.name} does not take a flavor mix"

        if menu_item.is_combo:
            if len(selection.choices) != len(menu_item.groups):
                return "Please select an item from each subcategory"
            for group, choice in zip(menu_item.groups, selection.choices):
                if not any(o.name.lower() == choice.lower() for o in group.options):
                    return f"'{choice}' is not an option for {group.name}"
            return None

        if selection.choices:
            return f"{menu_item.name} has no combo options, please select a flavor"

        if menu_item.flavors:
            if not selection.flavor:
                return "Please select a flavor"
            if menu_item.get_flavor(selection.flavor) is None:
                return f"'{selection.flavor}' is not a {menu_item.name} flavor"

        if selection.is_half and not menu_item.half:
            return f"{menu_item.name} is not offered as a half portion"

        if selection.with_drink and not menu_item.drink_bundle:
            return f"{menu_item.name} does not come with a drink"

        return None

    def _get_bulk_error(self, menu_item: MenuItem, selection: Selection) -> Optional[str]:
        if selection.choices:
            return f"{menu_item.name} has no combo options, please select a flavor"
        if not selection.quantity:
            return "Please select quantity"
        if menu_item.get_quantity(selection.quantity) is None:
            offered = ", ".join(str(q.quantity) for q in menu_item.quantities)
            return f"{menu_item.name} comes in packs of {offered}"
        flavors = selection.selected_flavors or []
        if not flavors:
            return "Please select at least one flavor"
        unknown = [f.name for f in flavors if menu_item.get_flavor(f.name) is None]
        if unknown:
            return f"Unknown {menu_item.name} flavors: {', '.join(unknown)}"
        if sum(f.count for f in flavors) != selection.quantity:
            return f"Please select exactly {selection.quantity} pieces"
        return None

    def validate_selection(self, selection: Selection) -> MenuItem:
        """Return the selection's menu item, or raise InvalidSelectionError."""
        error = self.get_selection_error(selection)
        if error:
            raise InvalidSelectionError(error)
        return self.get_menu_item(selection)

    def suggest_alternatives(self, invalid_item_name: str, limit: int = 3) -> List[str]:
        """
        Suggest menu items for a product name that did not match.

        Args:
            invalid_item_name: The invalid item name
            limit: Maximum number of suggestions

        Returns:
            List of suggested item names
        """
        invalid_lower = invalid_item_name.lower()

        suggestions = []
        for item in self.kiosk.items:
            item_lower = item.name.lower()
            if (
                invalid_lower in item_lower
                or item_lower in invalid_lower
                or any(word in item_lower for word in invalid_lower.split())
            ):
                suggestions.append(item.name)
                if len(suggestions) >= limit:
                    break

        return suggestions
