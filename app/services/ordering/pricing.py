"""Order pricing: half portions, social discounts and cart promotions.

Each kiosk picks its half-portion rule by name. The rules are not
interchangeable: the same base price yields a different half price at
different kiosks, and the ledgers depend on those exact figures.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel

from app.services.menu.base import MenuItem
from app.services.ordering.models import OrderLineItem, SocialDiscounts

logger = logging.getLogger(__name__)

SOCIAL_DISCOUNT_VALUE = 1
DRINK_BUNDLE_SURCHARGE = 2

HALF_PRICE_TABLE: Dict[float, float] = {10: 6, 12: 7, 14: 8, 16: 9}

KEYCHAIN_PRODUCT = "KeyChain"
KEYCHAIN_PROMO_PRICE = 5
KEYCHAIN_REGULAR_PRICE = 8
KEYCHAIN_QUALIFYING_PRODUCTS = ("Waffle", "Croffle")


class OrderTotals(BaseModel):
    """Subtotal, discount and total of an order."""

    subtotal: float
    discount: int
    total: float


def half_price_plus_one(base: float) -> float:
    return base / 2 + 1


def half_price_inverted(base: float) -> float:
    return (base + 1) / 2


def half_price_lookup(base: float) -> float:
    return HALF_PRICE_TABLE.get(base, base / 2)


def half_price_none(base: float) -> float:
    return base


HALF_PRICE_RULES: Dict[str, Callable[[float], float]] = {
    "plus_one": half_price_plus_one,
    "inverted": half_price_inverted,
    "lookup": half_price_lookup,
    "none": half_price_none,
}


def get_half_price_rule(name: str) -> Callable[[float], float]:
    """Look up a half-portion rule by its configured name."""
    try:
        return HALF_PRICE_RULES[name]
    except KeyError:
        raise ValueError(f"Unknown half price rule '{name}'") from None


def calculate_price(base: float, is_half: bool, rule: str) -> float:
    """Price of one portion under a kiosk's half-portion rule."""
    if is_half:
        return get_half_price_rule(rule)(base)
    return base


def resolve_unit_price(
    menu_item: MenuItem,
    rule: str,
    flavor: Optional[str] = None,
    is_half: bool = False,
    quantity: Optional[int] = None,
    choices: Iterable[str] = (),
    with_drink: bool = False,
) -> float:
    """
    Resolve a menu selection to its unit price.

    Quantity-based items are priced from their pack sizes, combos by summing
    the chosen option of each group, and flavoured items by the flavour's
    base price. Selections are assumed valid; see OrderValidator.
    """
    if menu_item.is_quantity_based:
        option = menu_item.get_quantity(quantity or 0)
        return option.price if option else 0
    if menu_item.is_combo:
        price = 0.0
        for group, choice in zip(menu_item.groups, choices):
            price += next(
                (o.price for o in group.options if o.name.lower() == choice.lower()),
                0,
            )
        return price

    base = menu_item.price or 0
    if flavor and menu_item.flavors:
        option = menu_item.get_flavor(flavor)
        base = option.price if option else 0
    price = calculate_price(base, is_half, rule)
    if with_drink and menu_item.drink_bundle:
        price += DRINK_BUNDLE_SURCHARGE
    return price


def social_discount(social: Optional[SocialDiscounts]) -> int:
    """$1 per social flag, applied once per order."""
    if social is None:
        return 0
    discount = 0
    if social.followed_instagram:
        discount += SOCIAL_DISCOUNT_VALUE
    if social.reposted_story:
        discount += SOCIAL_DISCOUNT_VALUE
    return discount


def compute_totals(
    items: Iterable[OrderLineItem], social: Optional[SocialDiscounts] = None
) -> OrderTotals:
    """Sum unit prices and apply the social discount, never going below zero."""
    subtotal = sum(item.price for item in items)
    discount = social_discount(social)
    return OrderTotals(
        subtotal=subtotal,
        discount=discount,
        total=max(subtotal - discount, 0),
    )


def apply_keychain_promotion(items: List[OrderLineItem]) -> List[OrderLineItem]:
    """
    Re-price every keychain line for the cart as it stands now.

    A keychain costs $5 while the cart holds a waffle or croffle and $8
    otherwise, so removing the last waffle raises the keychain back.
    """
    qualifies = any(item.product in KEYCHAIN_QUALIFYING_PRODUCTS for item in items)
    repriced = []
    for item in items:
        if item.product == KEYCHAIN_PRODUCT:
            item = item.model_copy(
                update={
                    "price": KEYCHAIN_PROMO_PRICE if qualifies else KEYCHAIN_REGULAR_PRICE,
                    "is_promotional": qualifies,
                }
            )
        repriced.append(item)
    return repriced


PROMOTIONS: Dict[str, Callable[[List[OrderLineItem]], List[OrderLineItem]]] = {
    "keychain": apply_keychain_promotion,
}


def apply_promotions(
    items: List[OrderLineItem], promotions: Iterable[str]
) -> List[OrderLineItem]:
    """Run a kiosk's cart-wide promotions over its line items."""
    for name in promotions:
        promotion = PROMOTIONS.get(name)
        if promotion is None:
            logger.warning(f"[PRICING] Unknown promotion '{name}' ignored")
            continue
        items = promotion(items)
    return items
