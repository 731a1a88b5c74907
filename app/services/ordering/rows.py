"""Ledger row formatting.

Every kiosk writes a fixed positional layout to its sheet range. Column
order is part of the ledger format and must not change.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from app.services.ordering.models import OrderLineItem, SocialDiscounts
from app.services.ordering.pricing import OrderTotals

LedgerRow = List[Any]

PENDING_STATUS = "Pending"
BUNDLED_DRINK = "Hot Milk Tea"
COMBO_SEPARATOR = " + "

# Fixed per-flavour count columns of the Pacific Mall ledger.
FLAVOR_COUNT_COLUMNS = ("Original", "Pistachio", "Chocolate", "Black Sesame", "Matcha")


@dataclass
class RowContext:
    """Order-level values needed to format one row."""

    order_id: str
    first_row: bool
    totals: OrderTotals
    social: SocialDiscounts
    date: str
    time: str

    @property
    def row_discount(self) -> float:
        # The whole order's discount and total live on its first row.
        return self.totals.discount if self.first_row else 0

    @property
    def row_total(self) -> float:
        return self.totals.total if self.first_row else 0


def ledger_timestamp(
    timezone: str = "America/Toronto", now: Optional[datetime] = None
) -> Tuple[str, str]:
    """Short date (YYYY-MM-DD) and 24-hour time (HH:MM) in the ledger timezone."""
    tz = ZoneInfo(timezone)
    now = now.astimezone(tz) if now is not None else datetime.now(tz)
    return now.strftime("%Y-%m-%d"), now.strftime("%H:%M")


def number(value: float) -> Any:
    """Write whole amounts as integers, the way the forms display them."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def describe_item(item: OrderLineItem) -> str:
    """Human-readable item description for the ledger."""
    if item.selected_flavors:
        details = ", ".join(
            f"{f.name} ({f.count})" if f.count > 1 else f.name
            for f in item.selected_flavors
        )
        quantity = item.quantity or sum(f.count for f in item.selected_flavors)
        return f"{item.product} - {quantity} pcs [{details}]"

    name = item.product
    if item.flavor:
        name += f" - {item.flavor}"
    if item.is_half:
        name += " (Half)"
    return name


def flavor_counts(item: OrderLineItem) -> List[int]:
    counts: Dict[str, int] = {}
    for flavor in item.selected_flavors or []:
        counts[flavor.name] = flavor.count
    return [counts.get(name, 0) for name in FLAVOR_COUNT_COLUMNS]


def expand_item(item: OrderLineItem) -> List[OrderLineItem]:
    """
    Split a cart line into the lines written to the ledger.

    Combos named "A + B" become one line per component, the first keeping
    the price. A bundled drink follows its waffle as a free line.
    """
    lines = [item]
    if COMBO_SEPARATOR in item.product:
        components = [p.strip() for p in item.product.split(COMBO_SEPARATOR) if p.strip()]
        lines = [
            item.model_copy(update={"product": name, "price": item.price if i == 0 else 0})
            for i, name in enumerate(components)
        ]
    if item.with_drink:
        lines.append(
            OrderLineItem(product=BUNDLED_DRINK, price=0, quantity=item.quantity)
        )
    return lines


def classic_row(ctx: RowContext, item: OrderLineItem) -> LedgerRow:
    quantity = item.quantity or 1
    return [
        ctx.order_id,
        ctx.date,
        ctx.time,
        item.category or "",
        item.product,
        quantity,
        number(item.price),
        number(quantity * item.price),
        PENDING_STATUS,
    ]


def basic_row(ctx: RowContext, item: OrderLineItem) -> LedgerRow:
    return [
        ctx.order_id,
        PENDING_STATUS,
        describe_item(item),
        number(item.price),
        ctx.date,
        ctx.time,
    ]


def social_row(ctx: RowContext, item: OrderLineItem) -> LedgerRow:
    return [
        ctx.order_id,
        PENDING_STATUS,
        describe_item(item),
        number(item.price),
        number(ctx.row_discount),
        number(ctx.row_total),
        ctx.date,
        ctx.time,
        ctx.social.followed_instagram,
        ctx.social.reposted_story,
    ]


def social_flavors_row(ctx: RowContext, item: OrderLineItem) -> LedgerRow:
    return social_row(ctx, item) + flavor_counts(item)


ROW_LAYOUTS: Dict[str, Callable[[RowContext, OrderLineItem], LedgerRow]] = {
    "classic": classic_row,
    "basic": basic_row,
    "social": social_row,
    "social_flavors": social_flavors_row,
}


def get_row_layout(name: str) -> Callable[[RowContext, OrderLineItem], LedgerRow]:
    """Look up a column layout by its configured name."""
    try:
        return ROW_LAYOUTS[name]
    except KeyError:
        raise ValueError(f"Unknown column layout '{name}'") from None
