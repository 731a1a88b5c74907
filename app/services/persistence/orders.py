"""Order persistence service."""
import logging
from datetime import datetime
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from app.services.menu.base import KioskProfile
from app.services.ordering.models import OrderSubmission
from app.services.ordering.pricing import OrderTotals, apply_promotions, compute_totals
from app.services.ordering.rows import (
    LedgerRow,
    RowContext,
    expand_item,
    get_row_layout,
    ledger_timestamp,
)
from app.services.persistence.ledger import Ledger

logger = logging.getLogger(__name__)


class LedgerAppendError(RuntimeError):
    """Raised when a line item could not be appended to the ledger."""

    def __init__(self, product: str, rows_written: int, flavor: Optional[str] = None):
        self.product = product
        self.flavor = flavor
        self.rows_written = rows_written
        label = f"{product} - {flavor}" if flavor else product
        super().__init__(f"Failed to append item {label}")


class OrderPersistenceService:
    """Service for writing submitted orders to the ledger."""

    def __init__(
        self,
        ledger: Ledger,
        timezone: str = "America/Toronto",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.ledger = ledger
        self.timezone = timezone
        self.clock = clock

    def _timestamp(self):
        now = self.clock() if self.clock else None
        return ledger_timestamp(self.timezone, now)

    async def submit_order(
        self, kiosk: KioskProfile, order: OrderSubmission
    ) -> OrderTotals:
        """
        Append an order's rows to the kiosk's sheet range.

        Rows are appended one call at a time in cart order. The first failure
        stops the order; rows already written stay in the ledger.

        Returns:
            The order totals written on the first row
        """
        layout = get_row_layout(kiosk.column_layout)
        items = apply_promotions(list(order.items), kiosk.promotions)
        totals = compute_totals(items, order.social_discounts)
        logger.info(
            f"[ORDER] {kiosk.id} order {order.order_id}: {len(items)} item(s), "
            f"subtotal {totals.subtotal}, discount {totals.discount}, total {totals.total}"
        )

        rows_written = 0
        for index, item in enumerate(items):
            try:
                for line_index, line in enumerate(expand_item(item)):
                    date, time = self._timestamp()
                    ctx = RowContext(
                        order_id=order.order_id,
                        first_row=index == 0 and line_index == 0,
                        totals=totals,
                        social=order.social_discounts,
                        date=date,
                        time=time,
                    )
                    row: LedgerRow = layout(ctx, line)
                    await run_in_threadpool(self.ledger.append_rows, kiosk.sheet_range, [row])
                    rows_written += 1
            except Exception as e:
                logger.error(
                    f"[ORDER] {kiosk.id} order {order.order_id}: append failed on item "
                    f"{index} ({item.product}) after {rows_written} row(s) - "
                    f"{type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
                raise LedgerAppendError(
                    item.product,
                    rows_written,
                    flavor=item.flavor if kiosk.error_names_flavor else None,
                ) from e
            logger.debug(f"[ORDER] Appended item: {item.product}")

        return totals

