"""Kiosk order endpoints."""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from app.core.dependencies import get_kiosk_repository, get_order_service
from app.services.menu.repository import KioskRepository, UnknownKioskError
from app.services.ordering.models import OrderResponse, OrderSubmission
from app.services.persistence.orders import LedgerAppendError, OrderPersistenceService


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/api/{kiosk_id}",
    response_model=OrderResponse,
    response_model_exclude_none=True,
)
async def submit_order(
    kiosk_id: str,
    order: OrderSubmission,
    request: Request,
    kiosk_repository: KioskRepository = Depends(get_kiosk_repository),
    order_service: OrderPersistenceService = Depends(get_order_service),
):
    """Write a kiosk order to the ledger, one row per line item."""
    logger.info(
        f"[ORDER] Request received - kiosk: {kiosk_id}, order: {order.order_id}, "
        f"items: {len(order.items)}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        kiosk = await kiosk_repository.get_kiosk(kiosk_id)
        await order_service.submit_order(kiosk, order)
    except UnknownKioskError as e:
        logger.warning(f"[ORDER] {e}")
        return JSONResponse(status_code=404, content={"error": str(e)})
    except LedgerAppendError as e:
        return JSONResponse(status_code=500, content={"error": f"{kiosk.error_prefix}{e}"})
    except Exception as e:
        logger.error(
            f"[ORDER] Error processing order - kiosk: {kiosk_id}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Unknown error occurred"},
        )

    logger.info(f"[ORDER] Order {order.order_id} recorded for {kiosk.name}")
    return OrderResponse(message=kiosk.success_message, waiting_time=kiosk.waiting_time)


@router.api_route(
    "/api/{kiosk_id}",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def order_method_not_allowed(kiosk_id: str, request: Request):
    """Order endpoints only accept POST."""
    logger.debug(f"[ORDER] {request.method} rejected on /api/{kiosk_id}")
    return PlainTextResponse(
        f"Method {request.method} Not Allowed",
        status_code=405,
        headers={"Allow": "POST"},
    )
