"""Kiosk menu and cart quote endpoints."""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List, Optional

from app.core.dependencies import get_kiosk_repository
from app.services.menu.base import MenuItem
from app.services.menu.repository import KioskRepository, UnknownKioskError
from app.services.ordering.cart import Cart
from app.services.ordering.models import CamelModel, OrderLineItem, Selection, SocialDiscounts
from app.services.ordering.pricing import calculate_price
from app.services.ordering.validator import InvalidSelectionError


router = APIRouter()
logger = logging.getLogger(__name__)


class KioskSummary(BaseModel):
    """Kiosk summary response model."""
    id: str
    name: str
    endpoint: str


class FlavorResponse(CamelModel):
    """Flavour with its half-portion price, when offered."""
    name: str
    price: float
    half_price: Optional[float] = None


class MenuItemResponse(CamelModel):
    """Menu item response model."""
    name: str
    price: Optional[float] = None
    half: bool = False
    drink_bundle: bool = False
    is_quantity_based: bool = False
    flavors: List[FlavorResponse] = []
    quantities: List[dict] = []
    groups: List[dict] = []


class MenuResponse(CamelModel):
    """Menu response model."""
    kiosk: str
    items: List[MenuItemResponse]


class QuoteRequest(CamelModel):
    """Cart selections to price."""
    items: List[Selection] = Field(min_length=1)
    social_discounts: SocialDiscounts = Field(default_factory=SocialDiscounts)


class QuoteResponse(CamelModel):
    """Priced cart with totals."""
    items: List[OrderLineItem]
    subtotal: float
    discount: int
    total: float


def _menu_item_response(item: MenuItem, half_price_rule: str) -> MenuItemResponse:
    return MenuItemResponse(
        name=item.name,
        price=item.price,
        half=item.half,
        drink_bundle=item.drink_bundle,
        is_quantity_based=item.is_quantity_based,
        flavors=[
            FlavorResponse(
                name=f.name,
                price=f.price,
                half_price=calculate_price(f.price, True, half_price_rule) if item.half else None,
            )
            for f in item.flavors
        ],
        quantities=[q.model_dump() for q in item.quantities],
        groups=[g.model_dump() for g in item.groups],
    )


@router.get("/api/kiosks", response_model=List[KioskSummary])
async def list_kiosks(
    kiosk_repository: KioskRepository = Depends(get_kiosk_repository),
):
    """List configured kiosks and their order endpoints."""
    kiosks = await kiosk_repository.list_kiosks()
    logger.debug(f"[MENU] Listing {len(kiosks)} kiosks")
    return [
        KioskSummary(id=k.id, name=k.name, endpoint=f"/api/{k.id}") for k in kiosks
    ]


@router.get("/api/kiosks/{kiosk_id}/menu", response_model=MenuResponse)
async def get_menu(
    kiosk_id: str,
    request: Request,
    kiosk_repository: KioskRepository = Depends(get_kiosk_repository),
):
    """Get a kiosk's menu, with half-portion prices worked out."""
    logger.info(
        f"[MENU] Request received - kiosk: {kiosk_id}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    try:
        kiosk = await kiosk_repository.get_kiosk(kiosk_id)
    except UnknownKioskError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})

    return MenuResponse(
        kiosk=kiosk.name,
        items=[_menu_item_response(item, kiosk.half_price_rule) for item in kiosk.items],
    )


@router.post(
    "/api/kiosks/{kiosk_id}/quote",
    response_model=QuoteResponse,
    response_model_exclude_none=True,
)
async def quote_cart(
    kiosk_id: str,
    quote: QuoteRequest,
    kiosk_repository: KioskRepository = Depends(get_kiosk_repository),
):
    """Price a cart the way the kiosk form does before submitting it."""
    try:
        kiosk = await kiosk_repository.get_kiosk(kiosk_id)
    except UnknownKioskError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})

    cart = Cart(kiosk)
    for position, selection in enumerate(quote.items):
        try:
            cart.add(selection)
        except InvalidSelectionError as e:
            logger.info(f"[MENU] Quote rejected for {kiosk_id} at item {position}: {e}")
            return JSONResponse(
                status_code=400,
                content={"error": f"Item {position + 1}: {e}"},
            )

    totals = cart.totals(quote.social_discounts)
    return QuoteResponse(
        items=cart.items,
        subtotal=totals.subtotal,
        discount=totals.discount,
        total=totals.total,
    )
