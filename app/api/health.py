"""Health check endpoint."""
import logging
from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_kiosk_repository
from app.services.menu.repository import KioskRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(
    request: Request,
    kiosk_repository: KioskRepository = Depends(get_kiosk_repository),
):
    """Health check endpoint; also confirms the kiosk catalogue loads."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    kiosks = await kiosk_repository.list_kiosks()
    return {"status": "healthy", "kiosks": len(kiosks)}
