"""FastAPI dependencies."""
from fastapi import Depends

from app.core.config import settings
from app.services.menu.repository import KioskRepository
from app.services.menu.in_memory_kiosks import InMemoryKioskProvider
from app.services.persistence.ledger import Ledger, get_sheets_ledger
from app.services.persistence.orders import OrderPersistenceService

_kiosk_repository = KioskRepository(
    provider=InMemoryKioskProvider(config_file=settings.kiosk_config_file)
)


def get_kiosk_repository() -> KioskRepository:
    """Get kiosk repository instance."""
    return _kiosk_repository


def get_ledger() -> Ledger:
    """Get the Google Sheets ledger."""
    return get_sheets_ledger(settings)


def get_order_service(ledger: Ledger = Depends(get_ledger)) -> OrderPersistenceService:
    """Get order persistence service instance."""
    return OrderPersistenceService(
        ledger=ledger,
        timezone=settings.ledger_timezone,
    )
