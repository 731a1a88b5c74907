"""Kiosk repository."""
from typing import List, Optional
from app.services.menu.base import KioskProfile, KioskProvider, MenuItem


class UnknownKioskError(LookupError):
    """Raised when an order endpoint does not map to a configured kiosk."""

    def __init__(self, kiosk_id: str):
        self.kiosk_id = kiosk_id
        super().__init__(f"Unknown order endpoint '{kiosk_id}'")


class KioskRepository:
    """Repository for kiosk and menu lookups."""

    def __init__(self, provider: KioskProvider):
        self.provider = provider

    async def list_kiosks(self) -> List[KioskProfile]:
        """Get all kiosks."""
        return await self.provider.get_kiosks()

    async def get_kiosk(self, kiosk_id: str) -> KioskProfile:
        """Get a kiosk, raising UnknownKioskError if it is not configured."""
        kiosk = await self.provider.get_kiosk(kiosk_id)
        if kiosk is None:
            raise UnknownKioskError(kiosk_id)
        return kiosk

    async def get_menu_item(self, kiosk_id: str, item_name: str) -> Optional[MenuItem]:
        """Get a kiosk's menu item by name, case-insensitively."""
        kiosk = await self.get_kiosk(kiosk_id)
        return find_menu_item(kiosk, item_name)


def find_menu_item(kiosk: KioskProfile, item_name: str) -> Optional[MenuItem]:
    item_name_lower = item_name.lower().strip()
    for item in kiosk.items:
        if item.name.lower() == item_name_lower:
            return item
    return None
