"""In-memory kiosk provider."""
import yaml
from pathlib import Path
from typing import List, Optional
from app.services.menu.base import KioskProfile, KioskProvider


class InMemoryKioskProvider(KioskProvider):
    """In-memory kiosk provider using YAML configuration."""

    def __init__(self, config_file: Optional[str] = None):
        """Initialize with optional kiosk file path."""
        if config_file is None:
            config_file = Path(__file__).parent / "data" / "kiosks.yaml"
        self.config_file = Path(config_file)
        self._kiosks: Optional[List[KioskProfile]] = None

    async def _load_kiosks(self) -> List[KioskProfile]:
        """Load kiosks from YAML file."""
        if self._kiosks is None:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            self._kiosks = [
                KioskProfile(**kiosk) for kiosk in data.get("kiosks", [])
            ]
        return self._kiosks

    async def get_kiosks(self) -> List[KioskProfile]:
        """Get every configured kiosk."""
        return await self._load_kiosks()

    async def get_kiosk(self, kiosk_id: str) -> Optional[KioskProfile]:
        """Get a kiosk by its endpoint id."""
        kiosks = await self._load_kiosks()
        kiosk_id = kiosk_id.lower().strip()
        for kiosk in kiosks:
            if kiosk.id == kiosk_id:
                return kiosk
        return None
