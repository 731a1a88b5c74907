"""Kiosk and menu models, plus the provider interface."""
from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel


class FlavorOption(BaseModel):
    """A flavour (or combo choice) with its base price."""

    name: str
    price: float = 0


class QuantityOption(BaseModel):
    """A pack size offered for a quantity-based item."""

    quantity: int
    price: float


class ComboGroup(BaseModel):
    """One pick-one group of a combo (e.g. waffle flavour, drink)."""

    name: str
    options: List[FlavorOption]


class MenuItem(BaseModel):
    """Menu item model."""

    name: str
    price: Optional[float] = None
    half: bool = False  # half portion offered
    drink_bundle: bool = False  # can be ordered with a bundled drink
    is_quantity_based: bool = False
    flavors: List[FlavorOption] = []
    quantities: List[QuantityOption] = []
    groups: List[ComboGroup] = []

    @property
    def is_combo(self) -> bool:
        return bool(self.groups)

    def get_flavor(self, name: str) -> Optional[FlavorOption]:
        for flavor in self.flavors:
            if flavor.name.lower() == name.lower().strip():
                return flavor
        return None

    def get_quantity(self, quantity: int) -> Optional[QuantityOption]:
        for option in self.quantities:
            if option.quantity == quantity:
                return option
        return None


class KioskProfile(BaseModel):
    """Per-kiosk configuration record driving the generic order handler."""

    id: str
    name: str
    sheet_range: str
    half_price_rule: str = "none"
    column_layout: str = "basic"
    success_message: str = "Order processed successfully"
    waiting_time: Optional[str] = None
    default_flavor: Optional[str] = None
    error_prefix: str = ""
    error_names_flavor: bool = False
    promotions: List[str] = []
    items: List[MenuItem] = []


class KioskProvider(ABC):
    """Abstract base class for kiosk catalogue providers."""

    @abstractmethod
    async def get_kiosks(self) -> List[KioskProfile]:
        """Get every configured kiosk."""
        pass

    @abstractmethod
    async def get_kiosk(self, kiosk_id: str) -> Optional[KioskProfile]:
        """Get a kiosk by its endpoint id."""
        pass
