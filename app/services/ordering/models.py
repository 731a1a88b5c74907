"""Order models."""
from typing import Any, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting and emitting the camelCase keys the forms use."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FlavorCount(CamelModel):
    """Pieces of one flavour inside a bulk item."""

    name: str
    count: int = Field(gt=0)


class OrderLineItem(CamelModel):
    """A priced cart line as posted by a kiosk form."""

    product: str = Field(min_length=1)
    flavor: Optional[str] = None
    is_half: bool = False
    price: float = Field(ge=0)
    quantity: Optional[int] = Field(default=None, gt=0)
    selected_flavors: Optional[List[FlavorCount]] = None
    category: Optional[str] = None
    with_drink: bool = False
    is_promotional: bool = Field(
        default=False,
        validation_alias=AliasChoices("isPromotional", "isPromotionalPuff", "is_promotional"),
        serialization_alias="isPromotional",
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_legacy_shape(cls, data: Any) -> Any:
        """Accept the older ``{item: {name, price, withDrink}, quantity, category}`` lines."""
        if isinstance(data, dict) and isinstance(data.get("item"), dict):
            nested = data["item"]
            flattened = {k: v for k, v in data.items() if k != "item"}
            flattened.setdefault("product", nested.get("name"))
            flattened.setdefault("price", nested.get("price"))
            if nested.get("withDrink") is not None:
                flattened.setdefault("withDrink", nested["withDrink"])
            return flattened
        return data


class SocialDiscounts(CamelModel):
    """Social media discount flags, worth $1 each per order."""

    followed_instagram: bool = False
    reposted_story: bool = False


class OrderSubmission(CamelModel):
    """Order payload posted to an order endpoint."""

    order_id: str = Field(min_length=1)
    items: List[OrderLineItem] = Field(min_length=1)
    social_discounts: SocialDiscounts = Field(default_factory=SocialDiscounts)

    @field_validator("order_id", mode="before")
    @classmethod
    def coerce_order_id(cls, value: Any) -> Any:
        # The forms use a numeric input, so some clients send a number.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("social_discounts", mode="before")
    @classmethod
    def default_social_discounts(cls, value: Any) -> Any:
        return {} if value is None else value


class OrderResponse(CamelModel):
    """Order endpoint success response."""

    message: str
    waiting_time: Optional[str] = None


class Selection(CamelModel):
    """An unpriced menu choice, as picked on a kiosk form."""

    product: str = Field(min_length=1)
    flavor: Optional[str] = None
    is_half: bool = False
    quantity: Optional[int] = Field(default=None, gt=0)
    selected_flavors: Optional[List[FlavorCount]] = None
    choices: List[str] = []  # one pick per combo group
    with_drink: bool = False
