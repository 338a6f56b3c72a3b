"""Pydantic models for cart input and shipping quotes."""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field


class CartLine(BaseModel):
    """One line of a shopping cart. Weight is per unit, in grams."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    price: float
    quantity: int
    weight_grams: float | None = Field(
        default=None,
        validation_alias=AliasChoices("weight_grams", "weightGrams", "weight"),
    )


class ShippingAddress(BaseModel):
    """Delivery destination. Only the city affects pricing."""
    model_config = ConfigDict(frozen=True)

    city: str | None = None
    state: str | None = None


class ShippingBreakdown(BaseModel):
    """How a shipping charge was built up."""
    model_config = ConfigDict(frozen=True)

    base_cost: float
    weight_cost: float
    speed_multiplier: float
    final_cost: float
    original_cost: float  # before the free-shipping override


class ShippingCalculation(BaseModel):
    """Priced result for one cart, address and delivery speed."""
    model_config = ConfigDict(frozen=True)

    cost: float
    breakdown: ShippingBreakdown
    zone_name: str | None
    weight_kg: float
    delivery_days: str
    free_shipping_threshold: float
    is_free_shipping: bool
    speed_key: str | None = None
    speed_name: str | None = None
    speed_icon: str | None = None
    cart_subtotal: float = 0.0
    amount_to_free_shipping: float = 0.0

    @computed_field
    @property
    def speed_surcharge(self) -> float:
        """Extra charged by the speed multiplier over the zone price."""
        b = self.breakdown
        return b.original_cost - (b.base_cost + b.weight_cost)

    @computed_field
    @property
    def savings(self) -> float:
        """Amount waived by free shipping."""
        return self.breakdown.original_cost - self.cost


class DeliveryOption(BaseModel):
    """A selectable delivery speed with its price for the current cart."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    cost: float
    delivery_days: str
    description: str
    estimated_delivery: str = ""


class OrderTotal(BaseModel):
    """Cart subtotal plus shipping for the selected speed."""
    model_config = ConfigDict(frozen=True)

    subtotal: float
    shipping: float
    total: float
    speed_key: str
