"""Shipping cost and delivery option calculator for the storefront checkout."""
from .calculator import (
    ShippingCalculator,
    calculate_order_total,
    calculate_shipping_cost,
    calculate_weight_kg,
    get_delivery_options,
    resolve_zone,
)
from .delivery_dates import describe_delivery_days, estimate_delivery_date
from .errors import InvalidCartLineError, RateTableError, ShippingError, UnknownSpeedError
from .schema import (
    CartLine,
    DeliveryOption,
    OrderTotal,
    ShippingAddress,
    ShippingBreakdown,
    ShippingCalculation,
)

__all__ = [
    "ShippingCalculator",
    "calculate_order_total",
    "calculate_shipping_cost",
    "calculate_weight_kg",
    "get_delivery_options",
    "resolve_zone",
    "describe_delivery_days",
    "estimate_delivery_date",
    "InvalidCartLineError",
    "RateTableError",
    "ShippingError",
    "UnknownSpeedError",
    "CartLine",
    "DeliveryOption",
    "OrderTotal",
    "ShippingAddress",
    "ShippingBreakdown",
    "ShippingCalculation",
]
