"""Shipping zones, delivery speeds and the rate table that holds them."""
from .defaults import DEFAULT_RATE_TABLE
from .loader import RateTableLoader
from .schema import DeliverySpeed, RateTable, ShippingZone

__all__ = ["DEFAULT_RATE_TABLE", "RateTableLoader", "DeliverySpeed", "RateTable", "ShippingZone"]
