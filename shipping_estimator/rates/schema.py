"""Pydantic models for the shipping rate table."""
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class ShippingZone(BaseModel):
    """A pricing tier keyed by destination city."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    match_cities: frozenset[str] = frozenset()  # empty for the catch-all zone
    base_cost: float = Field(ge=0)
    cost_per_kg: float = Field(ge=0)
    standard_days: str
    express_days: str

    @field_validator("match_cities", mode="before")
    @classmethod
    def _normalize_cities(cls, value):
        if value is None:
            return frozenset()
        return frozenset(str(city).strip().lower() for city in value)

    @property
    def is_catch_all(self) -> bool:
        return not self.match_cities


class DeliverySpeed(BaseModel):
    """A service level that scales the zone price."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    multiplier: float = Field(ge=1.0)
    icon: str = ""


class RateTable(BaseModel):
    """Zones, speeds and thresholds used to price a shipment.

    Zone order matters: when a city appears in more than one zone the first
    zone wins. Speed order is the order delivery options are listed in.
    """
    model_config = ConfigDict(frozen=True)

    zones: tuple[ShippingZone, ...]
    speeds: tuple[DeliverySpeed, ...]
    free_shipping_threshold: float = Field(default=1000, ge=0)
    free_weight_allowance_kg: float = Field(default=0.5, ge=0)
    default_unit_weight_grams: float = Field(default=250, gt=0)

    @model_validator(mode="after")
    def _check_consistency(self):
        catch_all = [z.key for z in self.zones if z.is_catch_all]
        if len(catch_all) != 1:
            raise ValueError(
                f"Rate table needs exactly one catch-all zone (no cities), found {len(catch_all)}"
            )

        zone_keys = [z.key for z in self.zones]
        if len(set(zone_keys)) != len(zone_keys):
            raise ValueError(f"Duplicate zone keys: {zone_keys}")

        speed_keys = [s.key for s in self.speeds]
        if len(set(speed_keys)) != len(speed_keys):
            raise ValueError(f"Duplicate speed keys: {speed_keys}")
        if "standard" not in speed_keys:
            raise ValueError("Rate table must define a 'standard' delivery speed")

        seen: dict[str, str] = {}
        for zone in self.zones:
            for city in sorted(zone.match_cities):
                if city in seen:
                    logger.warning(
                        "City %r listed in zones %s and %s; %s wins",
                        city, seen[city], zone.key, seen[city],
                    )
                else:
                    seen[city] = zone.key
        return self

    @property
    def catch_all_zone(self) -> ShippingZone:
        return next(z for z in self.zones if z.is_catch_all)

    @property
    def standard_speed(self) -> DeliverySpeed:
        return next(s for s in self.speeds if s.key == "standard")

    @property
    def speed_keys(self) -> list[str]:
        return [s.key for s in self.speeds]

    def get_speed(self, key: str) -> DeliverySpeed | None:
        """Look up a speed by key; None if the table does not define it."""
        for speed in self.speeds:
            if speed.key == key:
                return speed
        return None
