"""
Shipping calculator.

Prices a cart for a destination: resolves the shipping zone from the city,
charges the zone's base cost plus a per-kg rate beyond the free weight
allowance, scales by the delivery speed multiplier and waives the charge
when the cart subtotal reaches the free-shipping threshold.
"""
import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from pydantic import ValidationError

from .delivery_dates import describe_delivery_days, estimate_delivery_date
from .errors import InvalidCartLineError, UnknownSpeedError
from .rates import DeliverySpeed, RateTable, RateTableLoader, ShippingZone
from .schema import (
    CartLine,
    DeliveryOption,
    OrderTotal,
    ShippingAddress,
    ShippingBreakdown,
    ShippingCalculation,
)

logger = logging.getLogger(__name__)

CartInput = Iterable[CartLine | Mapping] | None
AddressInput = ShippingAddress | Mapping | None


def _round_half_up(value: float) -> float:
    """Round to whole currency units, halves up. NaN and inf pass through."""
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def _round_weight(value: float) -> float:
    """Round kg to 2 decimals, exact halves up (0.125 -> 0.13). NaN and inf pass through."""
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _excess(value: float, allowance: float) -> float:
    """max(0, value - allowance), keeping NaN."""
    excess = value - allowance
    if math.isnan(excess):
        return excess
    return max(0.0, excess)


def _as_address(address: AddressInput) -> ShippingAddress | None:
    if address is None or isinstance(address, ShippingAddress):
        return address
    return ShippingAddress.model_validate(address)


class ShippingCalculator:
    """Prices shipments against a read-only rate table.

    Lenient by default: unknown speeds fall back to standard and NaN in the
    cart propagates into the result. With strict=True cart lines are checked
    before pricing and unknown speeds raise UnknownSpeedError.
    """

    def __init__(
        self,
        rate_table: RateTable | None = None,
        strict: bool = False,
        natural_same_day: bool = False,
    ):
        self._rates = rate_table if rate_table is not None else RateTableLoader().load()
        self.strict = strict
        self.natural_same_day = natural_same_day

    @property
    def rates(self) -> RateTable:
        return self._rates

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def _prepare(self, cart_lines: CartInput) -> list[CartLine]:
        """Coerce cart input to CartLine models, validating in strict mode."""
        lines: list[CartLine] = []
        for index, line in enumerate(cart_lines or []):
            if not isinstance(line, CartLine):
                try:
                    line = CartLine.model_validate(line)
                except ValidationError as e:
                    error = e.errors()[0]
                    field = ".".join(str(part) for part in error["loc"]) or "line"
                    raise InvalidCartLineError(
                        index, field, error.get("input"), error["msg"]
                    ) from e
            if self.strict:
                self._check_line(index, line)
            lines.append(line)
        return lines

    @staticmethod
    def _check_line(index: int, line: CartLine) -> None:
        if not math.isfinite(line.price) or line.price < 0:
            raise InvalidCartLineError(index, "price", line.price, "must be a finite amount >= 0")
        if line.quantity < 1:
            raise InvalidCartLineError(index, "quantity", line.quantity, "must be at least 1")
        weight = line.weight_grams
        if weight is not None and (not math.isfinite(weight) or weight <= 0):
            raise InvalidCartLineError(index, "weight_grams", weight, "must be a positive number of grams")

    def _resolve_speed(self, speed_key: str) -> DeliverySpeed:
        speed = self._rates.get_speed(speed_key)
        if speed is not None:
            return speed
        if self.strict:
            raise UnknownSpeedError(speed_key, self._rates.speed_keys)
        logger.debug("Unknown delivery speed %r, using standard", speed_key)
        return self._rates.standard_speed

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def _total_weight(self, lines: list[CartLine]) -> float:
        default_grams = self._rates.default_unit_weight_grams
        total = 0.0
        for line in lines:
            grams = line.weight_grams if line.weight_grams is not None else default_grams
            total += grams / 1000 * line.quantity
        return total

    def calculate_weight_kg(self, cart_lines: CartInput) -> float:
        """Total shipment weight in kg, unrounded. Empty cart weighs 0."""
        return self._total_weight(self._prepare(cart_lines))

    def resolve_zone(self, city: str | None) -> ShippingZone:
        """Zone for a city name; unknown or missing cities get the catch-all zone."""
        normalized = (city or "").strip().lower()
        if not normalized:
            return self._rates.catch_all_zone

        for zone in self._rates.zones:
            if normalized in zone.match_cities:
                return zone
        return self._rates.catch_all_zone

    def _empty_calculation(self) -> ShippingCalculation:
        threshold = self._rates.free_shipping_threshold
        return ShippingCalculation(
            cost=0,
            breakdown=ShippingBreakdown(
                base_cost=0,
                weight_cost=0,
                speed_multiplier=1,
                final_cost=0,
                original_cost=0,
            ),
            zone_name=None,
            weight_kg=0,
            delivery_days="N/A",
            free_shipping_threshold=threshold,
            is_free_shipping=False,
            amount_to_free_shipping=threshold,
        )

    def calculate_shipping_cost(
        self,
        cart_lines: CartInput,
        address: AddressInput = None,
        speed_key: str = "standard",
    ) -> ShippingCalculation:
        """Price the cart for one delivery speed."""
        lines = self._prepare(cart_lines)
        address = _as_address(address)
        if self.strict:
            self._resolve_speed(speed_key)
        if not lines:
            return self._empty_calculation()

        rates = self._rates
        weight = self._total_weight(lines)
        zone = self.resolve_zone(address.city if address else None)
        speed = self._resolve_speed(speed_key)

        base_cost = zone.base_cost
        weight_cost = _excess(weight, rates.free_weight_allowance_kg) * zone.cost_per_kg
        final_cost = _round_half_up((base_cost + weight_cost) * speed.multiplier)

        cart_subtotal = sum(line.price * line.quantity for line in lines)
        threshold = rates.free_shipping_threshold
        is_free_shipping = cart_subtotal >= threshold
        cost = 0 if is_free_shipping else final_cost

        # Overnight shares the express day range
        delivery_days = zone.standard_days if speed_key == "standard" else zone.express_days

        logger.debug(
            "Quoted %s (%s) via %s: %.3f kg, cost %s (original %s)",
            zone.key, address.city if address else None, speed.key, weight, cost, final_cost,
        )

        return ShippingCalculation(
            cost=cost,
            breakdown=ShippingBreakdown(
                base_cost=base_cost,
                weight_cost=weight_cost,
                speed_multiplier=speed.multiplier,
                final_cost=cost,
                original_cost=final_cost,
            ),
            zone_name=zone.name,
            weight_kg=_round_weight(weight),
            delivery_days=delivery_days,
            free_shipping_threshold=threshold,
            is_free_shipping=is_free_shipping,
            speed_key=speed.key,
            speed_name=speed.name,
            speed_icon=speed.icon,
            cart_subtotal=cart_subtotal,
            amount_to_free_shipping=max(0.0, threshold - cart_subtotal),
        )

    def get_delivery_options(
        self,
        cart_lines: CartInput,
        address: AddressInput = None,
        today: date | None = None,
    ) -> list[DeliveryOption]:
        """One priced option per delivery speed, in rate-table order."""
        lines = self._prepare(cart_lines)
        address = _as_address(address)

        options: list[DeliveryOption] = []
        for speed in self._rates.speeds:
            calculation = self.calculate_shipping_cost(lines, address, speed.key)
            options.append(DeliveryOption(
                id=speed.key,
                name=speed.name,
                icon=speed.icon,
                cost=calculation.cost,
                delivery_days=calculation.delivery_days,
                description=describe_delivery_days(
                    calculation.delivery_days, natural_same_day=self.natural_same_day
                ),
                estimated_delivery=estimate_delivery_date(calculation.delivery_days, today=today),
            ))
        return options

    def calculate_order_total(
        self,
        cart_lines: CartInput,
        address: AddressInput = None,
        speed_key: str = "standard",
    ) -> OrderTotal:
        """Cart subtotal plus the shipping charge for the chosen speed."""
        calculation = self.calculate_shipping_cost(cart_lines, address, speed_key)
        speed = self._rates.get_speed(speed_key) or self._rates.standard_speed
        return OrderTotal(
            subtotal=calculation.cart_subtotal,
            shipping=calculation.cost,
            total=calculation.cart_subtotal + calculation.cost,
            speed_key=speed.key,
        )


# ---------------------------------------------------------------------------
# Module-level helpers backed by a lenient calculator on the configured table
# ---------------------------------------------------------------------------

_default_calculator: ShippingCalculator | None = None


def get_default_calculator() -> ShippingCalculator:
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = ShippingCalculator()
    return _default_calculator


def calculate_weight_kg(cart_lines: CartInput) -> float:
    return get_default_calculator().calculate_weight_kg(cart_lines)


def resolve_zone(city: str | None) -> ShippingZone:
    return get_default_calculator().resolve_zone(city)


def calculate_shipping_cost(
    cart_lines: CartInput,
    address: AddressInput = None,
    speed_key: str = "standard",
) -> ShippingCalculation:
    return get_default_calculator().calculate_shipping_cost(cart_lines, address, speed_key)


def get_delivery_options(cart_lines: CartInput, address: AddressInput = None) -> list[DeliveryOption]:
    return get_default_calculator().get_delivery_options(cart_lines, address)


def calculate_order_total(
    cart_lines: CartInput,
    address: AddressInput = None,
    speed_key: str = "standard",
) -> OrderTotal:
    return get_default_calculator().calculate_order_total(cart_lines, address, speed_key)
