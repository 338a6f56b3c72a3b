"""Errors raised by the shipping estimator."""


class ShippingError(Exception):
    """Base class for shipping estimator errors."""


class InvalidCartLineError(ShippingError, ValueError):
    """A cart line carries a value the calculator cannot price."""

    def __init__(self, index: int, field: str, value, reason: str):
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Cart line {index}: {field}={value!r} {reason}")


class UnknownSpeedError(ShippingError, KeyError):
    """Requested delivery speed is not in the rate table (strict mode only)."""

    def __init__(self, speed_key: str, known: list[str]):
        self.speed_key = speed_key
        self.known = known
        super().__init__(speed_key)

    def __str__(self) -> str:
        return f"Unknown delivery speed: {self.speed_key!r} (expected one of: {', '.join(self.known)})"


class RateTableError(ShippingError):
    """The configured rate table could not be read or is inconsistent."""
