"""Human-readable rendering of shipping quotes (rupee amounts, breakdowns, options)."""
import math

from .schema import DeliveryOption, ShippingCalculation

CURRENCY_SYMBOL = "₹"


def format_currency(amount: float) -> str:
    """Format an amount as rupees with two decimals, e.g. ₹40.00."""
    return f"{CURRENCY_SYMBOL}{float(amount):.2f}"


def free_shipping_progress(calculation: ShippingCalculation) -> float:
    """Percentage (0-100) of the free-shipping threshold the cart has reached."""
    threshold = calculation.free_shipping_threshold
    if threshold <= 0 or calculation.is_free_shipping:
        return 100.0
    if math.isnan(calculation.cart_subtotal):
        return 0.0
    return max(0.0, min(100.0, calculation.cart_subtotal / threshold * 100))


def format_breakdown(calculation: ShippingCalculation) -> str:
    """
    Multi-line summary of a quote.

    Free-shipping quotes show the waived amount instead of the line items.
    Other quotes list base cost, weight charges (when any), the speed
    surcharge (when the multiplier is not 1) and how far the cart is from free shipping.
    """
    if calculation.zone_name is None:
        return "Add items to your cart to see shipping options."

    lines = [
        f"Zone: {calculation.zone_name} • Weight: {calculation.weight_kg}kg",
        f"{calculation.speed_icon} {calculation.speed_name} ({calculation.delivery_days} business days)",
    ]

    if calculation.is_free_shipping:
        lines.append("You qualify for FREE shipping!")
        if calculation.savings > 0:
            lines.append(f"You saved {format_currency(calculation.savings)}")
        return "\n".join(lines)

    b = calculation.breakdown
    lines.append(f"Base shipping cost: {format_currency(b.base_cost)}")
    if b.weight_cost > 0:
        lines.append(f"Weight charges ({calculation.weight_kg}kg): {format_currency(b.weight_cost)}")
    if b.speed_multiplier != 1:
        lines.append(
            f"Speed multiplier ({b.speed_multiplier}x): +{format_currency(calculation.speed_surcharge)}"
        )
    lines.append(f"Total shipping: {format_currency(b.final_cost)}")

    if calculation.amount_to_free_shipping > 0:
        lines.append(
            f"Add {format_currency(calculation.amount_to_free_shipping)} more for FREE shipping!"
        )
        lines.append(f"{free_shipping_progress(calculation):.1f}% of the way to FREE shipping")
    return "\n".join(lines)


def format_delivery_options(options: list[DeliveryOption]) -> str:
    """One line per option: icon, name, price (or FREE) and description."""
    rendered = []
    for option in options:
        price = "FREE" if option.cost == 0 else format_currency(option.cost)
        line = f"{option.icon} {option.name}: {price} ({option.description})"
        if option.estimated_delivery and option.estimated_delivery != "Not available":
            line += f", arrives {option.estimated_delivery}"
        rendered.append(line)
    return "\n".join(rendered)
