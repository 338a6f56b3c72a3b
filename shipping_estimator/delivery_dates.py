"""Delivery date estimation from zone day ranges ("1-2", "3", "Same Day")."""
import re
from datetime import date, timedelta

# Day/month/year, as dates are shown on the storefront
DEFAULT_DATE_FORMAT = "%d/%m/%Y"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_leading_int(text: str) -> int | None:
    """Parse the integer at the start of text ("3 days" -> 3), or None."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def _add_days(start: date, days: int) -> date | None:
    try:
        return start + timedelta(days=days)
    except OverflowError:
        return None


def estimate_delivery_date(
    delivery_days: str | None,
    today: date | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Turn a delivery-days spec into a displayable date or date range.

    - "N/A" or empty -> "Not available"
    - "N-M" -> "<today+N> - <today+M>"
    - anything containing "Same Day" -> "Today"
    - "N" -> "<today+N>"
    - anything else is returned unchanged
    """
    if not delivery_days or delivery_days == "N/A":
        return "Not available"

    today = today or date.today()

    parts = delivery_days.split("-")
    if len(parts) == 2:
        min_days = _parse_leading_int(parts[0])
        max_days = _parse_leading_int(parts[1])
        if min_days is not None and max_days is not None:
            min_date = _add_days(today, min_days)
            max_date = _add_days(today, max_days)
            if min_date and max_date:
                return f"{min_date.strftime(date_format)} - {max_date.strftime(date_format)}"
    elif "Same Day" in delivery_days:
        return "Today"
    else:
        days = _parse_leading_int(delivery_days)
        delivery_date = _add_days(today, days) if days is not None else None
        if delivery_date:
            return delivery_date.strftime(date_format)

    return delivery_days


def describe_delivery_days(delivery_days: str, natural_same_day: bool = False) -> str:
    """Option description, e.g. "Delivery in 1-2 business days".

    The template is applied literally by default, so "Same Day" reads
    "Delivery in Same Day business days". natural_same_day switches that
    one case to "Same day delivery".
    """
    if natural_same_day and delivery_days == "Same Day":
        return "Same day delivery"
    return f"Delivery in {delivery_days} business days"
