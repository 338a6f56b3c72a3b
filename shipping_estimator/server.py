"""
Shipping Estimator MCP Server.

Exposes the shipping calculator over stdio: quotes for a cart and
destination, delivery options per speed, order totals, delivery date
estimates and the active rate table.
"""
import asyncio
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from .calculator import ShippingCalculator
from .delivery_dates import estimate_delivery_date
from .formatting import format_breakdown, format_delivery_options
from .rates import RateTableLoader

logger = logging.getLogger(__name__)

# Debug log — records every tool call and response for session review
_DEBUG_LOG_DIR = Path(os.environ.get(
    "SHIPPING_DEBUG_DIR",
    os.path.expanduser("~/.config/shipping-estimator/debug"),
))


def _debug_log(tool_name: str, args: dict, result: str) -> None:
    """Append a tool call entry to the debug log file."""
    try:
        _DEBUG_LOG_DIR.mkdir(parents=True, exist_ok=True)
        log_file = _DEBUG_LOG_DIR / f"session_{datetime.now().strftime('%Y-%m-%d')}.log"
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]

        entry = (
            f"\n{'='*80}\n"
            f"[{timestamp}] TOOL: {tool_name}\n"
            f"ARGS: {json.dumps(args, indent=2, ensure_ascii=False)}\n"
            f"RESPONSE:\n{result}\n"
        )

        with open(log_file, "a", encoding="utf-8") as f:
            f.write(entry)
    except Exception as e:
        logger.debug("Debug log write failed: %s", e)

server = Server("shipping-estimator")

# Lazy-initialized singletons
_rate_loader: RateTableLoader | None = None
_calculator: ShippingCalculator | None = None


def _strict_mode() -> bool:
    return os.environ.get("SHIPPING_STRICT", "").lower() in ("1", "true", "yes")


def _get_rate_loader() -> RateTableLoader:
    global _rate_loader
    if _rate_loader is None:
        _rate_loader = RateTableLoader()
    return _rate_loader


def _get_calculator() -> ShippingCalculator:
    global _calculator
    if _calculator is None:
        _calculator = ShippingCalculator(_get_rate_loader().load(), strict=_strict_mode())
    return _calculator


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

_CART_ITEMS_SCHEMA = {
    "type": "array",
    "description": "Cart lines: price (per unit), quantity, and optional weight in grams (default 250g)",
    "items": {
        "type": "object",
        "properties": {
            "price": {"type": "number"},
            "quantity": {"type": "integer"},
            "weight_grams": {"type": "number"},
        },
        "required": ["price", "quantity"],
    },
}

_ADDRESS_SCHEMA = {
    "type": "object",
    "description": "Destination address. Only the city affects the price.",
    "properties": {
        "city": {"type": "string"},
        "state": {"type": "string"},
    },
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="calculate_shipping",
            description=(
                "Calculate the shipping charge for a cart and destination city at one delivery speed. "
                "Returns the cost breakdown, zone, weight, delivery days and free-shipping status."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "cart_items": _CART_ITEMS_SCHEMA,
                    "address": _ADDRESS_SCHEMA,
                    "speed": {
                        "type": "string",
                        "description": "Delivery speed: 'standard', 'express' or 'overnight'",
                        "default": "standard",
                    },
                },
                "required": ["cart_items"],
            },
        ),
        Tool(
            name="get_delivery_options",
            description="List every delivery speed with its price, delivery days and estimated arrival.",
            inputSchema={
                "type": "object",
                "properties": {
                    "cart_items": _CART_ITEMS_SCHEMA,
                    "address": _ADDRESS_SCHEMA,
                },
                "required": ["cart_items"],
            },
        ),
        Tool(
            name="calculate_order_total",
            description="Cart subtotal plus shipping for the chosen delivery speed.",
            inputSchema={
                "type": "object",
                "properties": {
                    "cart_items": _CART_ITEMS_SCHEMA,
                    "address": _ADDRESS_SCHEMA,
                    "speed": {
                        "type": "string",
                        "description": "Delivery speed: 'standard', 'express' or 'overnight'",
                        "default": "standard",
                    },
                },
                "required": ["cart_items"],
            },
        ),
        Tool(
            name="estimate_delivery_date",
            description=(
                "Convert a delivery-days value ('1-2', '3', 'Same Day') into calendar dates "
                "counted from today."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "delivery_days": {
                        "type": "string",
                        "description": "Delivery days as returned by calculate_shipping (e.g., '2-3')",
                    },
                },
                "required": ["delivery_days"],
            },
        ),
        Tool(
            name="list_shipping_zones",
            description="Show the shipping zones, delivery speeds and free-shipping threshold in use.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": [],
            },
        ),
    ]


# ---------------------------------------------------------------------------
# Tool dispatch
# ---------------------------------------------------------------------------

@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    try:
        if name == "calculate_shipping":
            result = await _handle_calculate_shipping(arguments)
        elif name == "get_delivery_options":
            result = await _handle_get_delivery_options(arguments)
        elif name == "calculate_order_total":
            result = await _handle_calculate_order_total(arguments)
        elif name == "estimate_delivery_date":
            result = await _handle_estimate_delivery_date(arguments)
        elif name == "list_shipping_zones":
            result = await _handle_list_shipping_zones(arguments)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

        if isinstance(result, str):
            text = result
        else:
            text = json.dumps(result, indent=2, ensure_ascii=False)

        _debug_log(name, arguments, text)
        return [TextContent(type="text", text=text)]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        error_text = f"Error: {str(e)}"
        _debug_log(name, arguments, error_text)
        return [TextContent(type="text", text=error_text)]


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------

async def _handle_calculate_shipping(args: dict) -> dict:
    """Quote one delivery speed."""
    calc = _get_calculator()
    calculation = calc.calculate_shipping_cost(
        args.get("cart_items") or [],
        args.get("address"),
        args.get("speed") or "standard",
    )
    return {
        "status": "ok",
        "shipping": calculation.model_dump(),
        "estimated_delivery": estimate_delivery_date(calculation.delivery_days),
        "summary": format_breakdown(calculation),
    }


async def _handle_get_delivery_options(args: dict) -> dict:
    """Quote every delivery speed."""
    calc = _get_calculator()
    options = calc.get_delivery_options(args.get("cart_items") or [], args.get("address"))
    return {
        "status": "ok",
        "options": [option.model_dump() for option in options],
        "summary": format_delivery_options(options),
    }


async def _handle_calculate_order_total(args: dict) -> dict:
    calc = _get_calculator()
    total = calc.calculate_order_total(
        args.get("cart_items") or [],
        args.get("address"),
        args.get("speed") or "standard",
    )
    return {"status": "ok", "order_total": total.model_dump()}


async def _handle_estimate_delivery_date(args: dict) -> str:
    return estimate_delivery_date(args.get("delivery_days"))


async def _handle_list_shipping_zones(args: dict) -> dict:
    """Describe the active rate table."""
    rates = _get_calculator().rates
    return {
        "status": "ok",
        "source": str(_get_rate_loader().path or "built-in"),
        "free_shipping_threshold": rates.free_shipping_threshold,
        "zones": [
            {
                "key": zone.key,
                "name": zone.name,
                "cities": sorted(zone.match_cities) or "all other cities",
                "base_cost": zone.base_cost,
                "cost_per_kg": zone.cost_per_kg,
                "standard_days": zone.standard_days,
                "express_days": zone.express_days,
            }
            for zone in rates.zones
        ],
        "speeds": [speed.model_dump() for speed in rates.speeds],
    }


# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

async def main():
    """Run the MCP server over stdio."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logger.info("Shipping Estimator MCP server starting...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    """Sync entry point for console_scripts."""
    asyncio.run(main())
