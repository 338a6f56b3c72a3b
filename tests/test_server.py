"""Tests for MCP server tool registration and dispatch."""
import json

import pytest

from shipping_estimator.server import (
    list_tools,
    call_tool,
    _handle_calculate_shipping,
    _handle_get_delivery_options,
    _handle_calculate_order_total,
    _handle_estimate_delivery_date,
    _handle_list_shipping_zones,
)
from shipping_estimator.rates import DEFAULT_RATE_TABLE
import shipping_estimator.server as server_module


EXPECTED_TOOLS = [
    "calculate_shipping",
    "get_delivery_options",
    "calculate_order_total",
    "estimate_delivery_date",
    "list_shipping_zones",
]

CART = [{"price": 299, "quantity": 1, "weight_grams": 100}]


@pytest.fixture(autouse=True)
def fresh_server(tmp_path, monkeypatch):
    monkeypatch.setattr(server_module, "_calculator", None)
    monkeypatch.setattr(server_module, "_rate_loader", None)
    monkeypatch.setattr(server_module, "_DEBUG_LOG_DIR", tmp_path / "debug")
    monkeypatch.delenv("SHIPPING_STRICT", raising=False)


@pytest.mark.asyncio
async def test_list_tools_returns_all_five():
    tools = await list_tools()
    names = [t.name for t in tools]
    assert len(tools) == 5
    for expected in EXPECTED_TOOLS:
        assert expected in names, f"Missing tool: {expected}"


@pytest.mark.asyncio
async def test_all_tools_have_schemas():
    tools = await list_tools()
    for tool in tools:
        assert tool.description, f"{tool.name} missing description"
        assert tool.inputSchema, f"{tool.name} missing inputSchema"
        assert tool.inputSchema["type"] == "object"


@pytest.mark.asyncio
async def test_calculate_shipping():
    result = await _handle_calculate_shipping({
        "cart_items": CART,
        "address": {"city": "Mumbai", "state": "Maharashtra"},
        "speed": "standard",
    })
    assert result["status"] == "ok"
    assert result["shipping"]["cost"] == 40
    assert result["shipping"]["zone_name"] == "Metro Cities"
    assert result["shipping"]["breakdown"]["original_cost"] == 40
    assert " - " in result["estimated_delivery"]
    assert "Total shipping: ₹40.00" in result["summary"]


@pytest.mark.asyncio
async def test_calculate_shipping_defaults_to_standard():
    result = await _handle_calculate_shipping({"cart_items": CART, "address": {"city": "Timbuktu"}})
    assert result["shipping"]["speed_key"] == "standard"
    assert result["shipping"]["cost"] == 75


@pytest.mark.asyncio
async def test_get_delivery_options():
    result = await _handle_get_delivery_options({"cart_items": CART, "address": {"city": "mumbai"}})
    assert [o["id"] for o in result["options"]] == ["standard", "express", "overnight"]
    assert [o["cost"] for o in result["options"]] == [40, 72, 100]
    assert len(result["summary"].splitlines()) == 3


@pytest.mark.asyncio
async def test_calculate_order_total():
    result = await _handle_calculate_order_total({
        "cart_items": CART,
        "address": {"city": "mumbai"},
        "speed": "overnight",
    })
    assert result["order_total"] == {
        "subtotal": 299,
        "shipping": 100,
        "total": 399,
        "speed_key": "overnight",
    }


@pytest.mark.asyncio
async def test_estimate_delivery_date():
    assert await _handle_estimate_delivery_date({"delivery_days": "N/A"}) == "Not available"
    assert await _handle_estimate_delivery_date({"delivery_days": "Same Day"}) == "Today"


@pytest.mark.asyncio
async def test_list_shipping_zones():
    result = await _handle_list_shipping_zones({})
    assert result["source"] == "built-in"
    assert result["free_shipping_threshold"] == 1000
    assert [z["key"] for z in result["zones"]] == [z.key for z in DEFAULT_RATE_TABLE.zones]
    assert result["zones"][-1]["cities"] == "all other cities"
    assert "mumbai" in result["zones"][0]["cities"]
    assert [s["key"] for s in result["speeds"]] == ["standard", "express", "overnight"]


@pytest.mark.asyncio
async def test_call_tool_returns_json_and_logs(tmp_path):
    content = await call_tool("calculate_shipping", {"cart_items": CART, "address": {"city": "delhi"}})
    assert len(content) == 1
    payload = json.loads(content[0].text)
    assert payload["shipping"]["cost"] == 40

    log_files = list((tmp_path / "debug").glob("session_*.log"))
    assert len(log_files) == 1
    assert "TOOL: calculate_shipping" in log_files[0].read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_call_tool_plain_text_result():
    content = await call_tool("estimate_delivery_date", {"delivery_days": "garbage"})
    assert content[0].text == "garbage"


@pytest.mark.asyncio
async def test_unknown_tool():
    content = await call_tool("track_parcel", {})
    assert content[0].text == "Unknown tool: track_parcel"


@pytest.mark.asyncio
async def test_invalid_cart_reported_as_error():
    content = await call_tool("calculate_shipping", {"cart_items": [{"price": "abc", "quantity": 1}]})
    assert content[0].text.startswith("Error: Cart line 0: price")


@pytest.mark.asyncio
async def test_strict_mode_from_environment(monkeypatch):
    monkeypatch.setenv("SHIPPING_STRICT", "1")
    content = await call_tool("calculate_shipping", {"cart_items": CART, "speed": "rocket"})
    assert content[0].text.startswith("Error: Unknown delivery speed: 'rocket'")


@pytest.mark.asyncio
async def test_lenient_mode_falls_back_to_standard():
    content = await call_tool("calculate_shipping", {"cart_items": CART, "speed": "rocket"})
    payload = json.loads(content[0].text)
    assert payload["shipping"]["speed_key"] == "standard"


@pytest.mark.asyncio
async def test_debug_log_failure_does_not_break_tool(monkeypatch, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr(server_module, "_DEBUG_LOG_DIR", blocker / "debug")
    content = await call_tool("estimate_delivery_date", {"delivery_days": "N/A"})
    assert content[0].text == "Not available"


@pytest.mark.asyncio
async def test_null_speed_treated_as_standard():
    result = await _handle_calculate_shipping({"cart_items": CART, "address": {"city": "mumbai"}, "speed": None})
    assert result["shipping"]["speed_key"] == "standard"
    assert result["shipping"]["delivery_days"] == "1-2"

    total = await _handle_calculate_order_total({"cart_items": CART, "address": {"city": "mumbai"}, "speed": None})
    assert total["order_total"]["speed_key"] == "standard"
    assert total["order_total"]["shipping"] == 40
