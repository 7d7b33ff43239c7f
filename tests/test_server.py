"""Tests for MCP server tool registration and dispatch."""
import pytest
import json
from unittest.mock import patch

from checkout_validator.server import (
    list_tools,
    call_tool,
    _handle_validate_checkout,
    _handle_describe_checkout_schema,
)
import checkout_validator.server as server_module


EXPECTED_TOOLS = [
    "validate_checkout",
    "describe_checkout_schema",
]


@pytest.fixture(autouse=True)
def debug_dir(tmp_path):
    """Keep debug log writes inside the test's temp directory."""
    with patch.object(server_module, "_DEBUG_LOG_DIR", tmp_path / "debug"):
        yield tmp_path / "debug"


@pytest.mark.asyncio
async def test_list_tools_returns_all():
    tools = await list_tools()
    names = [t.name for t in tools]
    assert len(tools) == 2
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
async def test_validate_checkout_valid(checkout_payload):
    result = await _handle_validate_checkout({"checkout": checkout_payload, "today": "2024-06-15"})

    assert result["status"] == "valid"
    assert result["checkout"]["payment"]["card"] == "************1111"
    assert result["checkout"]["total_quantity"] == 3


@pytest.mark.asyncio
async def test_validate_checkout_invalid(checkout_payload):
    checkout_payload["customerInfo"]["name"] = "Jo"
    checkout_payload["items"] = []

    result = await _handle_validate_checkout({"checkout": checkout_payload, "today": "2024-06-15"})

    assert result["status"] == "invalid"
    assert result["errors"]["customerInfo"]["name"]["_errors"]
    assert result["errors"]["items"]["_errors"]
    paths = {v["path"] for v in result["violations"]}
    assert paths == {"customerInfo.name", "items"}


@pytest.mark.asyncio
async def test_validate_checkout_today_controls_expiry(checkout_payload):
    result = await _handle_validate_checkout({"checkout": checkout_payload, "today": "2028-01-01"})
    assert result["status"] == "invalid"
    assert [v["rule"] for v in result["violations"]] == ["expired_card"]


@pytest.mark.asyncio
async def test_validate_checkout_uses_module_validator(checkout_payload):
    with patch.object(server_module, "validate_checkout", wraps=server_module.validate_checkout) as spy:
        await _handle_validate_checkout({"checkout": checkout_payload, "today": "2024-06-15"})

    spy.assert_called_once()
    assert spy.call_args.kwargs["today"].isoformat() == "2024-06-15"


@pytest.mark.asyncio
async def test_validate_checkout_bad_today(checkout_payload):
    result = await _handle_validate_checkout({"checkout": checkout_payload, "today": "June 15th"})
    assert result["status"] == "error"
    assert "YYYY-MM-DD" in result["message"]


@pytest.mark.asyncio
async def test_describe_checkout_schema():
    schema = await _handle_describe_checkout_schema({})
    assert set(schema["required"]) == {"customerInfo", "shippingAddress", "paymentDetails", "items"}
    assert "PaymentDetails" in schema["$defs"]
    assert "expirationDate" in schema["$defs"]["PaymentDetails"]["properties"]


@pytest.mark.asyncio
async def test_call_tool_never_echoes_card_number(checkout_payload, debug_dir):
    contents = await call_tool("validate_checkout", {"checkout": checkout_payload, "today": "2024-06-15"})

    text = contents[0].text
    assert json.loads(text)["status"] == "valid"
    assert "4111111111111111" not in text

    log_text = "".join(p.read_text() for p in debug_dir.iterdir())
    assert "TOOL: validate_checkout" in log_text
    assert "4111111111111111" not in log_text
    assert '"cvv": "[CVV REDACTED]"' in log_text


@pytest.mark.asyncio
async def test_call_tool_unknown():
    contents = await call_tool("charge_card", {})
    assert contents[0].text == "Unknown tool: charge_card"


@pytest.mark.asyncio
async def test_call_tool_handler_error_returned_as_text():
    contents = await call_tool("validate_checkout", {})
    assert contents[0].text.startswith("Error:")
