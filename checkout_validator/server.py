"""
Checkout Validator MCP Server.

Exposes checkout validation over stdio so assistant clients can check a
checkout form payload (customer, shipping, payment, cart) before it is
submitted anywhere. Accepted checkouts are returned as a redacted summary;
rejected ones as a field-error tree.
"""
import asyncio
import json
import logging
import os
from datetime import date, datetime
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from .output_sanitizer import sanitize_output, summarize_checkout
from .schema import CheckoutRequest
from .validator import validate_checkout

logger = logging.getLogger(__name__)

# Debug log: records every tool call and response for session review
_DEBUG_LOG_DIR = Path(os.environ.get(
    "CHECKOUT_DEBUG_DIR",
    os.path.expanduser("~/.config/checkout-validator/debug"),
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
            f"ARGS: {sanitize_output(json.dumps(args, indent=2, default=str))}\n"
            f"RESPONSE:\n{result}\n"
        )

        with open(log_file, "a") as f:
            f.write(entry)
    except Exception as e:
        logger.debug("Debug log write failed: %s", e)

server = Server("checkout-validator")


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="validate_checkout",
            description=(
                "Validate a checkout form payload: customerInfo, shippingAddress, paymentDetails, "
                "and items. Returns a REDACTED summary when the checkout is valid, or a tree of "
                "error messages keyed by field path when it is not. Does NOT submit or charge anything."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "checkout": {
                        "type": "object",
                        "description": "The checkout record, as decoded from the form's JSON body",
                    },
                    "today": {
                        "type": "string",
                        "description": "Reference date (YYYY-MM-DD) for the card-expiry rule (default: today)",
                    },
                },
                "required": ["checkout"],
            },
        ),
        Tool(
            name="describe_checkout_schema",
            description="Return the JSON Schema of the checkout payload, with camelCase field names.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


# ---------------------------------------------------------------------------
# Tool dispatch
# ---------------------------------------------------------------------------

@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    try:
        if name == "validate_checkout":
            result = await _handle_validate_checkout(arguments)
        elif name == "describe_checkout_schema":
            result = await _handle_describe_checkout_schema(arguments)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

        if isinstance(result, str):
            text = result
        else:
            text = json.dumps(result, indent=2)
        sanitized = sanitize_output(text)

        _debug_log(name, arguments, sanitized)
        return [TextContent(type="text", text=sanitized)]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        error_text = f"Error: {str(e)}"
        _debug_log(name, arguments, error_text)
        return [TextContent(type="text", text=error_text)]


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------

async def _handle_validate_checkout(args: dict) -> dict:
    """Validate a checkout payload and report a redacted summary or the field errors."""
    today = None
    raw_today = args.get("today")
    if raw_today:
        try:
            today = date.fromisoformat(raw_today)
        except (TypeError, ValueError):
            return {"status": "error", "message": f"Invalid 'today' date: {raw_today!r}. Use YYYY-MM-DD."}

    result = validate_checkout(args["checkout"], today=today)
    if result.ok:
        return {"status": "valid", "checkout": summarize_checkout(result.value)}

    logger.info("Checkout invalid: %d violation(s)", len(result.violations))
    return {
        "status": "invalid",
        "errors": result.errors(),
        "violations": [v.to_dict() for v in result.violations],
    }


async def _handle_describe_checkout_schema(args: dict) -> dict:
    return CheckoutRequest.model_json_schema(by_alias=True)


# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

async def main():
    """Run the MCP server over stdio."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logger.info("Checkout Validator MCP server starting...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    """Sync entry point for console_scripts."""
    asyncio.run(main())
