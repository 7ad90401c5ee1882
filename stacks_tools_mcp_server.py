#!/usr/bin/env python3
"""
MCP server for Stacks blockchain tools.

Exposes the contracts, transactions, PoX, search, tokens, NFT, blocks,
mempool, stacking pool and events plugins as MCP tools over stdio. Every
plugin tool keeps its own name and its pydantic parameter model becomes the
tool's inputSchema.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

# Load .env from current directory or parent directories
SERVER_DIR = Path(__file__).resolve().parent
load_dotenv(SERVER_DIR / ".env")
load_dotenv(SERVER_DIR.parent / ".env")

from stx_api import StacksApiClient  # noqa: E402
from stx_config import STXConfig, configure_logging  # noqa: E402
from stx_contracts import contracts  # noqa: E402
from stx_events import events  # noqa: E402
from stx_explorer import blocks  # noqa: E402
from stx_mempool import mempool  # noqa: E402
from stx_nft import nft  # noqa: E402
from stx_pox import pox  # noqa: E402
from stx_search import search  # noqa: E402
from stx_stackpool import stackpool  # noqa: E402
from stx_telemetry import Analytics, with_telemetry  # noqa: E402
from stx_tokens import tokens  # noqa: E402
from stx_tools import PluginBase, StacksTool, get_tools  # noqa: E402
from stx_transactions import transactions  # noqa: E402
from stx_wallet import HiroWalletClient, WalletClient  # noqa: E402

SERVER_VERSION = "1.0.0"

logger = logging.getLogger("stacks_tools_mcp_server")

app = Server("stacks_tools")

_registry: dict[str, StacksTool] | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ok_response(data: Any) -> List[TextContent]:
    return [
        TextContent(type="text", text=json.dumps({"success": True, "data": data}, default=str))
    ]


def _error_response(message: str, exc: Exception | None = None) -> List[TextContent]:
    payload: dict[str, Any] = {"success": False, "error": message}
    if exc is not None:
        payload["error_type"] = type(exc).__name__
    return [TextContent(type="text", text=json.dumps(payload))]


def default_plugins(api: StacksApiClient) -> list[PluginBase]:
    return [
        contracts(api),
        transactions(api),
        pox(api),
        search(api),
        tokens(api),
        nft(api),
        blocks(api),
        mempool(api),
        stackpool(api),
        events(api),
    ]


def build_registry(
    wallet: WalletClient, plugins: list[PluginBase]
) -> dict[str, StacksTool]:
    return {tool.name: tool for tool in get_tools(wallet, plugins)}


def _load_registry() -> dict[str, StacksTool]:
    cfg = STXConfig.from_env()
    api = StacksApiClient(cfg)
    wallet = HiroWalletClient(cfg, api)
    logger.info("Stacks network: %s", cfg.network)
    return build_registry(wallet, default_plugins(api))


async def _get_registry() -> dict[str, StacksTool]:
    global _registry
    if _registry is None:
        _registry = await asyncio.to_thread(_load_registry)
        logger.info("Available tools: %d", len(_registry))
    return _registry


# ---------------------------------------------------------------------------
# MCP handlers
# ---------------------------------------------------------------------------


@app.list_tools()
async def list_tools() -> List[Tool]:
    registry = await _get_registry()
    return [
        Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema())
        for tool in registry.values()
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> List[TextContent]:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        return _error_response("Invalid arguments. Expected an object.")

    try:
        registry = await _get_registry()
    except Exception as exc:  # noqa: BLE001
        logger.error("Failed to load tools: %s", exc)
        return _error_response(str(exc), exc)

    tool = registry.get(name)
    if tool is None:
        return _error_response(f"Unknown tool: {name}")

    logger.info("Executing tool: %s", name)
    await Analytics.tool_used(name)
    try:
        result = await with_telemetry(name, lambda: tool.run(arguments))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Tool %s failed: %s", name, exc)
        await Analytics.error_occurred(name, str(exc) or type(exc).__name__)
        return _error_response(str(exc), exc)

    return _ok_response(result)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def main() -> None:
    configure_logging(STXConfig.from_env().log_level)
    await Analytics.server_started(SERVER_VERSION)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await Analytics.server_shutdown()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
