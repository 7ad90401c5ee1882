"""
Search and account tools.

Implements:
- Polymorphic lookup of blocks, transactions, contracts and accounts by id
- Account balances (aggregate, STX-only, historical) and nonces
- Active wallet summary
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from stx_api import quote_segment
from stx_telemetry import Analytics
from stx_tools import NoParams, OptionalStr, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient


class SearchParams(ToolParams):
    id: RequiredStr = Field(
        description=(
            "Hash or ID to search for (transaction ID, block hash, contract ID, or address)"
        )
    )
    include_metadata: bool = Field(False, description="Include metadata in response")


class AccountBalanceParams(ToolParams):
    address: RequiredStr = Field(description="Stacks address to query")
    unanchored: bool = Field(False, description="Include unanchored transactions")


class StxBalanceParams(AccountBalanceParams):
    until_block: OptionalStr = Field(None, description="Get balance at specific block hash")


class NoncesParams(ToolParams):
    address: RequiredStr = Field(description="Stacks address to query")
    block_height: int | None = Field(None, ge=0, description="Get nonces at specific block height")
    block_hash: OptionalStr = Field(None, description="Get nonces at specific block hash")


class SearchPlugin(PluginBase):
    """Tools for searching the chain and inspecting accounts."""

    name = "search"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def search_by_id(params: SearchParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/search/{quote_segment(params.id)}",
                "search",
                {"include_metadata": params.include_metadata},
            )

        async def get_account_balance(params: AccountBalanceParams) -> Any:
            result = await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/balances",
                "get account balance",
                {"unanchored": params.unanchored},
            )
            await Analytics.balance_checked(network)
            return result

        async def get_account_stx_balance(params: StxBalanceParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/stx",
                "get STX balance",
                {"unanchored": params.unanchored, "until_block": params.until_block or None},
            )

        async def get_account_nonces(params: NoncesParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/nonces",
                "get account nonces",
                {"block_height": params.block_height, "block_hash": params.block_hash or None},
            )

        async def get_wallet_info(params: NoParams) -> Any:
            address = wallet.get_address()
            balance = await asyncio.to_thread(wallet.get_balance)
            return {
                "address": address,
                "network": wallet.get_network(),
                "balance": balance,
            }

        return [
            create_tool(
                "search_by_id",
                "Search blocks, transactions, contracts, or accounts by hash/ID",
                SearchParams,
                search_by_id,
            ),
            create_tool(
                "get_account_balance",
                "Get STX and token balances for an account",
                AccountBalanceParams,
                get_account_balance,
            ),
            create_tool(
                "get_account_stx_balance",
                "Get STX balance for an account",
                StxBalanceParams,
                get_account_stx_balance,
            ),
            create_tool(
                "get_account_nonces",
                "Get nonce information for an account",
                NoncesParams,
                get_account_nonces,
            ),
            create_tool(
                "get_wallet_info",
                "Get current wallet address, balance, and network information",
                NoParams,
                get_wallet_info,
            ),
        ]


def search(api=None) -> SearchPlugin:
    return SearchPlugin(api)
