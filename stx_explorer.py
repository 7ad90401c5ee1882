"""
Stacks block explorer tools.

Implements:
- Block by hash or height, recent blocks, transactions in a block
- Core node network info and current chain height
- Burn (Bitcoin) block info
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from stx_api import quote_segment
from stx_tools import NoParams, PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient


class BlockHashParams(ToolParams):
    block_hash: RequiredStr = Field(description="Block hash (hex string)")


class BlockHeightParams(ToolParams):
    block_height: int = Field(ge=0, description="Block height")


class BlockTransactionsParams(PaginationParams):
    block_hash: RequiredStr = Field(description="Block hash (hex string)")


class BurnBlockParams(ToolParams):
    burn_block_height: int | None = Field(
        None, ge=0, description="Specific burn block height to query (default: latest)"
    )


class BlocksPlugin(PluginBase):
    """Tools for querying blocks and network information."""

    name = "blocks"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def get_block_by_hash(params: BlockHashParams) -> Any:
            return await self.fetch(
                network, f"/extended/v1/block/{quote_segment(params.block_hash)}", "get block"
            )

        async def get_block_by_height(params: BlockHeightParams) -> Any:
            return await self.fetch(
                network, f"/extended/v1/block/by_height/{params.block_height}", "get block"
            )

        async def get_recent_blocks(params: PaginationParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/block",
                "get recent blocks",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_block_transactions(params: BlockTransactionsParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/tx/block/{quote_segment(params.block_hash)}",
                "get block transactions",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_network_info(params: NoParams) -> Any:
            return await asyncio.to_thread(self.api.get_network_info, network)

        async def get_current_block_height(params: NoParams) -> Any:
            return await asyncio.to_thread(self.api.get_current_block_height, network)

        async def get_burn_block_info(params: BurnBlockParams) -> Any:
            if params.burn_block_height is None:
                path = "/extended/v1/burn-block/latest"
            else:
                path = f"/extended/v1/burn-block/{params.burn_block_height}"
            return await self.fetch(network, path, "get burn block info")

        return [
            create_tool(
                "get_block_by_hash",
                "Get block information by block hash",
                BlockHashParams,
                get_block_by_hash,
            ),
            create_tool(
                "get_block_by_height",
                "Get block information by block height",
                BlockHeightParams,
                get_block_by_height,
            ),
            create_tool(
                "get_recent_blocks",
                "Get list of recent blocks",
                PaginationParams,
                get_recent_blocks,
            ),
            create_tool(
                "get_block_transactions",
                "Get transactions in a specific block",
                BlockTransactionsParams,
                get_block_transactions,
            ),
            create_tool(
                "get_network_info",
                "Get current network information and status",
                NoParams,
                get_network_info,
            ),
            create_tool(
                "get_current_block_height",
                "Get the current blockchain height",
                NoParams,
                get_current_block_height,
            ),
            create_tool(
                "get_burn_block_info",
                "Get information about burn blocks (Bitcoin blocks)",
                BurnBlockParams,
                get_burn_block_info,
            ),
        ]


def blocks(api=None) -> BlocksPlugin:
    return BlocksPlugin(api)
