"""
Mempool and fee tools.

Implements:
- Mempool statistics and dropped transactions
- Pending transactions for one address
- STX transfer fee estimates
- Next-nonce lookup for transaction preparation
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from stx_api import quote_segment
from stx_errors import UpstreamRequestError
from stx_tools import NoParams, OptionalStr, PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient


class FeeEstimateParams(ToolParams):
    estimated_len: int | None = Field(None, ge=0, description="Estimated transaction length in bytes")
    estimated_len_sig: int | None = Field(
        None, ge=0, description="Estimated signature length in bytes"
    )


class AddressMempoolParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address to query")


class NonceInfoParams(ToolParams):
    address: OptionalStr = Field(None, description="Address to check (defaults to wallet address)")


class MempoolPlugin(PluginBase):
    """Tools for pending transactions and fees."""

    name = "mempool"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def get_mempool_stats(params: NoParams) -> Any:
            return await self.fetch(network, "/extended/v1/tx/mempool/stats", "get mempool stats")

        async def get_fee_estimates(params: FeeEstimateParams) -> Any:
            return await self.fetch(
                network,
                "/v2/fees/transfer",
                "get fee estimates",
                {"estimated_len": params.estimated_len, "estimated_len_sig": params.estimated_len_sig},
            )

        async def get_dropped_mempool_txs(params: PaginationParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/tx/mempool/dropped",
                "get dropped transactions",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_mempool_txs_by_address(params: AddressMempoolParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/mempool",
                "get address mempool transactions",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_nonce_info(params: NonceInfoParams) -> Any:
            address = params.address or wallet.get_address()
            data = await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(address)}/nonces",
                "get nonce",
            )
            nonce = data.get("possible_next_nonce") if isinstance(data, dict) else None
            if nonce is None:
                raise UpstreamRequestError(f"Failed to get nonce: unexpected response {data!r}")
            return {"address": address, "nonce": int(nonce)}

        return [
            create_tool(
                "get_mempool_stats",
                "Get current mempool statistics",
                NoParams,
                get_mempool_stats,
            ),
            create_tool(
                "get_fee_estimates",
                "Get current fee estimates for transactions",
                FeeEstimateParams,
                get_fee_estimates,
            ),
            create_tool(
                "get_dropped_mempool_txs",
                "Get transactions that were dropped from mempool",
                PaginationParams,
                get_dropped_mempool_txs,
            ),
            create_tool(
                "get_mempool_txs_by_address",
                "Get mempool transactions for a specific address",
                AddressMempoolParams,
                get_mempool_txs_by_address,
            ),
            create_tool(
                "get_nonce_info",
                "Get nonce information for transaction preparation",
                NonceInfoParams,
                get_nonce_info,
            ),
        ]


def mempool(api=None) -> MempoolPlugin:
    return MempoolPlugin(api)
