"""
Proof of Transfer (PoX) tools.

Implements:
- PoX cycles, cycle signers and signer stackers
- Stacking status of an address
- Stacking through the wallet client
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from stx_api import quote_segment
from stx_tools import OptionalStr, PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient


class CycleParams(ToolParams):
    cycle_number: int = Field(ge=0, description="PoX cycle number")


class CycleSignersParams(CycleParams, PaginationParams):
    pass


class SignerParams(CycleParams):
    signer_key: RequiredStr = Field(description="Signer public key")


class SignerStackersParams(SignerParams, PaginationParams):
    pass


class StackStxParams(ToolParams):
    amount: int = Field(gt=0, description="Amount to stack in micro-STX (1 STX = 1,000,000 micro-STX)")
    cycles: int = Field(ge=1, description="Number of cycles to stack for")
    pox_address: RequiredStr = Field(description="Bitcoin address to receive rewards")
    start_burn_height: int | None = Field(
        None, ge=0, description="Burn height to start stacking (optional)"
    )


class StackingInfoParams(ToolParams):
    address: OptionalStr = Field(None, description="Address to check (defaults to wallet address)")


class PoxPlugin(PluginBase):
    """Tools for PoX cycles, signers and stacking."""

    name = "pox"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        def cycle_path(params: CycleParams) -> str:
            return f"/extended/v2/pox/cycles/{params.cycle_number}"

        def signer_path(params: SignerParams) -> str:
            return f"{cycle_path(params)}/signers/{quote_segment(params.signer_key)}"

        async def get_pox_cycles(params: PaginationParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v2/pox/cycles",
                "get PoX cycles",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_pox_cycle(params: CycleParams) -> Any:
            return await self.fetch(network, cycle_path(params), "get PoX cycle")

        async def get_cycle_signers(params: CycleSignersParams) -> Any:
            return await self.fetch(
                network,
                f"{cycle_path(params)}/signers",
                "get cycle signers",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_signer_details(params: SignerParams) -> Any:
            return await self.fetch(network, signer_path(params), "get signer details")

        async def get_signer_stackers(params: SignerStackersParams) -> Any:
            return await self.fetch(
                network,
                f"{signer_path(params)}/stackers",
                "get signer stackers",
                {"limit": params.limit, "offset": params.offset},
            )

        async def stack_stx(params: StackStxParams) -> Any:
            return await asyncio.to_thread(
                wallet.stack_stx,
                params.amount,
                params.cycles,
                params.pox_address,
                params.start_burn_height,
            )

        async def get_stacking_info(params: StackingInfoParams) -> Any:
            address = params.address or wallet.get_address()
            pox_info = await self.fetch(network, "/v2/pox", "get PoX info")
            stacker_info = await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(address)}/stx",
                "get stacking info",
            )
            return {
                "address": address,
                "network": network,
                "pox_info": pox_info,
                "stacker_info": stacker_info,
            }

        return [
            create_tool(
                "get_pox_cycles",
                "Get list of PoX cycles with stacking information",
                PaginationParams,
                get_pox_cycles,
            ),
            create_tool(
                "get_pox_cycle",
                "Get detailed information about a specific PoX cycle",
                CycleParams,
                get_pox_cycle,
            ),
            create_tool(
                "get_cycle_signers",
                "Get signers for a specific PoX cycle",
                CycleSignersParams,
                get_cycle_signers,
            ),
            create_tool(
                "get_signer_details",
                "Get detailed information about a specific signer in a PoX cycle",
                SignerParams,
                get_signer_details,
            ),
            create_tool(
                "get_signer_stackers",
                "Get stackers associated with a specific signer",
                SignerStackersParams,
                get_signer_stackers,
            ),
            create_tool(
                "stack_stx",
                "Stack STX tokens for a specified number of cycles",
                StackStxParams,
                stack_stx,
            ),
            create_tool(
                "get_stacking_info",
                "Get current stacking information for the wallet",
                StackingInfoParams,
                get_stacking_info,
            ),
        ]


def pox(api=None) -> PoxPlugin:
    return PoxPlugin(api)
