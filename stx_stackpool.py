"""
Stacking pool and burnchain reward tools.

Implements:
- Delegations to a stacking pool
- Reward slot holders, overall and per Bitcoin address
- Burnchain rewards and reward totals per Bitcoin address
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from stx_api import quote_segment
from stx_tools import PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient


class DelegationsParams(PaginationParams):
    pool_principal: RequiredStr = Field(description="Pool principal address")
    after_block: int | None = Field(None, ge=0, description="Only include delegations after this block")
    height: int | None = Field(None, ge=0, description="Get delegations at specific block height")
    unanchored: bool = Field(True, description="Include unanchored transactions")


class BtcAddressParams(ToolParams):
    address: RequiredStr = Field(description="Bitcoin address to query")


class BtcAddressPageParams(BtcAddressParams, PaginationParams):
    pass


class StackpoolPlugin(PluginBase):
    """Tools for stacking pools and Bitcoin rewards."""

    name = "stackpool"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def page(path: str, action: str, params: PaginationParams) -> Any:
            return await self.fetch(
                network, path, action, {"limit": params.limit, "offset": params.offset}
            )

        async def get_pool_delegations(params: DelegationsParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/pox/{quote_segment(params.pool_principal)}/delegations",
                "get pool delegations",
                {
                    "limit": params.limit,
                    "offset": params.offset,
                    "unanchored": params.unanchored,
                    "after_block": params.after_block,
                    "height": params.height,
                },
            )

        async def get_burnchain_reward_slots(params: PaginationParams) -> Any:
            return await page(
                "/extended/v1/burnchain/reward_slot_holders", "get reward slot holders", params
            )

        async def get_address_reward_slots(params: BtcAddressPageParams) -> Any:
            return await page(
                f"/extended/v1/burnchain/reward_slot_holders/{quote_segment(params.address)}",
                "get address reward slots",
                params,
            )

        async def get_burnchain_rewards(params: PaginationParams) -> Any:
            return await page("/extended/v1/burnchain/rewards", "get burnchain rewards", params)

        async def get_address_burnchain_rewards(params: BtcAddressPageParams) -> Any:
            return await page(
                f"/extended/v1/burnchain/rewards/{quote_segment(params.address)}",
                "get address burnchain rewards",
                params,
            )

        async def get_total_burnchain_rewards(params: BtcAddressParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/burnchain/rewards/{quote_segment(params.address)}/total",
                "get total burnchain rewards",
            )

        return [
            create_tool(
                "get_pool_delegations",
                "Get stacking pool delegations for a pool principal",
                DelegationsParams,
                get_pool_delegations,
            ),
            create_tool(
                "get_burnchain_reward_slots",
                "Get burnchain reward slot holders (Bitcoin reward recipients)",
                PaginationParams,
                get_burnchain_reward_slots,
            ),
            create_tool(
                "get_address_reward_slots",
                "Get burnchain reward slots for a specific Bitcoin address",
                BtcAddressPageParams,
                get_address_reward_slots,
            ),
            create_tool(
                "get_burnchain_rewards",
                "Get burnchain rewards paid to Bitcoin addresses",
                PaginationParams,
                get_burnchain_rewards,
            ),
            create_tool(
                "get_address_burnchain_rewards",
                "Get burnchain rewards for a specific Bitcoin address",
                BtcAddressPageParams,
                get_address_burnchain_rewards,
            ),
            create_tool(
                "get_total_burnchain_rewards",
                "Get total burnchain rewards earned by a Bitcoin address",
                BtcAddressParams,
                get_total_burnchain_rewards,
            ),
        ]


def stackpool(api=None) -> StackpoolPlugin:
    return StackpoolPlugin(api)
