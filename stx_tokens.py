"""
SIP-010 fungible token tools.

Implements:
- Token holders, metadata and on-chain info (name, symbol, decimals, supply)
- Balance of one token or all tokens for an address
- Token transfers through the wallet client
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from stx_api import quote_segment, split_contract_id
from stx_telemetry import Analytics
from stx_tools import (
    ContractIdParams,
    OptionalStr,
    PaginationParams,
    PluginBase,
    RequiredStr,
    StacksTool,
    ToolParams,
    create_tool,
)
from stx_wallet import WalletClient

TOKEN_ID_DESCRIPTION = "Fungible token identifier (format: address.contract-name::asset-name)"


class TokenHoldersParams(PaginationParams):
    token_id: RequiredStr = Field(description=TOKEN_ID_DESCRIPTION)


class TokenBalanceParams(ToolParams):
    address: RequiredStr = Field(description="Stacks address to query")
    token_id: RequiredStr = Field(description=TOKEN_ID_DESCRIPTION)


class AddressBalancesParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address to query")


class TransferParams(ToolParams):
    contract_id: RequiredStr = Field(description="Token contract ID (format: address.contract-name)")
    asset_name: RequiredStr = Field(description="Asset name within the contract")
    recipient: RequiredStr = Field(description="Recipient Stacks address")
    amount: int = Field(gt=0, description="Amount to transfer, in the token's base units")
    memo: OptionalStr = Field(None, description="Optional memo message")


class TokensPlugin(PluginBase):
    """Tools for SIP-010 fungible tokens."""

    name = "tokens"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def get_ft_holders(params: TokenHoldersParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/tokens/ft/{quote_segment(params.token_id)}/holders",
                "get FT holders",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_ft_metadata(params: ContractIdParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/tokens/ft/{quote_segment(params.contract_id)}",
                "get FT metadata",
            )

        async def get_ft_balance(params: TokenBalanceParams) -> Any:
            result = await asyncio.to_thread(
                self.api.get_fungible_token_balance, params.address, params.token_id, network
            )
            await Analytics.sip010_balance_checked(network, result["contract_id"])
            return result

        async def get_address_ft_balances(params: AddressBalancesParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/assets",
                "get address FT balances",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_ft_info(params: ContractIdParams) -> Any:
            split_contract_id(params.contract_id)
            return await asyncio.to_thread(
                self.api.get_fungible_token_info, params.contract_id, network
            )

        async def transfer_ft(params: TransferParams) -> Any:
            contract_address, contract_name = split_contract_id(params.contract_id)
            return await asyncio.to_thread(
                wallet.transfer_fungible_token,
                contract_address,
                contract_name,
                params.asset_name,
                params.recipient,
                params.amount,
                params.memo or None,
            )

        return [
            create_tool(
                "get_ft_holders",
                "Get list of holders for a fungible token",
                TokenHoldersParams,
                get_ft_holders,
            ),
            create_tool(
                "get_ft_metadata",
                "Get metadata for a fungible token",
                ContractIdParams,
                get_ft_metadata,
            ),
            create_tool(
                "get_ft_balance",
                "Get fungible token balance for a specific address",
                TokenBalanceParams,
                get_ft_balance,
            ),
            create_tool(
                "get_address_ft_balances",
                "Get all fungible token balances for an address",
                AddressBalancesParams,
                get_address_ft_balances,
            ),
            create_tool(
                "get_ft_info",
                "Get comprehensive information about a fungible token including name, symbol, decimals",
                ContractIdParams,
                get_ft_info,
            ),
            create_tool(
                "transfer_ft",
                "Transfer fungible tokens to another address",
                TransferParams,
                transfer_ft,
            ),
        ]


def tokens(api=None) -> TokensPlugin:
    return TokensPlugin(api)
