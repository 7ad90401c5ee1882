"""
SIP-009 non-fungible token tools.

Implements:
- NFT holdings, history and mint events
- Owner and token URI lookups through read-only calls
- NFT transfers through the wallet client
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from stx_api import quote_segment, split_contract_id
from stx_tools import OptionalStr, PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient

ASSET_ID_DESCRIPTION = "NFT asset identifier (format: address.contract-name::asset-name)"


class HoldingsParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address to query")
    asset_identifiers: list[str] = Field(
        default_factory=list, description="Filter by specific NFT asset identifiers"
    )
    unanchored: bool = Field(False, description="Include unanchored transactions")


class HistoryParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address to query")
    asset_identifier: OptionalStr = Field(None, description="Filter by specific NFT asset identifier")
    value: OptionalStr = Field(None, description="Filter by specific NFT value (hex representation)")
    unanchored: bool = Field(False, description="Include unanchored transactions")


class MintsParams(PaginationParams):
    asset_identifier: RequiredStr = Field(description=ASSET_ID_DESCRIPTION)
    unanchored: bool = Field(False, description="Include unanchored transactions")


class TokenParams(ToolParams):
    contract_id: RequiredStr = Field(description="NFT contract ID (format: address.contract-name)")
    token_id: int = Field(ge=0, description="Token ID of the NFT")


class TransferNftParams(TokenParams):
    asset_name: RequiredStr = Field(description="Asset name within the contract")
    recipient: RequiredStr = Field(description="Recipient Stacks address")


class WalletNftsParams(PaginationParams):
    limit: int = Field(50, ge=1, description="Number of NFTs to return")


class NftPlugin(PluginBase):
    """Tools for SIP-009 non-fungible tokens."""

    name = "nft"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def holdings(address: str, params: PaginationParams, **extra: Any) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(address)}/assets",
                "get NFT holdings",
                {"limit": params.limit, "offset": params.offset, **extra},
            )

        async def get_nft_holdings(params: HoldingsParams) -> Any:
            return await holdings(
                params.address,
                params,
                asset_identifiers=params.asset_identifiers or None,
                unanchored=params.unanchored,
            )

        async def get_nft_history(params: HistoryParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/nft_events",
                "get NFT history",
                {
                    "limit": params.limit,
                    "offset": params.offset,
                    "unanchored": params.unanchored,
                    "asset_identifier": params.asset_identifier or None,
                    "value": params.value or None,
                },
            )

        async def get_nft_mints(params: MintsParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/tokens/nft/mints",
                "get NFT mints",
                {
                    "asset_identifier": params.asset_identifier,
                    "limit": params.limit,
                    "offset": params.offset,
                    "unanchored": params.unanchored,
                },
            )

        async def get_nft_owner(params: TokenParams) -> Any:
            split_contract_id(params.contract_id)
            return await asyncio.to_thread(
                self.api.get_nft_owner, params.contract_id, params.token_id, network
            )

        async def get_nft_token_uri(params: TokenParams) -> Any:
            split_contract_id(params.contract_id)
            return await asyncio.to_thread(
                self.api.get_nft_token_uri, params.contract_id, params.token_id, network
            )

        async def transfer_nft(params: TransferNftParams) -> Any:
            contract_address, contract_name = split_contract_id(params.contract_id)
            return await asyncio.to_thread(
                wallet.transfer_nft,
                contract_address,
                contract_name,
                params.asset_name,
                params.token_id,
                params.recipient,
            )

        async def get_wallet_nfts(params: WalletNftsParams) -> Any:
            return await holdings(wallet.get_address(), params)

        return [
            create_tool(
                "get_nft_holdings",
                "Get NFT holdings for a specific address",
                HoldingsParams,
                get_nft_holdings,
            ),
            create_tool(
                "get_nft_history",
                "Get NFT transaction history for an address",
                HistoryParams,
                get_nft_history,
            ),
            create_tool(
                "get_nft_mints",
                "Get mint events for a specific NFT collection",
                MintsParams,
                get_nft_mints,
            ),
            create_tool(
                "get_nft_owner",
                "Get the current owner of a specific NFT",
                TokenParams,
                get_nft_owner,
            ),
            create_tool(
                "get_nft_token_uri",
                "Get the token URI/metadata for a specific NFT",
                TokenParams,
                get_nft_token_uri,
            ),
            create_tool(
                "transfer_nft",
                "Transfer an NFT to another address",
                TransferNftParams,
                transfer_nft,
            ),
            create_tool(
                "get_wallet_nfts",
                "Get all NFT holdings for the current wallet",
                WalletNftsParams,
                get_wallet_nfts,
            ),
        ]


def nft(api=None) -> NftPlugin:
    return NftPlugin(api)
