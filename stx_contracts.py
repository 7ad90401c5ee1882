"""
Smart contract tools.

Implements:
- Contract deployment status and details (source, ABI)
- Contracts implementing a trait
- Contract event history
- Read-only contract function calls
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from stx_api import quote_segment
from stx_errors import ConfigurationError
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


class TraitParams(PaginationParams):
    trait_abi: RequiredStr = Field(description="Trait ABI definition in JSON format")


class ContractEventsParams(PaginationParams):
    contract_id: RequiredStr = Field(
        description="Smart contract ID (format: address.contract-name)"
    )


class ReadOnlyCallParams(ToolParams):
    contract_address: RequiredStr = Field(description="Contract deployer address")
    contract_name: RequiredStr = Field(description="Contract name")
    function_name: RequiredStr = Field(description="Function name to call")
    function_args: list[str] = Field(
        default_factory=list,
        description=(
            "Function arguments as Clarity literals (u100, 'SP..., true, \"text\") "
            "or hex-serialized values (0x...)"
        ),
    )
    sender: OptionalStr = Field(None, description="Sender address (defaults to wallet address)")


def _default_sender(wallet: WalletClient) -> str | None:
    """Wallet address, or None to let the contract address stand in as sender."""
    try:
        return wallet.get_address()
    except ConfigurationError:
        return None


class ContractsPlugin(PluginBase):
    """Tools for interacting with Stacks smart contracts."""

    name = "contracts"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def get_contract_status(params: ContractIdParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v2/smart-contracts/status",
                "get contract status",
                {"contract_id": params.contract_id},
            )

        async def get_contract(params: ContractIdParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/contract/{quote_segment(params.contract_id)}",
                "get contract",
            )

        async def list_contracts_by_trait(params: TraitParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/contract/by_trait",
                "list contracts by trait",
                {"trait_abi": params.trait_abi, "limit": params.limit, "offset": params.offset},
            )

        async def get_contract_events(params: ContractEventsParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/contract/{quote_segment(params.contract_id)}/events",
                "get contract events",
                {"limit": params.limit, "offset": params.offset},
            )

        async def call_read_only_function(params: ReadOnlyCallParams) -> Any:
            contract_id = f"{params.contract_address}.{params.contract_name}"
            sender = params.sender or _default_sender(wallet)
            result = await asyncio.to_thread(
                self.api.call_read_only_function,
                contract_id,
                params.function_name,
                params.function_args,
                network,
                sender,
            )
            await Analytics.read_only_function_called(network, contract_id)
            return result

        return [
            create_tool(
                "get_contract_status",
                "Get the deployment status of a smart contract",
                ContractIdParams,
                get_contract_status,
            ),
            create_tool(
                "get_contract",
                "Get detailed information about a smart contract including source code and ABI",
                ContractIdParams,
                get_contract,
            ),
            create_tool(
                "list_contracts_by_trait",
                "List contracts that implement a specific trait",
                TraitParams,
                list_contracts_by_trait,
            ),
            create_tool(
                "get_contract_events",
                "Get events emitted by a smart contract",
                ContractEventsParams,
                get_contract_events,
            ),
            create_tool(
                "call_read_only_function",
                "Call a read-only function on a smart contract",
                ReadOnlyCallParams,
                call_read_only_function,
            ),
        ]


def contracts(api=None) -> ContractsPlugin:
    return ContractsPlugin(api)
