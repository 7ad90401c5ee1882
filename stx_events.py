"""
Transaction event tools.

Implements:
- Events of one transaction, optionally per address or event type
- Block transactions and address transactions with event summaries
- Raw transaction hex
- Contract log events and STX transfer history
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from stx_api import quote_segment
from stx_tools import ContractIdParams, OptionalStr, PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient

EventType = Literal[
    "stx_asset",
    "fungible_token_asset",
    "non_fungible_token_asset",
    "smart_contract_log",
    "stx_lock",
]


class TxEventsParams(PaginationParams):
    tx_id: RequiredStr = Field(description="Transaction ID")
    address: OptionalStr = Field(None, description="Filter events by address involvement")
    type: EventType | None = Field(None, description="Filter by event type")


class AddressTxEventsParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address")
    tx_id: RequiredStr = Field(description="Transaction ID")


class BlockTxsParams(PaginationParams):
    height_or_hash: RequiredStr = Field(description="Block height (number) or block hash")


class RawTxParams(ToolParams):
    tx_id: RequiredStr = Field(description="Transaction ID")
    event_limit: int = Field(96, ge=1, description="Maximum number of events to include")
    event_offset: int = Field(0, ge=0, description="Event offset for pagination")


class AddressTxsParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address")
    exclude_function_args: bool = Field(
        False, description="Exclude function arguments from contract calls"
    )


class ContractLogParams(ContractIdParams, PaginationParams):
    unanchored: bool = Field(False, description="Include unanchored events")


class StxTransferParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address")


def is_stx_transfer(tx: Any) -> bool:
    """True for token transfers and for transactions carrying an stx_asset event."""
    if not isinstance(tx, dict):
        return False
    if tx.get("tx_type") == "token_transfer":
        return True
    return any(
        isinstance(event, dict) and event.get("event_type") == "stx_asset"
        for event in tx.get("events") or []
    )


class EventsPlugin(PluginBase):
    """Tools for transaction and contract events."""

    name = "events"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def get_transaction_events(params: TxEventsParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/tx/events",
                "get transaction events",
                {
                    "tx_id": params.tx_id,
                    "address": params.address or None,
                    "type": params.type,
                    "limit": params.limit,
                    "offset": params.offset,
                },
            )

        async def get_address_transaction_events(params: AddressTxEventsParams) -> Any:
            address = quote_segment(params.address)
            tx_id = quote_segment(params.tx_id)
            return await self.fetch(
                network,
                f"/extended/v2/addresses/{address}/transactions/{tx_id}/events",
                "get address transaction events",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_block_transactions_detailed(params: BlockTxsParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v2/blocks/{quote_segment(params.height_or_hash)}/transactions",
                "get block transactions",
                {"limit": params.limit, "offset": params.offset},
            )

        async def get_raw_transaction(params: RawTxParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/tx/{quote_segment(params.tx_id)}/raw",
                "get raw transaction",
                {"event_limit": params.event_limit, "event_offset": params.event_offset},
            )

        async def get_address_transactions_with_events(params: AddressTxsParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v2/addresses/{quote_segment(params.address)}/transactions",
                "get address transactions",
                {
                    "limit": params.limit,
                    "offset": params.offset,
                    "exclude_function_args": params.exclude_function_args,
                },
            )

        async def get_contract_log_events(params: ContractLogParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/contract/{quote_segment(params.contract_id)}/events",
                "get contract events",
                {"limit": params.limit, "offset": params.offset, "unanchored": params.unanchored},
            )

        async def get_stx_transfer_events(params: StxTransferParams) -> Any:
            data = await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/transactions",
                "get STX transfer events",
                {"limit": params.limit, "offset": params.offset},
            )
            if not isinstance(data, dict):
                return data
            results = [tx for tx in data.get("results") or [] if is_stx_transfer(tx)]
            return {**data, "results": results}

        return [
            create_tool(
                "get_transaction_events",
                "Get events for a specific transaction with detailed filtering",
                TxEventsParams,
                get_transaction_events,
            ),
            create_tool(
                "get_address_transaction_events",
                "Get transaction events for a specific address and transaction",
                AddressTxEventsParams,
                get_address_transaction_events,
            ),
            create_tool(
                "get_block_transactions_detailed",
                "Get transactions in a block with detailed event information",
                BlockTxsParams,
                get_block_transactions_detailed,
            ),
            create_tool(
                "get_raw_transaction",
                "Get raw transaction data in hex format",
                RawTxParams,
                get_raw_transaction,
            ),
            create_tool(
                "get_address_transactions_with_events",
                "Get transactions for an address with event summaries and transfer info",
                AddressTxsParams,
                get_address_transactions_with_events,
            ),
            create_tool(
                "get_contract_log_events",
                "Get smart contract events for a specific contract",
                ContractLogParams,
                get_contract_log_events,
            ),
            create_tool(
                "get_stx_transfer_events",
                "Get STX transfer events for a specific address",
                StxTransferParams,
                get_stx_transfer_events,
            ),
        ]


def events(api=None) -> EventsPlugin:
    return EventsPlugin(api)
