"""
Stacks transaction tools.

Implements:
- Transaction details by id
- Mempool, recent and per-address transaction listings
- STX transfers through the wallet client
"""

from __future__ import annotations

import asyncio
from typing import Any, Literal

from pydantic import Field, field_validator

from stx_api import quote_segment
from stx_tools import OptionalStr, PaginationParams, PluginBase, RequiredStr, StacksTool, ToolParams, create_tool
from stx_wallet import WalletClient

MAX_MEMO_BYTES = 34

TxType = Literal["coinbase", "token_transfer", "smart_contract", "contract_call", "poison_microblock"]


class TransactionParams(ToolParams):
    tx_id: RequiredStr = Field(description="Transaction ID (hex string)")
    event_limit: int = Field(96, ge=0, description="Maximum number of events to return")
    event_offset: int = Field(0, ge=0, description="Event offset for pagination")
    unanchored: bool = Field(False, description="Include unanchored transactions")


class MempoolParams(PaginationParams):
    sender_address: OptionalStr = Field(None, description="Filter by sender address")
    recipient_address: OptionalStr = Field(None, description="Filter by recipient address")
    address: OptionalStr = Field(None, description="Filter by address (sender or recipient)")


class RecentTransactionsParams(PaginationParams):
    type: TxType | None = Field(None, description="Filter by transaction type")


class AddressTransactionsParams(PaginationParams):
    address: RequiredStr = Field(description="Stacks address")
    unanchored: bool = Field(False, description="Include unanchored transactions")


class SendStxParams(ToolParams):
    recipient: RequiredStr = Field(description="Recipient Stacks address")
    amount: int = Field(gt=0, description="Amount to send, in micro-STX (1 STX = 1,000,000 uSTX)")
    memo: OptionalStr = Field(None, description="Optional memo message (max 34 bytes)")

    @field_validator("memo")
    @classmethod
    def _memo_fits(cls, value: str | None) -> str | None:
        if value and len(value.encode("utf-8")) > MAX_MEMO_BYTES:
            raise ValueError(f"memo must be at most {MAX_MEMO_BYTES} bytes")
        return value


class TransactionsPlugin(PluginBase):
    """Tools for querying and sending Stacks transactions."""

    name = "transactions"

    def get_tools(self, wallet: WalletClient) -> list[StacksTool]:
        network = wallet.get_network()

        async def get_transaction(params: TransactionParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/tx/{quote_segment(params.tx_id)}",
                "get transaction",
                {
                    "event_limit": params.event_limit,
                    "event_offset": params.event_offset,
                    "unanchored": params.unanchored,
                },
            )

        async def get_mempool_transactions(params: MempoolParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/tx/mempool",
                "get mempool transactions",
                {
                    "limit": params.limit,
                    "offset": params.offset,
                    "sender_address": params.sender_address or None,
                    "recipient_address": params.recipient_address or None,
                    "address": params.address or None,
                },
            )

        async def get_recent_transactions(params: RecentTransactionsParams) -> Any:
            return await self.fetch(
                network,
                "/extended/v1/tx",
                "get recent transactions",
                {"limit": params.limit, "offset": params.offset, "type": params.type},
            )

        async def get_address_transactions(params: AddressTransactionsParams) -> Any:
            return await self.fetch(
                network,
                f"/extended/v1/address/{quote_segment(params.address)}/transactions",
                "get address transactions",
                {"limit": params.limit, "offset": params.offset, "unanchored": params.unanchored},
            )

        async def send_stx(params: SendStxParams) -> Any:
            return await asyncio.to_thread(
                wallet.transfer_stx, params.recipient, params.amount, params.memo or None
            )

        return [
            create_tool(
                "get_transaction",
                "Get detailed information about a transaction by ID",
                TransactionParams,
                get_transaction,
            ),
            create_tool(
                "get_mempool_transactions",
                "Get transactions currently in the mempool",
                MempoolParams,
                get_mempool_transactions,
            ),
            create_tool(
                "get_recent_transactions",
                "Get list of recent transactions",
                RecentTransactionsParams,
                get_recent_transactions,
            ),
            create_tool(
                "get_address_transactions",
                "Get transactions for a specific address",
                AddressTransactionsParams,
                get_address_transactions,
            ),
            create_tool(
                "send_stx",
                "Send STX tokens to another address. Requires a signing wallet client.",
                SendStxParams,
                send_stx,
            ),
        ]


def transactions(api=None) -> TransactionsPlugin:
    return TransactionsPlugin(api)
