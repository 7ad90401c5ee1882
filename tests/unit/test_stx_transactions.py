"""
Unit tests for the transaction tools.
"""

import asyncio
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

import stx_transactions  # noqa: E402
from stx_config import STXConfig  # noqa: E402
from stx_errors import ConfigurationError, ValidationError  # noqa: E402
from stx_wallet import HiroWalletClient  # noqa: E402


def _tool(api, wallet, name):
    tools = {t.name: t for t in stx_transactions.transactions(api).get_tools(wallet)}
    return tools[name]


def test_get_transaction_defaults(api, session, wallet):
    session.queue({"tx_id": "0xabc", "tx_status": "success"})
    tool = _tool(api, wallet, "get_transaction")
    result = asyncio.run(tool.run({"tx_id": "0xabc"}))
    assert result["tx_status"] == "success"
    call = session.calls[0]
    assert call["url"] == "https://api.hiro.so/extended/v1/tx/0xabc"
    assert call["params"] == {"event_limit": "96", "event_offset": "0", "unanchored": "false"}


def test_get_mempool_transactions_filters(api, session, wallet):
    tool = _tool(api, wallet, "get_mempool_transactions")
    asyncio.run(tool.run({"sender_address": "SP1"}))
    call = session.calls[0]
    assert call["url"].endswith("/extended/v1/tx/mempool")
    assert call["params"] == {"limit": "20", "offset": "0", "sender_address": "SP1"}


def test_get_recent_transactions_type_filter(api, session, wallet):
    tool = _tool(api, wallet, "get_recent_transactions")
    asyncio.run(tool.run({"type": "contract_call", "limit": 5}))
    assert session.calls[0]["params"] == {"limit": "5", "offset": "0", "type": "contract_call"}


def test_get_recent_transactions_unknown_type(api, session, wallet):
    tool = _tool(api, wallet, "get_recent_transactions")
    with pytest.raises(ValidationError):
        asyncio.run(tool.run({"type": "airdrop"}))
    assert session.calls == []


def test_get_address_transactions(api, session, wallet):
    tool = _tool(api, wallet, "get_address_transactions")
    asyncio.run(tool.run({"address": "SP123"}))
    call = session.calls[0]
    assert call["url"].endswith("/extended/v1/address/SP123/transactions")
    assert call["params"] == {"limit": "20", "offset": "0", "unanchored": "false"}


def test_send_stx_uses_wallet(api, session, wallet):
    tool = _tool(api, wallet, "send_stx")
    result = asyncio.run(tool.run({"recipient": "SPRECIPIENT", "amount": 1000, "memo": "thanks"}))
    assert result == {"txid": "0xstx"}
    assert wallet.transfers == [
        {"kind": "stx", "recipient": "SPRECIPIENT", "amount": 1000, "memo": "thanks"}
    ]
    assert session.calls == []


def test_send_stx_memo_too_long(api, wallet):
    tool = _tool(api, wallet, "send_stx")
    with pytest.raises(ValidationError, match="memo"):
        asyncio.run(tool.run({"recipient": "SPRECIPIENT", "amount": 1, "memo": "x" * 35}))
    assert wallet.transfers == []


def test_send_stx_missing_amount(api, wallet):
    tool = _tool(api, wallet, "send_stx")
    with pytest.raises(ValidationError, match="amount"):
        asyncio.run(tool.run({"recipient": "SPRECIPIENT"}))


def test_send_stx_read_only_wallet(api, session):
    wallet = HiroWalletClient(STXConfig(network="mainnet", stx_address="SP123"), api)
    tool = _tool(api, wallet, "send_stx")
    with pytest.raises(ConfigurationError, match="read-only"):
        asyncio.run(tool.run({"recipient": "SPRECIPIENT", "amount": 1}))
    assert session.calls == []
