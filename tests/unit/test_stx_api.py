"""
Unit tests for the Hiro Stacks API client.

Tests cover:
- Network URL resolution and request headers
- Query parameter rendering and error mapping
- Read-only calls and SIP-010 balance/info lookups
"""

import sys
from pathlib import Path

import pytest
import requests

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from conftest import FakeResponse, FakeSession  # noqa: E402
from stx_api import StacksApiClient, quote_segment, split_contract_id  # noqa: E402
from stx_clarity import c32_address  # noqa: E402
from stx_config import STXConfig  # noqa: E402
from stx_errors import ConfigurationError, UpstreamRequestError, ValidationError  # noqa: E402

OWNER = c32_address(22, b"\x22" * 20)
TOKEN_CONTRACT = c32_address(22, b"\x33" * 20) + ".my-token"


def _uint_result(n, wrapper="07"):
    return {"okay": True, "result": "0x" + wrapper + "01" + n.to_bytes(16, "big").hex()}


def _string_result(text):
    body = text.encode("ascii")
    return {"okay": True, "result": "0x070d" + len(body).to_bytes(4, "big").hex() + body.hex()}


# ---------------------------------------------------------------------------
# URLs, headers, query strings
# ---------------------------------------------------------------------------


def test_get_api_url(api):
    assert api.get_api_url("mainnet") == "https://api.hiro.so"
    assert api.get_api_url("testnet") == "https://api.testnet.hiro.so"


def test_get_api_url_rejects_devnet(api):
    with pytest.raises(ConfigurationError):
        api.get_api_url("devnet")


def test_get_sends_json_accept_header_and_timeout(api, session):
    session.queue({"ok": 1})
    assert api.get("mainnet", "/extended/v1/block") == {"ok": 1}
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.hiro.so/extended/v1/block"
    assert call["headers"] == {"Accept": "application/json"}
    assert call["timeout"] == 15.0


def test_api_key_header():
    session = FakeSession()
    client = StacksApiClient(STXConfig(hiro_api_key="secret"), session=session)
    client.get("testnet", "/v2/info")
    assert session.calls[0]["headers"]["X-API-Key"] == "secret"
    assert session.calls[0]["url"].startswith("https://api.testnet.hiro.so")


def test_query_params_render_bools_and_drop_none(api, session):
    api.get("mainnet", "/x", {"unanchored": False, "limit": 20, "until_block": None})
    assert session.calls[0]["params"] == {"unanchored": "false", "limit": "20"}


def test_network_defaults_to_config(api, session):
    api.get(None, "/v2/info")
    assert session.calls[0]["url"] == "https://api.hiro.so/v2/info"


def test_non_ok_status_raises_upstream_error(api, session):
    session.queue({}, status_code=404, reason="Not Found")
    with pytest.raises(UpstreamRequestError) as excinfo:
        api.get("mainnet", "/extended/v1/tx/0xdead", action="get transaction")
    err = excinfo.value
    assert str(err) == "Failed to get transaction: Not Found"
    assert err.status_code == 404
    assert err.status_text == "Not Found"


def test_connection_error_raises_upstream_error(api, session):
    session.responses.append(requests.ConnectionError("boom"))
    with pytest.raises(UpstreamRequestError, match="Failed to get block: boom"):
        api.get("mainnet", "/extended/v1/block/0x1", action="get block")


def test_invalid_json_raises_upstream_error(api, session):
    session.responses.append(FakeResponse(ValueError("bad json")))
    with pytest.raises(UpstreamRequestError, match="not valid JSON"):
        api.get("mainnet", "/v2/info")


def test_split_contract_id():
    assert split_contract_id("SP000.my-token") == ("SP000", "my-token")
    for bad in ("no-dot", ".name", "SP000.", ""):
        with pytest.raises(ValidationError):
            split_contract_id(bad)


# ---------------------------------------------------------------------------
# Read-only calls
# ---------------------------------------------------------------------------


def test_call_read_only_function_posts_serialized_args(api, session):
    session.queue({"okay": True, "result": "0x03"})
    result = api.call_read_only_function(
        "SP000.pool", "get-info", ["u1", "0xdead"], "mainnet", sender_address="SPSENDER"
    )
    assert result == {"okay": True, "result": "0x03"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.hiro.so/v2/contracts/call-read/SP000/pool/get-info"
    assert call["json"] == {
        "sender": "SPSENDER",
        "arguments": ["0x01" + "00" * 15 + "01", "0xdead"],
    }


def test_call_read_only_function_sender_defaults_to_contract_address(api, session):
    api.call_read_only_function("SP000.pool", "get-info")
    assert session.calls[0]["json"] == {"sender": "SP000", "arguments": []}


def test_call_read_only_function_invalid_contract_id(api, session):
    with pytest.raises(ValidationError):
        api.call_read_only_function("pool", "get-info")
    assert session.calls == []


# ---------------------------------------------------------------------------
# SIP-010
# ---------------------------------------------------------------------------


def test_get_fungible_token_balance(api, session):
    session.queue(_uint_result(1500))
    result = api.get_fungible_token_balance(OWNER, TOKEN_CONTRACT + "::my-token", "mainnet")
    assert result == {
        "address": OWNER,
        "token_id": TOKEN_CONTRACT + "::my-token",
        "contract_id": TOKEN_CONTRACT,
        "balance": "1500",
    }
    call = session.calls[0]
    assert call["url"].endswith(f"/v2/contracts/call-read/{TOKEN_CONTRACT.replace('.', '/')}/get-balance")
    assert call["json"]["sender"] == OWNER
    assert call["json"]["arguments"] == ["0x0516" + "22" * 20]


def test_get_fungible_token_balance_failed_call(api, session):
    session.queue({"okay": False, "cause": "NoSuchContract"})
    with pytest.raises(UpstreamRequestError, match="NoSuchContract"):
        api.get_fungible_token_balance(OWNER, TOKEN_CONTRACT, "mainnet")


def test_get_fungible_token_balance_invalid_address(api, session):
    with pytest.raises(ValidationError):
        api.get_fungible_token_balance("nope", TOKEN_CONTRACT, "mainnet")
    assert session.calls == []


def test_get_fungible_token_info(api, session):
    session.queue(_string_result("My Token"))
    session.queue(_string_result("MYT"))
    session.queue(_uint_result(6))
    session.queue(_uint_result(1000000))
    session.queue({"okay": True, "result": "0x070a0d00000003" + b"u:/".hex()})

    info = api.get_fungible_token_info(TOKEN_CONTRACT, "mainnet")
    assert info == {
        "contract_id": TOKEN_CONTRACT,
        "name": "My Token",
        "symbol": "MYT",
        "decimals": 6,
        "total_supply": "1000000",
        "token_uri": "u:/",
    }
    functions = [c["url"].rsplit("/", 1)[1] for c in session.calls]
    assert functions == ["get-name", "get-symbol", "get-decimals", "get-total-supply", "get-token-uri"]


def test_get_fungible_token_info_defaults(api, session):
    for _ in range(5):
        session.queue({"okay": False, "cause": "err"})
    info = api.get_fungible_token_info(TOKEN_CONTRACT, "mainnet")
    assert info["name"] == "Unknown"
    assert info["symbol"] == "Unknown"
    assert info["decimals"] == 0
    assert info["total_supply"] == "0"
    assert info["token_uri"] is None


def test_get_fungible_token_info_http_failure_aborts(api, session):
    session.queue(_string_result("My Token"))
    session.queue({}, status_code=500, reason="Internal Server Error")
    with pytest.raises(UpstreamRequestError):
        api.get_fungible_token_info(TOKEN_CONTRACT, "mainnet")
    assert len(session.calls) == 2


# ---------------------------------------------------------------------------
# Network info
# ---------------------------------------------------------------------------


def test_get_current_block_height(api, session):
    session.queue({"stacks_tip_height": 150000, "burn_block_height": 800000})
    assert api.get_current_block_height("mainnet") == 150000
    assert session.calls[0]["url"] == "https://api.hiro.so/v2/info"


def test_get_current_block_height_rejects_non_object_body(api, session):
    session.queue([1, 2])
    with pytest.raises(UpstreamRequestError, match="Failed to get current block height"):
        api.get_current_block_height("mainnet")


def test_get_current_block_height_missing_tip(api, session):
    session.queue({"burn_block_height": 800000})
    with pytest.raises(UpstreamRequestError, match="Failed to get current block height"):
        api.get_current_block_height("mainnet")


# ---------------------------------------------------------------------------
# SIP-009 lookups and path escaping
# ---------------------------------------------------------------------------


def test_get_nft_owner(api, session):
    session.queue({"okay": True, "result": "0x070a0516" + "22" * 20})
    result = api.get_nft_owner(TOKEN_CONTRACT, 7, "mainnet")
    assert result == {"contract_id": TOKEN_CONTRACT, "token_id": 7, "owner": OWNER}
    call = session.calls[0]
    assert call["url"].endswith("/my-token/get-owner")
    assert call["json"]["arguments"] == ["0x01" + (7).to_bytes(16, "big").hex()]


def test_get_nft_owner_unminted_token(api, session):
    session.queue({"okay": True, "result": "0x0709"})
    assert api.get_nft_owner(TOKEN_CONTRACT, 7, "mainnet")["owner"] is None


def test_get_nft_token_uri(api, session):
    session.queue({"okay": True, "result": "0x070a0d00000003" + b"u:/".hex()})
    result = api.get_nft_token_uri(TOKEN_CONTRACT, 1, "mainnet")
    assert result["token_uri"] == "u:/"
    assert session.calls[0]["url"].endswith("/my-token/get-token-uri")


def test_call_read_only_function_escapes_path(api, session):
    api.call_read_only_function("SP000.pool", "get?x=1", [], "mainnet")
    assert session.calls[0]["url"] == (
        "https://api.hiro.so/v2/contracts/call-read/SP000/pool/get%3Fx%3D1"
    )


def test_quote_segment_keeps_asset_separator():
    assert quote_segment("SP000.tok::tok") == "SP000.tok::tok"
    assert quote_segment("a/b#c") == "a%2Fb%23c"
