"""Shared fakes for the Stacks tool tests: HTTP session, API client and wallet."""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from stx_api import StacksApiClient  # noqa: E402
from stx_config import STXConfig  # noqa: E402

WALLET_ADDRESS = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, reason="OK"):
        self._payload = payload if payload is not None else {}
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records requests and answers them from a queue (default: empty JSON object)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, payload=None, status_code=200, reason="OK"):
        self.responses.append(FakeResponse(payload, status_code, reason))

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "json": json,
                "headers": headers,
                "timeout": timeout,
            }
        )
        if not self.responses:
            return FakeResponse({})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeWallet:
    def __init__(self, address=WALLET_ADDRESS, network="mainnet", balance=1000000):
        self.address = address
        self.network = network
        self.balance = balance
        self.transfers = []

    def get_address(self):
        return self.address

    def get_network(self):
        return self.network

    def get_balance(self):
        return self.balance

    def transfer_fungible_token(
        self, contract_address, contract_name, asset_name, recipient, amount, memo=None
    ):
        self.transfers.append(
            {
                "kind": "ft",
                "contract_address": contract_address,
                "contract_name": contract_name,
                "asset_name": asset_name,
                "recipient": recipient,
                "amount": amount,
                "memo": memo,
            }
        )
        return {"txid": "0xft"}

    def transfer_nft(self, contract_address, contract_name, asset_name, token_id, recipient):
        self.transfers.append(
            {
                "kind": "nft",
                "contract_address": contract_address,
                "contract_name": contract_name,
                "asset_name": asset_name,
                "token_id": token_id,
                "recipient": recipient,
            }
        )
        return {"txid": "0xnft"}

    def transfer_stx(self, recipient, amount, memo=None):
        self.transfers.append(
            {"kind": "stx", "recipient": recipient, "amount": amount, "memo": memo}
        )
        return {"txid": "0xstx"}

    def stack_stx(self, amount, cycles, pox_address, start_burn_height=None):
        self.transfers.append(
            {
                "kind": "stack",
                "amount": amount,
                "cycles": cycles,
                "pox_address": pox_address,
                "start_burn_height": start_burn_height,
            }
        )
        return {"txid": "0xstack"}


@pytest.fixture(autouse=True)
def _quiet_env(monkeypatch):
    for name in ("DEBUG", "NODE_ENV", "DISABLE_TELEMETRY", "STACKS_NETWORK", "HIRO_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def cfg():
    return STXConfig(network="mainnet", stx_address=WALLET_ADDRESS)


@pytest.fixture
def api(cfg, session):
    return StacksApiClient(cfg, session=session)


@pytest.fixture
def wallet():
    return FakeWallet()
