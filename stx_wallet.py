"""
Stacks wallet client interface.

Implements:
- WalletClient protocol consumed by the tool plugins
- HiroWalletClient: read-only wallet for a configured address (STX_ADDRESS)

Key management and signing live outside this package; a host that needs
transfers injects its own WalletClient.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from stx_api import StacksApiClient, quote_segment
from stx_config import STXConfig
from stx_errors import ConfigurationError

logger = logging.getLogger(__name__)


@runtime_checkable
class WalletClient(Protocol):
    """Capabilities the plugins expect from a wallet."""

    def get_address(self) -> str: ...

    def get_network(self) -> str: ...

    def get_balance(self) -> Any: ...

    def transfer_fungible_token(
        self,
        contract_address: str,
        contract_name: str,
        asset_name: str,
        recipient: str,
        amount: int,
        memo: str | None = None,
    ) -> Any: ...

    def transfer_nft(
        self,
        contract_address: str,
        contract_name: str,
        asset_name: str,
        token_id: int,
        recipient: str,
    ) -> Any: ...

    def transfer_stx(self, recipient: str, amount: int, memo: str | None = None) -> Any: ...

    def stack_stx(
        self,
        amount: int,
        cycles: int,
        pox_address: str,
        start_burn_height: int | None = None,
    ) -> Any: ...


class HiroWalletClient:
    """Wallet backed by a configured address; balances come from the Hiro API."""

    def __init__(self, cfg: STXConfig, api: StacksApiClient | None = None) -> None:
        self.cfg = cfg
        self.api = api or StacksApiClient(cfg)

    def get_address(self) -> str:
        if not self.cfg.stx_address:
            raise ConfigurationError(
                "STX_ADDRESS is required for wallet operations. "
                "Set it in your environment or .env file."
            )
        return self.cfg.stx_address

    def get_network(self) -> str:
        return self.cfg.network

    def get_balance(self) -> int:
        """STX balance of the wallet address, in micro-STX."""
        address = self.get_address()
        data = self.api.get(
            self.cfg.network,
            f"/extended/v1/address/{quote_segment(address)}/stx",
            action="get wallet balance",
        )
        return int(data.get("balance", 0))

    def _signing_unavailable(self, operation: str) -> ConfigurationError:
        logger.warning("Rejected %s: wallet %s is read-only", operation, self.cfg.stx_address)
        return ConfigurationError(
            f"Cannot {operation}: this wallet is read-only. "
            "Provide a signing wallet client to enable transfers."
        )

    def transfer_fungible_token(
        self,
        contract_address: str,
        contract_name: str,
        asset_name: str,
        recipient: str,
        amount: int,
        memo: str | None = None,
    ) -> Any:
        raise self._signing_unavailable("transfer fungible tokens")

    def transfer_nft(
        self,
        contract_address: str,
        contract_name: str,
        asset_name: str,
        token_id: int,
        recipient: str,
    ) -> Any:
        raise self._signing_unavailable("transfer NFTs")

    def transfer_stx(self, recipient: str, amount: int, memo: str | None = None) -> Any:
        raise self._signing_unavailable("transfer STX")

    def stack_stx(
        self,
        amount: int,
        cycles: int,
        pox_address: str,
        start_burn_height: int | None = None,
    ) -> Any:
        raise self._signing_unavailable("stack STX")
