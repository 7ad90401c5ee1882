"""
Hiro Stacks API client.

Implements:
- Network base URL resolution (mainnet / testnet)
- GET and POST requests with JSON headers and uniform error mapping
- Read-only contract calls
- SIP-010 fungible token balance and info lookups
- SIP-009 owner and token URI lookups
- Core node info (/v2/info)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from stx_clarity import (
    ClarityWrapped,
    deserialize_clarity_value,
    encode_function_args,
    principal_arg,
    unwrap_clarity_value,
)
from stx_config import STXConfig
from stx_errors import ConfigurationError, UpstreamRequestError, ValidationError

logger = logging.getLogger(__name__)


def _query_value(value: Any) -> Any:
    """Render a query parameter in its natural textual form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    return str(value)


def _query_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {key: _query_value(value) for key, value in params.items() if value is not None}


def quote_segment(value: Any) -> str:
    """Escape a value for use as one URL path segment."""
    return quote(str(value), safe=".:")


def split_contract_id(contract_id: str) -> tuple[str, str]:
    """Split 'address.contract-name' into its two parts."""
    address, sep, name = (contract_id or "").strip().partition(".")
    if not sep or not address or not name:
        raise ValidationError(
            f"Invalid contract ID: {contract_id!r}. Expected format 'address.contract-name'."
        )
    return address, name


class StacksApiClient:
    """Thin client for the Hiro Stacks Blockchain API."""

    def __init__(self, cfg: STXConfig, session: requests.Session | None = None) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> StacksApiClient:
        return cls(STXConfig.from_env())

    # -----------------------------------------------------------------------
    # Request helpers
    # -----------------------------------------------------------------------

    def get_api_url(self, network: str) -> str:
        """Base URL for the given network."""
        if network == "mainnet":
            return self.cfg.mainnet_api_url
        if network == "testnet":
            return self.cfg.testnet_api_url
        raise ConfigurationError(f"Unsupported network: {network}")

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.cfg.hiro_api_key:
            headers["X-API-Key"] = self.cfg.hiro_api_key
        return headers

    def _request(
        self,
        method: str,
        network: str | None,
        path: str,
        action: str,
        params: dict[str, Any] | None = None,
        payload: Any = None,
    ) -> Any:
        url = f"{self.get_api_url(network or self.cfg.network)}{path}"
        query = _query_params(params)
        logger.debug("%s %s params=%s", method, url, query)

        try:
            resp = self.session.request(
                method,
                url,
                params=query,
                json=payload,
                headers=self._headers(),
                timeout=self.cfg.request_timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamRequestError(f"Failed to {action}: {exc}", url=url) from exc

        if not resp.ok:
            logger.debug("%s %s -> %s %s", method, url, resp.status_code, resp.reason)
            raise UpstreamRequestError(
                f"Failed to {action}: {resp.reason}",
                status_code=resp.status_code,
                status_text=resp.reason,
                url=url,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamRequestError(
                f"Failed to {action}: response is not valid JSON",
                status_code=resp.status_code,
                url=url,
            ) from exc

    def get(
        self,
        network: str | None,
        path: str,
        params: dict[str, Any] | None = None,
        action: str = "query the Stacks API",
    ) -> Any:
        """GET request to the Stacks API; returns the decoded JSON body as-is."""
        return self._request("GET", network, path, action, params=params)

    def post(
        self,
        network: str | None,
        path: str,
        payload: Any,
        action: str = "query the Stacks API",
    ) -> Any:
        """POST a JSON body to the Stacks API."""
        return self._request("POST", network, path, action, payload=payload)

    # -----------------------------------------------------------------------
    # Contracts
    # -----------------------------------------------------------------------

    def call_read_only_function(
        self,
        contract_id: str,
        function_name: str,
        function_args: list[str] | None = None,
        network: str | None = None,
        sender_address: str | None = None,
    ) -> Any:
        """
        Read-only call to a Clarity contract function (no transaction needed).

        function_args are Clarity literals ("u100", "'SP...", "true") or
        already-serialized hex values ("0x01...").
        """
        contract_address, contract_name = split_contract_id(contract_id)
        path = "/".join(
            quote_segment(part) for part in (contract_address, contract_name, function_name)
        )
        return self.post(
            network,
            f"/v2/contracts/call-read/{path}",
            payload={
                "sender": sender_address or contract_address,
                "arguments": encode_function_args(function_args or []),
            },
            action="call read-only function",
        )

    # -----------------------------------------------------------------------
    # SIP-010 fungible tokens
    # -----------------------------------------------------------------------

    @staticmethod
    def _read_only_value(result: Any) -> Any:
        """Decoded value of a successful read-only call, or None."""
        if not isinstance(result, dict) or not result.get("okay") or not result.get("result"):
            return None
        try:
            value = deserialize_clarity_value(result["result"])
        except ValueError as exc:
            raise UpstreamRequestError(f"Undecodable Clarity result: {result['result']}") from exc
        if isinstance(value, ClarityWrapped) and value.kind == "err":
            return None
        return unwrap_clarity_value(value)

    def get_fungible_token_balance(
        self,
        address: str,
        token_id: str,
        network: str | None = None,
    ) -> dict[str, Any]:
        """
        SIP-010 balance of an address.

        token_id format: address.contract-name or address.contract-name::asset-name
        """
        contract_id = token_id.split("::", 1)[0]
        try:
            owner = principal_arg(address)
        except ValueError as exc:
            raise ValidationError(f"Invalid Stacks address: {address}") from exc

        result = self.call_read_only_function(
            contract_id,
            "get-balance",
            [owner],
            network,
            sender_address=address,
        )
        balance = self._read_only_value(result)
        if balance is None:
            raise UpstreamRequestError(
                "Failed to get fungible token balance: "
                f"{result.get('cause') if isinstance(result, dict) else result}"
            )
        return {
            "address": address,
            "token_id": token_id,
            "contract_id": contract_id,
            "balance": str(balance),
        }

    def get_fungible_token_info(
        self,
        contract_id: str,
        network: str | None = None,
    ) -> dict[str, Any]:
        """
        SIP-010 token information: name, symbol, decimals, total supply, URI.

        Any failed request aborts the lookup.
        """
        values = {}
        for function_name in (
            "get-name",
            "get-symbol",
            "get-decimals",
            "get-total-supply",
            "get-token-uri",
        ):
            result = self.call_read_only_function(contract_id, function_name, [], network)
            values[function_name] = self._read_only_value(result)

        name = values["get-name"]
        symbol = values["get-symbol"]
        decimals = values["get-decimals"]
        supply = values["get-total-supply"]
        return {
            "contract_id": contract_id,
            "name": name if name is not None else "Unknown",
            "symbol": symbol if symbol is not None else "Unknown",
            "decimals": decimals if isinstance(decimals, int) else 0,
            "total_supply": str(supply) if supply is not None else "0",
            "token_uri": values["get-token-uri"],
        }

    # -----------------------------------------------------------------------
    # SIP-009 non-fungible tokens
    # -----------------------------------------------------------------------

    def _nft_lookup(
        self, contract_id: str, function_name: str, token_id: int, network: str | None
    ) -> Any:
        result = self.call_read_only_function(contract_id, function_name, [f"u{token_id}"], network)
        return self._read_only_value(result)

    def get_nft_owner(
        self, contract_id: str, token_id: int, network: str | None = None
    ) -> dict[str, Any]:
        """Current owner of a SIP-009 token; owner is None for unminted or burned tokens."""
        owner = self._nft_lookup(contract_id, "get-owner", token_id, network)
        return {"contract_id": contract_id, "token_id": token_id, "owner": owner}

    def get_nft_token_uri(
        self, contract_id: str, token_id: int, network: str | None = None
    ) -> dict[str, Any]:
        token_uri = self._nft_lookup(contract_id, "get-token-uri", token_id, network)
        return {"contract_id": contract_id, "token_id": token_id, "token_uri": token_uri}

    # -----------------------------------------------------------------------
    # Network information
    # -----------------------------------------------------------------------

    def get_network_info(self, network: str | None = None) -> Any:
        return self.get(network, "/v2/info", action="get network info")

    def get_current_block_height(self, network: str | None = None) -> int:
        info = self.get_network_info(network)
        if not isinstance(info, dict) or info.get("stacks_tip_height") is None:
            raise UpstreamRequestError(
                f"Failed to get current block height: unexpected /v2/info response {info!r}"
            )
        return info["stacks_tip_height"]
