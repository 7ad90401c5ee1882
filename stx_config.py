"""
Configuration for the Stacks tool server.

Settings come from environment variables (the MCP server loads `.env` first).
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Literal

from stx_errors import ConfigurationError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HIRO_MAINNET = "https://api.hiro.so"
HIRO_TESTNET = "https://api.testnet.hiro.so"

DEFAULT_TIMEOUT_SECONDS = 15.0

STXNetwork = Literal["mainnet", "testnet"]
SUPPORTED_NETWORKS = ("mainnet", "testnet")

_TRUTHY = ("true", "1", "yes", "on")


# ---------------------------------------------------------------------------
# Environment flags
# ---------------------------------------------------------------------------


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def is_development() -> bool:
    return os.getenv("NODE_ENV", "").lower() == "development"


def debug_logs_enabled() -> bool:
    """Debug output is on with DEBUG=true or in a development environment."""
    return _env_flag("DEBUG") or is_development()


def telemetry_enabled() -> bool:
    return not _env_flag("DISABLE_TELEMETRY")


def normalize_network(raw: str) -> STXNetwork:
    """Lower-case and validate a network selector."""
    network = (raw or "").strip().lower()
    if network not in SUPPORTED_NETWORKS:
        raise ConfigurationError(
            f"Unsupported network: {raw}. Supported: {', '.join(SUPPORTED_NETWORKS)}"
        )
    return network  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class STXConfig:
    """Configuration for Stacks API access."""

    network: STXNetwork = "testnet"
    mainnet_api_url: str = HIRO_MAINNET
    testnet_api_url: str = HIRO_TESTNET
    hiro_api_key: str | None = None
    stx_address: str | None = None
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> STXConfig:
        """Build STXConfig from environment variables."""
        network = normalize_network(os.getenv("STACKS_NETWORK", "testnet"))

        raw_timeout = os.getenv("STACKS_API_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid STACKS_API_TIMEOUT: {raw_timeout}. Must be a number of seconds."
            ) from exc

        return cls(
            network=network,
            mainnet_api_url=os.getenv("STACKS_MAINNET_API_URL", HIRO_MAINNET).rstrip("/"),
            testnet_api_url=os.getenv("STACKS_TESTNET_API_URL", HIRO_TESTNET).rstrip("/"),
            hiro_api_key=os.getenv("HIRO_API_KEY") or None,
            stx_address=(os.getenv("STX_ADDRESS") or "").strip() or None,
            request_timeout=timeout,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Send log output to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
