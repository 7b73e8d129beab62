"""
Oracle configuration.

Settings are read once at process start (optionally from a ``.env`` file)
and are immutable afterwards.  Missing or invalid required settings raise
``ConfigurationError``; the process must not start.

Environment variables
---------------------
EMERGENCY_FUND_ADDRESS      deployed contract address (required)
PREDICTHQ_API_KEY           PredictHQ bearer token (required)
PREDICTHQ_TIMEOUT_SECONDS   external call timeout (default 10)
PREDICTHQ_MAX_CONCURRENCY   max in-flight external calls (default 4)
ORACLE_NETWORK              network name (default avalanche-testnet)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from eth_utils import is_address

from disaster_oracle.errors import ConfigurationError

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_MAX_CONCURRENT = 4
DEFAULT_NETWORK = "avalanche-testnet"


# ── Networks ──────────────────────────────────────────────────────────

def _networks() -> dict:
    return {
        "avalanche-testnet": {
            "name": "avalanche-testnet",
            "chain_id": 43113,
            "rpc_url": os.getenv(
                "AVALANCHE_TESTNET_RPC",
                "https://api.avax-test.network/ext/bc/C/rpc",
            ),
            "block_explorer": "https://testnet.snowtrace.io",
            "native_currency": {"name": "AVAX", "symbol": "AVAX", "decimals": 18},
        },
        "base-testnet": {
            "name": "base-testnet",
            "chain_id": 84532,
            "rpc_url": os.getenv("BASE_TESTNET_RPC", "https://sepolia.base.org"),
            "block_explorer": "https://sepolia.basescan.org/",
            "native_currency": {"name": "ETH", "symbol": "ETH", "decimals": 18},
        },
    }


NETWORKS = _networks()


def get_network_config(name: str) -> Optional[dict]:
    """Network configuration by name, or None if unknown."""
    return NETWORKS.get(name)


def get_network_names() -> list[str]:
    return list(NETWORKS)


# ── Oracle config ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class OracleConfig:
    deployed_contract_address: str
    predicthq_api_key: str
    external_call_timeout: float = DEFAULT_TIMEOUT_S
    max_concurrent_external_calls: int = DEFAULT_MAX_CONCURRENT
    network: str = DEFAULT_NETWORK

    def __post_init__(self):
        if not self.deployed_contract_address:
            raise ConfigurationError("EmergencyFund contract address not set.")
        if not is_address(self.deployed_contract_address):
            raise ConfigurationError(
                f"Invalid contract address: {self.deployed_contract_address!r}"
            )
        if not self.predicthq_api_key:
            raise ConfigurationError("PredictHQ API key not set.")
        if self.external_call_timeout <= 0:
            raise ConfigurationError("External call timeout must be positive.")
        if self.max_concurrent_external_calls < 1:
            raise ConfigurationError("Max concurrent external calls must be >= 1.")
        if self.network not in NETWORKS:
            raise ConfigurationError(
                f"Network '{self.network}' not found. "
                f"Available networks: {', '.join(get_network_names())}"
            )

    @property
    def network_config(self) -> dict:
        return NETWORKS[self.network]

    @classmethod
    def from_mapping(cls, env: Mapping[str, str]) -> "OracleConfig":
        """Build a config from environment-style string settings."""
        timeout = _parse(env, "PREDICTHQ_TIMEOUT_SECONDS", float, DEFAULT_TIMEOUT_S)
        max_calls = _parse(env, "PREDICTHQ_MAX_CONCURRENCY", int, DEFAULT_MAX_CONCURRENT)
        return cls(
            deployed_contract_address=(env.get("EMERGENCY_FUND_ADDRESS") or "").strip(),
            predicthq_api_key=(env.get("PREDICTHQ_API_KEY") or "").strip(),
            external_call_timeout=timeout,
            max_concurrent_external_calls=max_calls,
            network=(env.get("ORACLE_NETWORK") or DEFAULT_NETWORK).strip(),
        )

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "OracleConfig":
        """Load ``.env`` (if present) into the environment, then build a config."""
        load_dotenv(dotenv_path)
        return cls.from_mapping(os.environ)


def _parse(env: Mapping[str, str], key: str, cast, default):
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} is not a valid {cast.__name__}: {raw!r}") from exc
