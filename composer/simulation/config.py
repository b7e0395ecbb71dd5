"""Simulation configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from composer.constants import BALANCER_VAULT

from .errors import TenderlyConfigError

TENDERLY_API_URL = "https://api.tenderly.co/api/v1"


@dataclass(frozen=True)
class TenderlyConfig:
    """Credentials and endpoint settings for the Tenderly API.

    Attributes:
        user: Tenderly account slug
        project: Tenderly project slug
        access_key: Value of the X-Access-Key header
        base_url: API root (overridable for proxies and tests)
        timeout: HTTP timeout in seconds for each request, None for no timeout
    """

    user: str
    project: str
    access_key: str = field(repr=False)
    base_url: str = TENDERLY_API_URL
    timeout: float | None = None

    @property
    def project_url(self) -> str:
        return f"{self.base_url}/account/{self.user}/project/{self.project}"

    @property
    def simulate_url(self) -> str:
        return f"{self.project_url}/simulate"

    @property
    def encode_states_url(self) -> str:
        return f"{self.project_url}/contracts/encode-states"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TenderlyConfig:
        """Read configuration from environment variables.

        - TENDERLY_USER, TENDERLY_PROJECT, TENDERLY_ACCESS_KEY: required
        - TENDERLY_BASE_URL: optional API root
        - TENDERLY_TIMEOUT: optional timeout in seconds (default: none)

        Raises:
            TenderlyConfigError: If a required variable is missing or empty
        """
        env = os.environ if environ is None else environ
        missing = [
            name
            for name in ("TENDERLY_USER", "TENDERLY_PROJECT", "TENDERLY_ACCESS_KEY")
            if not env.get(name)
        ]
        if missing:
            raise TenderlyConfigError(f"Missing Tenderly settings: {', '.join(missing)}")
        return cls(
            user=env["TENDERLY_USER"],
            project=env["TENDERLY_PROJECT"],
            access_key=env["TENDERLY_ACCESS_KEY"],
            base_url=env.get("TENDERLY_BASE_URL", TENDERLY_API_URL),
            timeout=float(env["TENDERLY_TIMEOUT"]) if env.get("TENDERLY_TIMEOUT") else None,
        )


@dataclass(frozen=True)
class NetworkConfig:
    """Network settings needed by the simulation strategies.

    Attributes:
        chain_id: EVM chain id (sent to Tenderly as the network id)
        vault_address: Balancer Vault, the spender for allowance overrides
        tenderly: Tenderly settings, required only for Tenderly simulation
    """

    chain_id: int = 1
    vault_address: str = BALANCER_VAULT
    tenderly: TenderlyConfig | None = None


# Mainnet without Tenderly credentials
DEFAULT_NETWORK_CONFIG = NetworkConfig()
