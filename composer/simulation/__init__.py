"""Simulation of composed relayer multicalls.

Strategies:
- Tenderly: remote forked-chain simulation with balance/allowance overrides
- Vault model: off-chain replay against the Vault replica
- Static: read-only eth_call
"""

from .config import DEFAULT_NETWORK_CONFIG, NetworkConfig, TenderlyConfig
from .decoding import decode_multicall_result
from .errors import (
    MissingDeltaError,
    MissingStaticCallerError,
    MissingVaultModelError,
    SimulationConfigError,
    SimulationError,
    TenderlyConfigError,
    UnsupportedSimulationTypeError,
)
from .simulation import Simulation
from .static import StaticCaller, Web3StaticCaller
from .tenderly import TenderlyClient, build_balance_and_allowance_overrides
from .types import SimulationResult, SimulationType

__all__ = [
    # Dispatcher
    "Simulation",
    "SimulationResult",
    "SimulationType",
    "decode_multicall_result",
    # Providers
    "TenderlyClient",
    "build_balance_and_allowance_overrides",
    "StaticCaller",
    "Web3StaticCaller",
    # Configuration
    "NetworkConfig",
    "TenderlyConfig",
    "DEFAULT_NETWORK_CONFIG",
    # Errors
    "SimulationError",
    "SimulationConfigError",
    "UnsupportedSimulationTypeError",
    "MissingVaultModelError",
    "MissingStaticCallerError",
    "TenderlyConfigError",
    "MissingDeltaError",
]
