"""Off-chain Vault replica for simulating relayer multicalls.

The replica tracks pool balances and chained references; pool-type math is
supplied per pool through the PoolMath protocol.
"""

from .errors import (
    UnknownPoolError,
    UnresolvedChainedReferenceError,
    UnsupportedSwapKindError,
    VaultModelError,
)
from .pool_model import PoolMath, PoolModel, PoolState
from .relayer_model import RelayerModel
from .vault_model import PoolDataService, PoolsSource, VaultModel, VaultRequest

__all__ = [
    "PoolDataService",
    "PoolMath",
    "PoolModel",
    "PoolState",
    "PoolsSource",
    "RelayerModel",
    "VaultModel",
    "VaultRequest",
    # Errors
    "VaultModelError",
    "UnknownPoolError",
    "UnresolvedChainedReferenceError",
    "UnsupportedSwapKindError",
]
