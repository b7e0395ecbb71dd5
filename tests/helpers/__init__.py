"""Test helpers module for shared test utilities.

- constants: Token addresses, accounts and pool ids
- factories: Action, pool and pool-data factories, fake chain responses
"""

from tests.helpers.constants import (
    DAI,
    POOL_A,
    POOL_A_ID,
    POOL_B,
    POOL_B_ID,
    POOL_C,
    POOL_C_ID,
    POOL_D,
    POOL_D_ID,
    RELAYER,
    USDC,
    USER,
    WETH,
)
from tests.helpers.factories import (
    FakeStaticCaller,
    FixedRateMath,
    RecordedRequests,
    SnapshotPoolDataService,
    TransportFactory,
    encode_multicall_result,
    make_exit,
    make_join,
    make_pool,
    make_swap,
)

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "USER",
    "RELAYER",
    "POOL_A",
    "POOL_B",
    "POOL_C",
    "POOL_D",
    "POOL_A_ID",
    "POOL_B_ID",
    "POOL_C_ID",
    "POOL_D_ID",
    # Factories
    "make_join",
    "make_exit",
    "make_swap",
    "make_pool",
    "FixedRateMath",
    "SnapshotPoolDataService",
    "FakeStaticCaller",
    "encode_multicall_result",
    "RecordedRequests",
    "TransportFactory",
]
