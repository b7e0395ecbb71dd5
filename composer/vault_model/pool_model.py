"""Pool ledger and per-request execution for the Vault model.

Pool-type formulas are not implemented here: each pool carries a `PoolMath`
that quotes joins, exits and swaps against the pool's current balances. This
module applies those quotes to the ledger, resolves chained references and
reports signed Vault deltas (positive = into the Vault).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import singledispatchmethod
from typing import Protocol

import structlog

from composer.models.requests import (
    BatchSwapRequest,
    ExitPoolRequest,
    JoinPoolRequest,
    SwapKind,
)
from composer.models.types import get_pool_address, normalize_address

from .errors import UnknownPoolError, UnsupportedSwapKindError
from .relayer_model import RelayerModel

logger = structlog.get_logger()


class PoolMath(Protocol):
    """Pool-type specific quoting used by the replay.

    Implementations must not mutate the pool; the ledger is updated by
    PoolModel after each quote.
    """

    def join(self, pool: PoolState, token_in: str, amount_in: int) -> int:
        """Return BPT minted for a single-token join."""
        ...

    def exit(self, pool: PoolState, bpt_in: int, token_out: str) -> int:
        """Return tokens withdrawn for a single-token exit."""
        ...

    def swap(self, pool: PoolState, token_in: str, token_out: str, amount_in: int) -> int:
        """Return the output amount for an exact-in swap."""
        ...


@dataclass
class PoolState:
    """Mutable ledger entry for one pool.

    Attributes:
        pool_id: Balancer pool id
        balances: Token balances keyed by lowercase address
        total_shares: BPT supply
        math: Quoting for this pool's type
    """

    pool_id: str
    balances: dict[str, int]
    total_shares: int
    math: PoolMath = field(repr=False)

    def __post_init__(self) -> None:
        self.pool_id = self.pool_id.lower()
        self.balances = {normalize_address(t): b for t, b in self.balances.items()}

    @property
    def address(self) -> str:
        return get_pool_address(self.pool_id)


Pools = dict[str, PoolState]


class PoolModel:
    """Executes Vault requests against a pool ledger."""

    def __init__(self, relayer_model: RelayerModel) -> None:
        self.relayer_model = relayer_model

    @staticmethod
    def _get_pool(pools: Pools, pool_id: str) -> PoolState:
        pool = pools.get(pool_id.lower())
        if pool is None:
            raise UnknownPoolError(f"Pool not found: {pool_id}")
        return pool

    @singledispatchmethod
    def execute(self, request: object, pools: Pools) -> tuple[list[str], list[int]]:
        """Apply one request, returning (tokens, signed Vault deltas)."""
        raise TypeError(f"Unknown request type: {type(request).__name__}")

    @execute.register(JoinPoolRequest)
    def do_join(self, request: JoinPoolRequest, pools: Pools) -> tuple[list[str], list[int]]:
        pool = self._get_pool(pools, request.pool_id)
        token_in = normalize_address(request.token_in)
        amount_in = self.relayer_model.do_chained_ref_replacement(request.amount_in)

        bpt_out = pool.math.join(pool, token_in, amount_in)
        pool.balances[token_in] = pool.balances.get(token_in, 0) + amount_in
        pool.total_shares += bpt_out

        if request.output_reference is not None:
            self.relayer_model.set_chained_reference_value(request.output_reference.key, bpt_out)

        logger.debug("vault_model_join", pool_id=pool.pool_id, amount_in=amount_in, bpt_out=bpt_out)
        return [token_in, pool.address], [amount_in, -bpt_out]

    @execute.register(ExitPoolRequest)
    def do_exit(self, request: ExitPoolRequest, pools: Pools) -> tuple[list[str], list[int]]:
        pool = self._get_pool(pools, request.pool_id)
        token_out = normalize_address(request.token_out)
        bpt_in = self.relayer_model.do_chained_ref_replacement(request.amount_in)

        amount_out = pool.math.exit(pool, bpt_in, token_out)
        pool.balances[token_out] = pool.balances.get(token_out, 0) - amount_out
        pool.total_shares -= bpt_in

        if request.output_reference is not None:
            self.relayer_model.set_chained_reference_value(
                request.output_reference.key, amount_out
            )

        logger.debug("vault_model_exit", pool_id=pool.pool_id, bpt_in=bpt_in, amount_out=amount_out)
        return [pool.address, token_out], [bpt_in, -amount_out]

    @execute.register(BatchSwapRequest)
    def do_batch_swap(
        self, request: BatchSwapRequest, pools: Pools
    ) -> tuple[list[str], list[int]]:
        if request.kind != SwapKind.GIVEN_IN:
            raise UnsupportedSwapKindError(f"Cannot replay {request.kind.value} batch swaps")

        assets = [normalize_address(a) for a in request.assets]
        deltas = [0] * len(assets)
        previous_amount_out = 0
        for i, step in enumerate(request.swaps):
            pool = self._get_pool(pools, step.pool_id)
            amount_in = self.relayer_model.do_chained_ref_replacement(step.amount)
            # A zero amount after the first step spends the previous step's output
            if amount_in == 0 and i > 0:
                amount_in = previous_amount_out

            token_in = assets[step.asset_in_index]
            token_out = assets[step.asset_out_index]
            amount_out = pool.math.swap(pool, token_in, token_out, amount_in)
            pool.balances[token_in] = pool.balances.get(token_in, 0) + amount_in
            pool.balances[token_out] = pool.balances.get(token_out, 0) - amount_out

            deltas[step.asset_in_index] += amount_in
            deltas[step.asset_out_index] -= amount_out
            previous_amount_out = amount_out

        for ref in request.output_references:
            # Outputs are negative Vault deltas; the relayer stores the amount received
            self.relayer_model.set_chained_reference_value(ref.key, -deltas[ref.index])

        logger.debug("vault_model_batch_swap", steps=len(request.swaps), deltas=deltas)
        return assets, deltas


__all__ = ["PoolMath", "PoolModel", "PoolState", "Pools"]
