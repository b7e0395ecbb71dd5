"""Off-chain replica of the Vault used to simulate relayer multicalls."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import structlog

from composer.models.requests import BatchSwapRequest, ExitPoolRequest, JoinPoolRequest
from composer.models.types import normalize_address

from .pool_model import PoolModel, Pools, PoolState
from .relayer_model import RelayerModel

logger = structlog.get_logger()

VaultRequest = JoinPoolRequest | ExitPoolRequest | BatchSwapRequest


class PoolDataService(Protocol):
    """Provides a fresh snapshot of pool state."""

    def get_pools(self) -> Sequence[PoolState]:
        ...


class PoolsSource:
    """Caches pool state between replays.

    The cached pools are the replica's ledger: replays mutate them in place,
    and they are only reloaded from the data service on refresh.
    """

    def __init__(self, pool_data_service: PoolDataService) -> None:
        self.pool_data_service = pool_data_service
        self._pools: Pools | None = None

    def pools_dictionary(self, refresh: bool = False) -> Pools:
        if refresh or self._pools is None:
            pools = self.pool_data_service.get_pools()
            self._pools = {pool.pool_id: pool for pool in pools}
            logger.debug("vault_model_pools_loaded", pool_count=len(self._pools))
        return self._pools


class VaultModel:
    """Replays join/exit/batch-swap requests and reports Vault deltas.

    Several join paths of one operation are replayed one after another on the
    same ledger; the first path refreshes it. Not safe for concurrent use.
    """

    def __init__(self, pool_data_service: PoolDataService) -> None:
        self.pools_source = PoolsSource(pool_data_service)

    @staticmethod
    def update_deltas(
        deltas: dict[str, int], assets: Sequence[str], amounts: Sequence[int]
    ) -> dict[str, int]:
        for asset, amount in zip(assets, amounts, strict=True):
            key = normalize_address(asset)
            deltas[key] = deltas.get(key, 0) + amount
        return deltas

    def multicall(self, requests: Sequence[VaultRequest], refresh: bool = False) -> dict[str, int]:
        """Replay requests in order.

        Args:
            requests: Requests of one path, in execution order
            refresh: Reload pool state before replaying

        Returns:
            Signed Vault delta per address (positive = into the Vault)
        """
        relayer_model = RelayerModel()
        pool_model = PoolModel(relayer_model)
        pools = self.pools_source.pools_dictionary(refresh)

        deltas: dict[str, int] = {}
        for request in requests:
            tokens, amounts = pool_model.execute(request, pools)
            self.update_deltas(deltas, tokens, amounts)
        return deltas


__all__ = ["PoolDataService", "PoolsSource", "VaultModel", "VaultRequest"]
