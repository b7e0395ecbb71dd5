"""Tests for the off-chain Vault replica.

This module tests:
- RelayerModel (chained reference storage and replacement)
- PoolModel (join, exit and batch swap replay against the ledger)
- VaultModel (per-path replay, deltas, refresh semantics)
"""

import pytest

from composer.models.requests import (
    BatchSwapRequest,
    BatchSwapStep,
    ExitPoolRequest,
    FundManagement,
    JoinPoolRequest,
    SwapKind,
)
from composer.relayer import OutputReference, to_chained_reference
from composer.vault_model import (
    PoolModel,
    RelayerModel,
    UnknownPoolError,
    UnresolvedChainedReferenceError,
    UnsupportedSwapKindError,
    VaultModel,
)
from tests.helpers import (
    DAI,
    POOL_A,
    POOL_A_ID,
    POOL_B_ID,
    POOL_C_ID,
    RELAYER,
    USDC,
    USER,
    WETH,
    FixedRateMath,
    SnapshotPoolDataService,
    make_pool,
)

REF_0 = to_chained_reference(0)
REF_1 = to_chained_reference(1)


def _join(amount_in: str = "1000", output_key: int | None = REF_0) -> JoinPoolRequest:
    return JoinPoolRequest(
        pool_id=POOL_A_ID,
        sender=USER,
        recipient=RELAYER,
        token_in=DAI,
        amount_in=amount_in,
        output_reference=(
            OutputReference(index=1, key=output_key) if output_key is not None else None
        ),
    )


def _swap(
    steps: list[BatchSwapStep],
    assets: list[str],
    output_references: list[OutputReference] | None = None,
    kind: SwapKind = SwapKind.GIVEN_IN,
) -> BatchSwapRequest:
    return BatchSwapRequest(
        kind=kind,
        swaps=steps,
        assets=assets,
        funds=FundManagement(
            sender=RELAYER,
            from_internal_balance=False,
            recipient=USER,
            to_internal_balance=False,
        ),
        limits=[0] * len(assets),
        output_references=output_references or [],
    )


class TestRelayerModel:
    """Tests for RelayerModel."""

    def test_set_and_get(self) -> None:
        model = RelayerModel()
        model.set_chained_reference_value(REF_0, 123)
        assert model.get_chained_reference_value(REF_0) == 123
        assert model.get_chained_reference_value(str(REF_0)) == 123

    def test_literal_passes_through(self) -> None:
        assert RelayerModel().do_chained_ref_replacement("1000") == 1000

    def test_reference_is_replaced(self) -> None:
        model = RelayerModel()
        model.set_chained_reference_value(REF_1, 77)
        assert model.do_chained_ref_replacements(["5", str(REF_1)]) == [5, 77]

    def test_unresolved_reference_raises(self) -> None:
        with pytest.raises(UnresolvedChainedReferenceError):
            RelayerModel().do_chained_ref_replacement(str(REF_0))


class TestPoolModel:
    """Tests for PoolModel request execution."""

    def _pools(self) -> dict:
        pools = [
            make_pool(POOL_A_ID, {DAI: 10_000}, total_shares=50_000, math=FixedRateMath(2)),
            make_pool(POOL_B_ID, {USDC: 10_000, WETH: 10_000}),
        ]
        return {pool.pool_id: pool for pool in pools}

    def test_join_updates_ledger_and_stores_output(self) -> None:
        relayer = RelayerModel()
        pools = self._pools()

        tokens, deltas = PoolModel(relayer).execute(_join("1000"), pools)

        assert tokens == [DAI, POOL_A]
        assert deltas == [1000, -2000]
        assert pools[POOL_A_ID].balances[DAI] == 11_000
        assert pools[POOL_A_ID].total_shares == 52_000
        assert relayer.get_chained_reference_value(REF_0) == 2000

    def test_exit_reads_chained_reference(self) -> None:
        relayer = RelayerModel()
        relayer.set_chained_reference_value(REF_0, 500)
        pools = self._pools()
        request = ExitPoolRequest(
            pool_id=POOL_A_ID,
            sender=RELAYER,
            recipient=USER,
            token_out=DAI,
            amount_in=str(REF_0),
        )

        tokens, deltas = PoolModel(relayer).execute(request, pools)

        assert tokens == [POOL_A, DAI]
        assert deltas == [500, -1000]
        assert pools[POOL_A_ID].balances[DAI] == 9_000
        assert pools[POOL_A_ID].total_shares == 49_500

    def test_multi_hop_batch_swap(self) -> None:
        """A zero amount after the first step spends the previous output."""
        relayer = RelayerModel()
        pools = self._pools()
        request = _swap(
            [
                BatchSwapStep(pool_id=POOL_A_ID, asset_in_index=0, asset_out_index=1, amount="100"),
                BatchSwapStep(pool_id=POOL_B_ID, asset_in_index=1, asset_out_index=2, amount="0"),
            ],
            [DAI, USDC, WETH],
            output_references=[OutputReference(index=2, key=REF_1)],
        )

        tokens, deltas = PoolModel(relayer).execute(request, pools)

        assert tokens == [DAI, USDC, WETH]
        assert deltas == [100, 0, -200]
        assert relayer.get_chained_reference_value(REF_1) == 200
        assert pools[POOL_B_ID].balances[WETH] == 9_800

    def test_given_out_not_supported(self) -> None:
        request = _swap(
            [BatchSwapStep(pool_id=POOL_B_ID, asset_in_index=0, asset_out_index=1, amount="1")],
            [USDC, WETH],
            kind=SwapKind.GIVEN_OUT,
        )
        with pytest.raises(UnsupportedSwapKindError):
            PoolModel(RelayerModel()).execute(request, self._pools())

    def test_unknown_pool_raises(self) -> None:
        request = _swap(
            [BatchSwapStep(pool_id=POOL_C_ID, asset_in_index=0, asset_out_index=1, amount="1")],
            [USDC, WETH],
        )
        with pytest.raises(UnknownPoolError):
            PoolModel(RelayerModel()).execute(request, self._pools())

    def test_unknown_request_type_raises(self) -> None:
        with pytest.raises(TypeError):
            PoolModel(RelayerModel()).execute(object(), self._pools())


class TestVaultModel:
    """Tests for VaultModel.multicall."""

    def _path(self) -> list[JoinPoolRequest | BatchSwapRequest]:
        # DAI -> BPT A (join A), BPT A -> USDC (swap in B) reading the join output
        return [
            _join("1000"),
            _swap(
                [
                    BatchSwapStep(
                        pool_id=POOL_B_ID,
                        asset_in_index=0,
                        asset_out_index=1,
                        amount=str(REF_0),
                    )
                ],
                [POOL_A, USDC],
            ),
        ]

    def test_chained_path_deltas(self, fake_pool_data_service: SnapshotPoolDataService) -> None:
        deltas = VaultModel(fake_pool_data_service).multicall(self._path(), refresh=True)

        assert deltas == {DAI: 1000, POOL_A: 0, USDC: -2000}

    def test_references_do_not_leak_between_paths(
        self, fake_pool_data_service: SnapshotPoolDataService
    ) -> None:
        vault = VaultModel(fake_pool_data_service)
        vault.multicall([_join("1000")], refresh=True)

        with pytest.raises(UnresolvedChainedReferenceError):
            vault.multicall(self._path()[1:])

    def test_ledger_persists_without_refresh(
        self, fake_pool_data_service: SnapshotPoolDataService
    ) -> None:
        vault = VaultModel(fake_pool_data_service)

        vault.multicall([_join("1000")], refresh=True)
        vault.multicall([_join("1000")])

        pools = vault.pools_source.pools_dictionary()
        assert fake_pool_data_service.load_count == 1
        assert pools[POOL_A_ID].balances[DAI] == 10**24 + 2000

    def test_refresh_reloads_ledger(self, fake_pool_data_service: SnapshotPoolDataService) -> None:
        vault = VaultModel(fake_pool_data_service)

        vault.multicall([_join("1000")], refresh=True)
        vault.multicall([_join("1000")], refresh=True)

        pools = vault.pools_source.pools_dictionary()
        assert fake_pool_data_service.load_count == 2
        assert pools[POOL_A_ID].balances[DAI] == 10**24 + 1000

    def test_first_use_loads_pools(self, fake_pool_data_service: SnapshotPoolDataService) -> None:
        VaultModel(fake_pool_data_service).multicall([_join("1", output_key=None)])
        assert fake_pool_data_service.load_count == 1

    def test_update_deltas_accumulates(self) -> None:
        deltas = VaultModel.update_deltas({}, [DAI, USDC], [5, -3])
        VaultModel.update_deltas(deltas, [DAI.upper().replace("0X", "0x")], [2])
        assert deltas == {DAI: 7, USDC: -3}

    def test_update_deltas_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            VaultModel.update_deltas({}, [DAI, USDC], [1])
