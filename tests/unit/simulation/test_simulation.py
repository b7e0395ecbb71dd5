"""Tests for the simulation dispatcher.

This module tests:
- Strategy selection and rejection of unknown strategies before any I/O
- Tenderly and static strategies decoding the same multicall output
- Vault model strategy (per-path BPT out, missing configuration, missing deltas)
"""

import httpx
import pytest

from composer.constants import BALANCER_VAULT, STATIC_CALL_GAS_LIMIT
from composer.models.requests import (
    BatchSwapRequest,
    BatchSwapStep,
    FundManagement,
    JoinPoolRequest,
)
from composer.relayer import OutputReference, to_chained_reference
from composer.simulation import (
    MissingDeltaError,
    MissingStaticCallerError,
    MissingVaultModelError,
    NetworkConfig,
    Simulation,
    SimulationResult,
    SimulationType,
    TenderlyClient,
    TenderlyConfig,
    TenderlyConfigError,
    UnsupportedSimulationTypeError,
)
from tests.helpers import (
    DAI,
    POOL_A,
    POOL_A_ID,
    POOL_B,
    POOL_B_ID,
    RELAYER,
    USDC,
    USER,
    FakeStaticCaller,
    SnapshotPoolDataService,
    TransportFactory,
    encode_multicall_result,
)

RELAYER_ADDRESS = "0x" + "33" * 20
ENCODED_CALL = "0xac9650d8"


def _join(pool_id: str, amount_in: str) -> JoinPoolRequest:
    return JoinPoolRequest(
        pool_id=pool_id,
        sender=USER,
        recipient=RELAYER,
        token_in=DAI,
        amount_in=amount_in,
        output_reference=OutputReference(index=1, key=to_chained_reference(0)),
    )


def _tenderly_client(config: TenderlyConfig, transport: httpx.MockTransport) -> TenderlyClient:
    return TenderlyClient(
        config, chain_id=1, spender=BALANCER_VAULT, client=httpx.Client(transport=transport)
    )


class TestDispatch:
    """Tests for strategy selection."""

    def test_unsupported_type_raises_before_io(
        self, tenderly_config: TenderlyConfig, tenderly_transport: TransportFactory
    ) -> None:
        transport, recorded = tenderly_transport()
        caller = FakeStaticCaller(encode_multicall_result([1]))
        simulation = Simulation(
            tenderly_client=_tenderly_client(tenderly_config, transport),
            static_caller=caller,
        )

        with pytest.raises(UnsupportedSimulationTypeError):
            simulation.simulate_generalised_join(
                RELAYER_ADDRESS, [], ENCODED_CALL, [0], USER, [DAI], "bogus"
            )

        assert recorded == []
        assert caller.calls == []

    def test_accepts_string_type(self) -> None:
        caller = FakeStaticCaller(encode_multicall_result([9]))
        result = Simulation(static_caller=caller).simulate(
            RELAYER_ADDRESS, [], ENCODED_CALL, [0], USER, [DAI], "static"
        )
        assert result.total_amount_out == "9"


class TestTenderlyStrategy:
    """Tests for SimulationType.TENDERLY."""

    def test_decodes_simulation_output(
        self, tenderly_config: TenderlyConfig, tenderly_transport: TransportFactory
    ) -> None:
        output = encode_multicall_result([0, 1500, 2500])
        transport, recorded = tenderly_transport(output=output, overrides={})
        simulation = Simulation(tenderly_client=_tenderly_client(tenderly_config, transport))

        result = simulation.simulate_generalised_join(
            RELAYER_ADDRESS,
            [],
            ENCODED_CALL,
            [1, 2],
            USER,
            [DAI],
            SimulationType.TENDERLY,
        )

        assert result == SimulationResult(amounts_out=["1500", "2500"], total_amount_out="4000")
        assert len(recorded) == 2

    def test_missing_credentials(self) -> None:
        with pytest.raises(TenderlyConfigError):
            Simulation().simulate(
                RELAYER_ADDRESS, [], ENCODED_CALL, [0], USER, [DAI], SimulationType.TENDERLY
            )

    def test_client_built_from_network_config(self, tenderly_config: TenderlyConfig) -> None:
        simulation = Simulation(NetworkConfig(chain_id=137, tenderly=tenderly_config))

        with simulation.tenderly_client as client:
            assert client.config is tenderly_config
            assert client.chain_id == 137
            assert client.spender == BALANCER_VAULT


    def test_close_closes_built_client(self, tenderly_config: TenderlyConfig) -> None:
        simulation = Simulation(NetworkConfig(tenderly=tenderly_config))
        http_client = simulation.tenderly_client._client

        simulation.close()

        assert http_client.is_closed

    def test_close_keeps_injected_client_open(
        self, tenderly_config: TenderlyConfig, tenderly_transport: TransportFactory
    ) -> None:
        transport, _ = tenderly_transport()
        http_client = httpx.Client(transport=transport)
        tenderly_client = TenderlyClient(
            tenderly_config, chain_id=1, spender=BALANCER_VAULT, client=http_client
        )

        with Simulation(tenderly_client=tenderly_client):
            pass

        assert not http_client.is_closed


class TestStaticStrategy:
    """Tests for SimulationType.STATIC."""

    def test_uses_default_caller(self) -> None:
        caller = FakeStaticCaller(encode_multicall_result([10, 20]))

        result = Simulation(static_caller=caller).simulate(
            RELAYER_ADDRESS, [], ENCODED_CALL, [0, 1], USER, [DAI], SimulationType.STATIC
        )

        assert result.amounts_out == ["10", "20"]
        assert caller.calls == [(RELAYER_ADDRESS, ENCODED_CALL, STATIC_CALL_GAS_LIMIT)]

    def test_per_call_caller_overrides_default(self) -> None:
        default = FakeStaticCaller(encode_multicall_result([1]))
        override = FakeStaticCaller(encode_multicall_result([2]))

        result = Simulation(static_caller=default).simulate(
            RELAYER_ADDRESS,
            [],
            ENCODED_CALL,
            [0],
            USER,
            [DAI],
            SimulationType.STATIC,
            caller=override,
        )

        assert result.total_amount_out == "2"
        assert default.calls == []

    def test_missing_caller(self) -> None:
        with pytest.raises(MissingStaticCallerError):
            Simulation().simulate(
                RELAYER_ADDRESS, [], ENCODED_CALL, [0], USER, [DAI], SimulationType.STATIC
            )

    def test_agrees_with_tenderly_on_same_output(
        self, tenderly_config: TenderlyConfig, tenderly_transport: TransportFactory
    ) -> None:
        output = encode_multicall_result([7, 0, 11])
        transport, _ = tenderly_transport(output=output)
        simulation = Simulation(
            tenderly_client=_tenderly_client(tenderly_config, transport),
            static_caller=FakeStaticCaller(bytes.fromhex(output[2:])),
        )
        args = (RELAYER_ADDRESS, [], ENCODED_CALL, [0, 2], USER, [DAI])

        tenderly = simulation.simulate(*args, SimulationType.TENDERLY)
        static = simulation.simulate(*args, SimulationType.STATIC)

        assert tenderly == static


class TestVaultModelStrategy:
    """Tests for SimulationType.VAULT_MODEL."""

    def test_bpt_out_per_path(self, fake_pool_data_service: SnapshotPoolDataService) -> None:
        simulation = Simulation(pool_data_service=fake_pool_data_service)

        result = simulation.simulate_generalised_join(
            RELAYER_ADDRESS,
            [[_join(POOL_A_ID, "1000")], [_join(POOL_A_ID, "500")]],
            "0x",
            [],
            USER,
            [DAI],
            SimulationType.VAULT_MODEL,
        )

        # Pool A mints 2 BPT per DAI
        assert result == SimulationResult(amounts_out=["2000", "1000"], total_amount_out="3000")
        # Only the first path refreshes the ledger
        assert fake_pool_data_service.load_count == 1

    def test_missing_vault_model(self) -> None:
        with pytest.raises(MissingVaultModelError, match="Missing Vault Model Config."):
            Simulation().simulate(
                RELAYER_ADDRESS,
                [[_join(POOL_A_ID, "1")]],
                "0x",
                [],
                USER,
                [DAI],
                SimulationType.VAULT_MODEL,
            )

    def test_missing_root_delta(self, fake_pool_data_service: SnapshotPoolDataService) -> None:
        """The last request's pool must have a BPT delta."""
        swap = BatchSwapRequest(
            swaps=[
                BatchSwapStep(
                    pool_id=POOL_B_ID,
                    asset_in_index=0,
                    asset_out_index=1,
                    amount=str(to_chained_reference(0)),
                )
            ],
            assets=[POOL_A, USDC],
            funds=FundManagement(
                sender=RELAYER,
                from_internal_balance=False,
                recipient=USER,
                to_internal_balance=False,
            ),
            limits=[0, 0],
        )
        # Pool B trades A's BPT for USDC; its own BPT never moves
        path = [_join(POOL_A_ID, "1000"), swap]
        simulation = Simulation(pool_data_service=fake_pool_data_service)

        with pytest.raises(MissingDeltaError, match=POOL_B):
            simulation.simulate(
                RELAYER_ADDRESS, [path], "0x", [], USER, [DAI], SimulationType.VAULT_MODEL
            )

    def test_empty_path(self, fake_pool_data_service: SnapshotPoolDataService) -> None:
        with pytest.raises(MissingDeltaError):
            Simulation(pool_data_service=fake_pool_data_service).simulate(
                RELAYER_ADDRESS, [[]], "0x", [], USER, [DAI], SimulationType.VAULT_MODEL
            )
