"""Simulation dispatch for composed relayer multicalls.

Three interchangeable strategies validate a multicall before submission and
all return the same SimulationResult shape:

- TENDERLY: remote forked-chain simulation with balance/allowance overrides
- VAULT_MODEL: off-chain replay of each join path against the Vault replica
- STATIC: read-only eth_call against live chain state

Each call performs at most one blocking round of I/O. There is no retry and
no fallback between strategies.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from composer.constants import STATIC_CALL_GAS_LIMIT
from composer.models.requests import request_pool_id
from composer.models.types import get_pool_address
from composer.vault_model import PoolDataService, VaultModel, VaultRequest

from .config import DEFAULT_NETWORK_CONFIG, NetworkConfig
from .decoding import decode_multicall_result
from .errors import (
    MissingDeltaError,
    MissingStaticCallerError,
    MissingVaultModelError,
    TenderlyConfigError,
    UnsupportedSimulationTypeError,
)
from .static import StaticCaller
from .tenderly import TenderlyClient
from .types import SimulationResult, SimulationType

logger = structlog.get_logger()


class Simulation:
    """Validates composed multicalls with a caller-selected strategy.

    Args:
        network_config: Chain id, Vault address and optional Tenderly settings
        pool_data_service: Pool snapshot provider. Without it the vault model
            strategy is unavailable.
        tenderly_client: Pre-built Tenderly client. If None, one is built on
            first use from network_config.tenderly.
        static_caller: Default read-only call provider for STATIC simulation
    """

    def __init__(
        self,
        network_config: NetworkConfig = DEFAULT_NETWORK_CONFIG,
        pool_data_service: PoolDataService | None = None,
        tenderly_client: TenderlyClient | None = None,
        static_caller: StaticCaller | None = None,
    ) -> None:
        self.network_config = network_config
        self.vault_model = VaultModel(pool_data_service) if pool_data_service is not None else None
        self._tenderly_client = tenderly_client
        self._owns_tenderly_client = False
        self.static_caller = static_caller

    @property
    def tenderly_client(self) -> TenderlyClient:
        if self._tenderly_client is None:
            if self.network_config.tenderly is None:
                raise TenderlyConfigError("Missing Tenderly config.")
            self._tenderly_client = TenderlyClient(
                self.network_config.tenderly,
                chain_id=self.network_config.chain_id,
                spender=self.network_config.vault_address,
            )
            self._owns_tenderly_client = True
        return self._tenderly_client

    def close(self) -> None:
        """Close the Tenderly client if this instance built it.

        Injected clients belong to the caller and stay open.
        """
        if self._owns_tenderly_client and self._tenderly_client is not None:
            self._tenderly_client.close()
            self._tenderly_client = None
            self._owns_tenderly_client = False

    def __enter__(self) -> Simulation:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def simulate_generalised_join(
        self,
        to: str,
        multi_requests: Sequence[Sequence[VaultRequest]],
        encoded_call: str,
        output_indexes: Sequence[int],
        user_address: str,
        tokens_in: Sequence[str],
        simulation_type: SimulationType | str,
        caller: StaticCaller | None = None,
    ) -> SimulationResult:
        """Simulate a composed multicall.

        Args:
            to: Relayer address
            multi_requests: Vault requests per independent join path (vault model only)
            encoded_call: Encoded relayer multicall (Tenderly and static only)
            output_indexes: Sub-call positions whose uint256 result is a root output
            user_address: Account the operation runs for
            tokens_in: Tokens spent by the user (Tenderly overrides)
            simulation_type: Strategy to use
            caller: Read-only call provider overriding the default (static only)

        Returns:
            SimulationResult with per-output amounts and their total

        Raises:
            UnsupportedSimulationTypeError: Unknown strategy (raised before any I/O)
            MissingVaultModelError: Vault model requested without pool data
            MissingStaticCallerError: Static requested without a call provider
            TenderlyConfigError: Tenderly requested without credentials
            MissingDeltaError: A join path's root pool has no BPT delta
        """
        try:
            simulation_type = SimulationType(simulation_type)
        except ValueError as err:
            raise UnsupportedSimulationTypeError(
                f"Simulation type not supported: {simulation_type!r}"
            ) from err

        logger.info(
            "simulation_started",
            simulation_type=simulation_type.value,
            to=to,
            output_count=len(output_indexes),
        )

        if simulation_type == SimulationType.TENDERLY:
            result = self._simulate_tenderly(
                to, encoded_call, output_indexes, user_address, tokens_in
            )
        elif simulation_type == SimulationType.VAULT_MODEL:
            result = self._simulate_vault_model(multi_requests)
        else:
            result = self._simulate_static(to, encoded_call, output_indexes, caller)

        logger.info(
            "simulation_finished",
            simulation_type=simulation_type.value,
            total_amount_out=result.total_amount_out,
        )
        return result

    # Generic name for callers that are not simulating a join
    simulate = simulate_generalised_join

    def _simulate_tenderly(
        self,
        to: str,
        encoded_call: str,
        output_indexes: Sequence[int],
        user_address: str,
        tokens_in: Sequence[str],
    ) -> SimulationResult:
        simulation_output = self.tenderly_client.simulate_multicall(
            to, encoded_call, user_address, tokens_in
        )
        return decode_multicall_result(simulation_output, output_indexes)

    def _simulate_vault_model(
        self, multi_requests: Sequence[Sequence[VaultRequest]]
    ) -> SimulationResult:
        if self.vault_model is None:
            raise MissingVaultModelError("Missing Vault Model Config.")

        # One replay per join path; only the root pool BPT delta counts
        amounts_out: list[str] = []
        total_amount_out = 0
        for i, requests in enumerate(multi_requests):
            if not requests:
                raise MissingDeltaError(f"Join path {i} has no requests.")
            root_pool_address = get_pool_address(request_pool_id(requests[-1]))
            deltas = self.vault_model.multicall(requests, refresh=i == 0)
            bpt_delta = deltas.get(root_pool_address)
            if bpt_delta is None:
                raise MissingDeltaError(f"No delta found for BPT out of {root_pool_address}.")
            # BPT leaves the Vault on joins, so its delta is negative
            bpt_out = -bpt_delta
            amounts_out.append(str(bpt_out))
            total_amount_out += bpt_out

        return SimulationResult(amounts_out=amounts_out, total_amount_out=str(total_amount_out))

    def _simulate_static(
        self,
        to: str,
        encoded_call: str,
        output_indexes: Sequence[int],
        caller: StaticCaller | None,
    ) -> SimulationResult:
        static_caller = caller if caller is not None else self.static_caller
        if static_caller is None:
            raise MissingStaticCallerError("Static simulation requires a call provider.")
        static_result = static_caller.call(to, encoded_call, gas_limit=STATIC_CALL_GAS_LIMIT)
        return decode_multicall_result(static_result, output_indexes)


__all__ = ["Simulation"]
