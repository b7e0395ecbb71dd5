"""Pytest configuration and fixtures."""

import httpx
import pytest

from composer.simulation.config import TenderlyConfig
from tests.helpers import (
    DAI,
    POOL_A,
    POOL_A_ID,
    POOL_B_ID,
    USDC,
    FixedRateMath,
    RecordedRequests,
    SnapshotPoolDataService,
    TransportFactory,
    make_pool,
)


@pytest.fixture
def tenderly_config() -> TenderlyConfig:
    """Tenderly settings pointing at a fake API root."""
    return TenderlyConfig(
        user="balancer",
        project="relayer",
        access_key="secret-key",
        base_url="https://tenderly.test/api/v1",
    )


@pytest.fixture
def fake_pool_data_service() -> SnapshotPoolDataService:
    """Two pools: A takes DAI (2 BPT per DAI), B trades A's BPT for USDC (1:1)."""
    return SnapshotPoolDataService(
        [
            make_pool(POOL_A_ID, {DAI: 10**24}, math=FixedRateMath(numerator=2)),
            make_pool(POOL_B_ID, {USDC: 10**24, POOL_A: 10**24}),
        ]
    )


@pytest.fixture
def tenderly_transport() -> TransportFactory:
    """Factory for a mock Tenderly transport recording every request.

    encode-states answers with `overrides`, simulate answers with a call
    trace whose output is `output`. A non-200 `status_code` fails every call.
    """

    def _make(
        output: str = "0x",
        overrides: dict | None = None,
        status_code: int = 200,
    ) -> tuple[httpx.MockTransport, RecordedRequests]:
        recorded: RecordedRequests = []

        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            if status_code != 200:
                return httpx.Response(status_code, json={"error": "failed"})
            if request.url.path.endswith("/contracts/encode-states"):
                return httpx.Response(200, json={"stateOverrides": overrides})
            if request.url.path.endswith("/simulate"):
                return httpx.Response(
                    200,
                    json={"transaction": {"transaction_info": {"call_trace": {"output": output}}}},
                )
            return httpx.Response(404)

        return httpx.MockTransport(handler), recorded

    return _make
