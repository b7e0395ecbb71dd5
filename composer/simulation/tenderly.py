"""Tenderly client for forked-chain simulation of relayer multicalls.

Before simulating, token balances and allowances of the user are overridden to
the maximum value, so the simulation needs no real holdings. Requests are
single-shot: no retry, and HTTP errors propagate to the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from composer.constants import MAX_UINT256

from .config import TenderlyConfig

logger = structlog.get_logger()

# token address -> {"value": {storage variable expression -> value}}
StateOverrides = dict[str, dict[str, dict[str, str]]]


def build_balance_and_allowance_overrides(
    user_address: str,
    tokens: Sequence[str],
    spender: str,
) -> StateOverrides:
    """Build max balance/allowance overrides for each token.

    Storage variable names differ between token implementations, so every
    common naming is overridden.
    """
    max_value = str(MAX_UINT256)
    variables = (
        f"_balances[{user_address}]",
        f"_allowances[{user_address}][{spender}]",
        f"balanceOf[{user_address}]",
        f"allowance[{user_address}][{spender}]",
        f"balances[{user_address}]",
        f"allowed[{user_address}][{spender}]",
    )
    return {token: {"value": dict.fromkeys(variables, max_value)} for token in tokens}


class TenderlyClient:
    """Thin synchronous client for the Tenderly simulation API.

    Args:
        config: Tenderly credentials and endpoint
        chain_id: Network the simulation forks
        spender: Address granted the overridden allowances (the Vault)
        client: Optional pre-configured httpx client (e.g. with a mock transport)
    """

    def __init__(
        self,
        config: TenderlyConfig,
        chain_id: int,
        spender: str,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self.chain_id = chain_id
        self.spender = spender
        self._client = client if client is not None else httpx.Client(timeout=config.timeout)

    @property
    def headers(self) -> dict[str, str]:
        return {"X-Access-Key": self.config.access_key}

    def _post(self, url: str, body: dict[str, Any]) -> Any:
        response = self._client.post(url, json=body, headers=self.headers)
        response.raise_for_status()
        return response.json()

    def encode_balance_and_allowance_overrides(
        self,
        user_address: str,
        tokens: Sequence[str],
    ) -> StateOverrides | None:
        """Ask Tenderly to encode storage-slot overrides for the given tokens.

        Returns:
            Encoded overrides keyed by token address, or None if Tenderly
            returned none
        """
        body = {
            "networkID": str(self.chain_id),
            "stateOverrides": build_balance_and_allowance_overrides(
                user_address, tokens, self.spender
            ),
        }
        data = self._post(self.config.encode_states_url, body)
        encoded: StateOverrides | None = data.get("stateOverrides")
        return encoded

    def simulate_transaction(
        self,
        to: str,
        data: str,
        user_address: str,
        tokens_in: Sequence[str],
    ) -> str:
        """Simulate a transaction with balance/allowance overrides applied.

        Args:
            to: Target contract (the relayer)
            data: Encoded multicall
            user_address: Sender of the simulated transaction
            tokens_in: Tokens whose balance/allowance should be unlimited

        Returns:
            Raw return data of the top-level call (0x-prefixed hex)
        """
        encoded_state_overrides = self.encode_balance_and_allowance_overrides(
            user_address, tokens_in
        )

        # Tenderly expects encoded overrides under "storage" rather than "value"
        state_objects = None
        if encoded_state_overrides:
            state_objects = {
                address: {"storage": override["value"]}
                for address, override in encoded_state_overrides.items()
            }

        body = {
            "network_id": str(self.chain_id),
            "from": user_address,
            "to": to,
            "input": data,
            "save_if_fails": True,
            "state_objects": state_objects,
        }
        logger.info(
            "tenderly_simulation_requested",
            chain_id=self.chain_id,
            to=to,
            token_count=len(tokens_in),
        )
        response = self._post(self.config.simulate_url, body)
        output: str = response["transaction"]["transaction_info"]["call_trace"]["output"]
        return output

    # Alias matching the multicall use case
    simulate_multicall = simulate_transaction

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TenderlyClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["StateOverrides", "TenderlyClient", "build_balance_and_allowance_overrides"]
