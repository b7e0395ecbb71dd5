"""Read-only call providers for static multicall simulation."""

from __future__ import annotations

from typing import Protocol

import structlog

logger = structlog.get_logger()


class StaticCaller(Protocol):
    """Executes a read-only call against live chain state.

    No state is persisted and no overrides are applied, so the sender must
    already hold the balances and allowances the call needs.
    """

    def call(self, to: str, data: str, gas_limit: int) -> bytes | str:
        """Return the raw return data of `data` sent to `to`."""
        ...


class Web3StaticCaller:
    """StaticCaller backed by a web3 `eth_call`.

    Args:
        web3_provider: HTTP RPC URL (e.g., "https://eth.llamarpc.com")
        sender: Address the call is made from (the user being simulated)
    """

    def __init__(self, web3_provider: str, sender: str) -> None:
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3StaticCaller. Install with: pip install web3"
            ) from e

        self.w3 = Web3(Web3.HTTPProvider(web3_provider))
        self.sender = Web3.to_checksum_address(sender)

    def call(self, to: str, data: str, gas_limit: int) -> bytes:
        from web3 import Web3

        logger.info("static_call_requested", to=to, gas_limit=gas_limit)
        result = self.w3.eth.call(
            {
                "from": self.sender,
                "to": Web3.to_checksum_address(to),
                "data": data,
                "gas": gas_limit,
            }
        )
        return bytes(result)


__all__ = ["StaticCaller", "Web3StaticCaller"]
