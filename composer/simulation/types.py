"""Type definitions for simulation dispatch."""

from dataclasses import dataclass
from enum import Enum


class SimulationType(str, Enum):
    """How a composed multicall is validated before submission."""

    TENDERLY = "tenderly"  # Remote forked-chain simulation with state overrides
    VAULT_MODEL = "vault_model"  # Off-chain replay against the Vault replica
    STATIC = "static"  # Read-only eth_call against live state


@dataclass(frozen=True)
class SimulationResult:
    """Outputs of a simulated multicall.

    Every strategy returns this shape.

    Attributes:
        amounts_out: Output amount per requested root output, decimal strings
        total_amount_out: Sum of amounts_out
    """

    amounts_out: list[str]
    total_amount_out: str


__all__ = ["SimulationResult", "SimulationType"]
