"""Decoding of relayer multicall return data."""

from __future__ import annotations

from collections.abc import Sequence

from eth_abi import decode  # type: ignore[attr-defined]

from composer.models.types import hex_to_bytes

from .types import SimulationResult


def decode_multicall_result(result: bytes | str, output_indexes: Sequence[int]) -> SimulationResult:
    """Extract root outputs from multicall return data.

    The multicall returns `bytes[]`, one entry per sub-call. Each requested
    sub-call result is decoded as a single uint256.

    Args:
        result: Raw multicall return data
        output_indexes: Sub-call positions holding the root outputs

    Returns:
        SimulationResult with each output and their sum

    Raises:
        ValueError: If an output index is negative
        IndexError: If an output index is past the last sub-call
    """
    (multicall_result,) = decode(["bytes[]"], hex_to_bytes(result))

    amounts_out: list[str] = []
    total_amount_out = 0
    for output_index in output_indexes:
        if output_index < 0:
            raise ValueError(f"Output index cannot be negative: {output_index}")
        (value,) = decode(["uint256"], multicall_result[output_index])
        amounts_out.append(str(value))
        total_amount_out += value

    return SimulationResult(amounts_out=amounts_out, total_amount_out=str(total_amount_out))


__all__ = ["decode_multicall_result"]
