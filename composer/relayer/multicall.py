"""Relayer multicall envelope encoding."""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]

from composer.models.types import hex_to_bytes

# multicall(bytes[])
MULTICALL_SELECTOR = bytes.fromhex("ac9650d8")


def encode_multicall(calls: list[bytes | str]) -> str:
    """Wrap already-encoded relayer calls into a single multicall.

    Individual call encoding belongs to the caller; this only builds the
    outer `multicall(bytes[])` envelope executed by the relayer.

    Args:
        calls: Encoded calldata for each sub-call, in execution order

    Returns:
        0x-prefixed calldata for the relayer
    """
    encoded_params = encode(["bytes[]"], [[hex_to_bytes(call) for call in calls]])
    return "0x" + (MULTICALL_SELECTOR + encoded_params).hex()


__all__ = ["MULTICALL_SELECTOR", "encode_multicall"]
