"""Relayer primitives: chained references and the multicall envelope."""

from composer.relayer.multicall import MULTICALL_SELECTOR, encode_multicall
from composer.relayer.references import (
    OutputReference,
    get_output_ref,
    is_chained_reference,
    to_chained_reference,
)

__all__ = [
    "MULTICALL_SELECTOR",
    "OutputReference",
    "encode_multicall",
    "get_output_ref",
    "is_chained_reference",
    "to_chained_reference",
]
