"""Chained references for the Balancer relayer.

A chained reference is a uint256 whose top bytes carry a magic prefix. When the
relayer sees one in place of an amount it reads the value stored under that
key by an earlier call instead of using the number literally.
"""

from pydantic import BaseModel, Field

from composer.constants import (
    CHAINED_REFERENCE_MASK,
    CHAINED_REFERENCE_PREFIX_BITS,
    CHAINED_REFERENCE_READONLY_PREFIX,
    CHAINED_REFERENCE_TEMP_PREFIX,
)

# The prefix occupies the two most significant bytes of the 32-byte word
_PREFIX_SHIFT = 256 - 16


class OutputReference(BaseModel):
    """Marks that output `index` of a call is stored under chained reference `key`.

    Attributes:
        index: Position in the call's asset/amount array whose output is stored
        key: Full chained reference value (prefix + counter)
    """

    index: int = Field(ge=0)
    key: int = Field(ge=0)

    model_config = {"frozen": True}


def to_chained_reference(key: int, is_temporary: bool = True) -> int:
    """Encode a counter value as a chained reference.

    Args:
        key: Reference counter value allocated for this run
        is_temporary: Temporary references are deleted by the relayer after
            the first read; read-only references persist for the transaction.

    Returns:
        The chained reference as an integer
    """
    if key < 0:
        raise ValueError(f"Chained reference key cannot be negative: {key}")
    prefix = CHAINED_REFERENCE_TEMP_PREFIX if is_temporary else CHAINED_REFERENCE_READONLY_PREFIX
    return (prefix << _PREFIX_SHIFT) + key


def is_chained_reference(amount: int | str) -> bool:
    """Check whether an amount is a chained reference rather than a literal."""
    try:
        value = int(amount)
    except ValueError:
        return False
    if value < 0:
        return False
    return value & CHAINED_REFERENCE_MASK == CHAINED_REFERENCE_PREFIX_BITS


def get_output_ref(key: int, index: int) -> OutputReference:
    """Build the output reference storing output `index` under counter `key`."""
    return OutputReference(index=index, key=to_chained_reference(key))


__all__ = [
    "OutputReference",
    "get_output_ref",
    "is_chained_reference",
    "to_chained_reference",
]
