"""In-memory stand-in for the relayer's chained reference storage."""

from __future__ import annotations

from collections.abc import Iterable

from composer.relayer.references import is_chained_reference

from .errors import UnresolvedChainedReferenceError


class RelayerModel:
    """Stores values written through output references during one replay."""

    def __init__(self) -> None:
        self.chained_refs: dict[int, int] = {}

    def set_chained_reference_value(self, ref: int | str, value: int) -> None:
        self.chained_refs[int(ref)] = value

    def get_chained_reference_value(self, ref: int | str) -> int:
        """Read a stored value.

        Raises:
            UnresolvedChainedReferenceError: If nothing was stored under `ref`
        """
        try:
            return self.chained_refs[int(ref)]
        except KeyError as err:
            raise UnresolvedChainedReferenceError(
                f"No value stored for chained reference {hex(int(ref))}"
            ) from err

    def do_chained_ref_replacement(self, amount: int | str) -> int:
        """Resolve `amount` if it is a chained reference, else return it as int."""
        if is_chained_reference(amount):
            return self.get_chained_reference_value(amount)
        return int(amount)

    def do_chained_ref_replacements(self, amounts: Iterable[int | str]) -> list[int]:
        return [self.do_chained_ref_replacement(amount) for amount in amounts]
