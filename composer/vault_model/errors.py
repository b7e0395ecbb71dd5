"""Vault model error classes."""


class VaultModelError(Exception):
    """Base error for off-chain Vault replay."""

    pass


class UnknownPoolError(VaultModelError):
    """A request references a pool the pools source does not know."""

    pass


class UnresolvedChainedReferenceError(VaultModelError):
    """An amount reads a chained reference no earlier request stored."""

    pass


class UnsupportedSwapKindError(VaultModelError):
    """Only exact-in batch swaps can be replayed."""

    pass
