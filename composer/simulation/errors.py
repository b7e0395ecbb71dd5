"""Simulation error classes.

Configuration errors are raised before any I/O and are never retried.
Upstream HTTP and RPC errors are not wrapped; they propagate unchanged.
"""


class SimulationError(Exception):
    """Base error for simulation dispatch."""

    pass


class SimulationConfigError(SimulationError):
    """The simulation cannot run with the current configuration."""

    pass


class UnsupportedSimulationTypeError(SimulationConfigError):
    """The requested simulation type is not one of the supported strategies."""

    pass


class MissingVaultModelError(SimulationConfigError):
    """Vault model simulation requested but no pool data service configured."""

    pass


class MissingStaticCallerError(SimulationConfigError):
    """Static simulation requested without a call provider."""

    pass


class TenderlyConfigError(SimulationConfigError):
    """Tenderly credentials are missing."""

    pass


class MissingDeltaError(SimulationError):
    """The vault model produced no delta for a path's root pool BPT."""

    pass
