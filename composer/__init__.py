"""Relayer action composer - Balancer V2 join/exit/swap orchestration."""

from composer.actions import get_actions, order_actions
from composer.simulation import Simulation, SimulationResult, SimulationType

__version__ = "0.1.0"
__all__ = [
    "Simulation",
    "SimulationResult",
    "SimulationType",
    "get_actions",
    "order_actions",
    "__version__",
]
