"""Simulation state package."""
from .status import SimulationStatus
from .fleet_state import FleetState

__all__ = [
    "SimulationStatus",
    "FleetState",
]
