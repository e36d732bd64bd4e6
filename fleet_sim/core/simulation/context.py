# core/simulation/context.py
from datetime import datetime, timedelta
import logging

from fleet_sim.models.state import SimulationStatus

logger = logging.getLogger(__name__)

class SimulationContext:
    """
    Simulated clock and lifecycle status for one engine.
    The clock only moves when a tick runs, never with wall time.
    """

    def __init__(self, start_time: datetime, time_step: timedelta):
        self.start_time = start_time
        self.time_step = time_step
        self.current_time = start_time
        self.tick = 0
        self.status = SimulationStatus.INITIALIZED
        self._validate_times()

    def _validate_times(self) -> None:
        if self.time_step.total_seconds() <= 0:
            raise ValueError("Time step must be positive")

    def advance_time(self) -> datetime:
        """Advance simulation time by one time step."""
        self.tick += 1
        self.current_time += self.time_step
        return self.current_time

    def reset(self, start_time: datetime) -> None:
        self.start_time = start_time
        self.current_time = start_time
        self.tick = 0
        self.status = SimulationStatus.INITIALIZED

    @property
    def simulation_time(self) -> timedelta:
        """Get current simulation time as duration from start"""
        return self.current_time - self.start_time
