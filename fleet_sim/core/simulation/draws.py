from typing import List, Sequence
import math
import numpy as np

from fleet_sim.config.config import MovementConfig
from fleet_sim.models.vehicle import VehicleStatus, RoutePair

class RandomDraws:
    """Vehicle-level random draws shared by fleet generation and the stepper"""

    def __init__(self, rng: np.random.Generator, movement: MovementConfig, route_landmarks: Sequence[str]):
        if len(route_landmarks) < 2:
            raise ValueError("At least two landmarks are required to draw routes")
        self.rng = rng
        self.movement = movement
        self.route_landmarks: List[str] = list(route_landmarks)
        self._statuses = [VehicleStatus(name) for name in movement.status_weights]
        weights = np.array(list(movement.status_weights.values()), dtype=float)
        self._status_p = weights / weights.sum()

    def status(self) -> VehicleStatus:
        index = self.rng.choice(len(self._statuses), p=self._status_p)
        return self._statuses[int(index)]

    def eta(self) -> int:
        low, high = self.movement.eta_range
        return int(self.rng.integers(low, high + 1))

    def route(self) -> RoutePair:
        origin, destination = self.rng.choice(len(self.route_landmarks), size=2, replace=False)
        return RoutePair(
            origin=self.route_landmarks[int(origin)],
            destination=self.route_landmarks[int(destination)]
        )

    def fuel(self) -> int:
        low, high = self.movement.fill_fuel_range
        return int(self.rng.integers(low, high + 1))

    def displacement(self) -> tuple:
        """(dlat, dlon) of fixed magnitude along a uniformly random heading"""
        angle = self.rng.random() * 2 * math.pi
        distance = self.movement.step_distance
        return math.cos(angle) * distance, math.sin(angle) * distance

    def chance(self, probability: float) -> bool:
        return bool(self.rng.random() < probability)
