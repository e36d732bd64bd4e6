from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List
import numpy as np

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.core.simulation.draws import RandomDraws
from fleet_sim.models.state import FleetState
from fleet_sim.models.traffic import CongestionLevel
from fleet_sim.models.vehicle import VehicleStatus
import logging
logger = logging.getLogger(__name__)

@dataclass
class StepResult:
    """What changed during one tick"""
    tick: int
    timestamp: datetime
    rush_hour: bool
    moved: List[str] = field(default_factory=list)
    arrived: List[str] = field(default_factory=list)
    status_changes: Dict[str, str] = field(default_factory=dict)
    traffic_changes: Dict[str, str] = field(default_factory=dict)
    weather_changed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tick': self.tick,
            'timestamp': self.timestamp.isoformat(),
            'rush_hour': self.rush_hour,
            'moved': len(self.moved),
            'arrived': list(self.arrived),
            'status_changes': dict(self.status_changes),
            'traffic_changes': dict(self.traffic_changes),
            'weather_changed': self.weather_changed
        }

class FleetStepper:
    """Advances a FleetState by one tick.

    All randomness comes from the injected generator, so two steppers built
    with equally seeded generators produce identical runs. Entity mutations
    within a tick are disjoint, so the order phases run in only matters for
    the draw sequence.
    """

    def __init__(self, config: FleetSimConfig, rng: np.random.Generator, route_landmarks: List[str]):
        self.config = config
        self.draws = RandomDraws(rng=rng, movement=config.movement, route_landmarks=route_landmarks)
        self._congestion_levels = list(CongestionLevel)

    @property
    def rng(self) -> np.random.Generator:
        return self.draws.rng

    def step(self, state: FleetState, tick: int, current_time: datetime) -> StepResult:
        result = StepResult(
            tick=tick,
            timestamp=current_time,
            rush_hour=self.config.demand.is_rush_hour(current_time.hour)
        )
        self.move_vehicles(state, current_time, result)
        self.flip_statuses(state, current_time, result)
        self.drift_demand(state, result.rush_hour)
        self.drift_traffic(state, result)
        result.weather_changed = self.drift_weather(state)
        state.tick = tick
        logger.debug(
            f"Tick {tick} at {current_time:%H:%M:%S}: moved={len(result.moved)} "
            f"arrived={len(result.arrived)} flipped={len(result.status_changes)} "
            f"traffic={len(result.traffic_changes)} weather={result.weather_changed}"
        )
        return result

    def move_vehicles(self, state: FleetState, current_time: datetime, result: StepResult) -> None:
        """Random-walk moving vehicles and count their eta down"""
        for vehicle in state.vehicles.values():
            if not vehicle.status.is_moving:
                continue
            dlat, dlon = self.draws.displacement()
            vehicle.move_to(vehicle.location.offset(dlat, dlon), current_time)
            result.moved.append(vehicle.id)

            if vehicle.decrement_eta() == 0:
                vehicle.assign(VehicleStatus.AVAILABLE, self.draws.eta(), timestamp=current_time)
                result.arrived.append(vehicle.id)

    def flip_statuses(self, state: FleetState, current_time: datetime, result: StepResult) -> None:
        probability = self.config.movement.status_flip_probability
        for vehicle in state.vehicles.values():
            if not self.draws.chance(probability):
                continue
            new_status = self.draws.status()
            if new_status == vehicle.status:
                continue
            result.status_changes[vehicle.id] = new_status.value
            vehicle.assign(new_status, self.draws.eta(), route=self.draws.route(), timestamp=current_time)

    def drift_demand(self, state: FleetState, rush_hour: bool) -> None:
        demand = self.config.demand
        for zone in state.demand_zones:
            if rush_hour:
                zone.adjust(int(self.rng.integers(0, demand.rush_increment_max + 1)))
            else:
                zone.adjust(-int(self.rng.integers(0, demand.off_peak_decrement_max + 1)))

    def drift_traffic(self, state: FleetState, result: StepResult) -> None:
        probability = self.config.traffic.change_probability
        for record in state.traffic:
            if self.draws.chance(probability):
                record.congestion = self._congestion_levels[int(self.rng.integers(len(self._congestion_levels)))]
                result.traffic_changes[record.area] = record.congestion.value

    def drift_weather(self, state: FleetState) -> bool:
        weather = self.config.weather
        if not self.draws.chance(weather.drift_probability):
            return False
        state.weather.perturb(
            temperature_delta=self.rng.uniform(-weather.temperature_delta, weather.temperature_delta),
            wind_delta=self.rng.uniform(-weather.wind_speed_delta, weather.wind_speed_delta)
        )
        return True
