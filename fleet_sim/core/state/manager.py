from datetime import datetime
from typing import List, Optional, Tuple

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.config.parameters import ConfigurationError
from fleet_sim.config.scenario_definitions import ScenarioDefinition, get_scenario
from fleet_sim.core.simulation.draws import RandomDraws
from fleet_sim.core.state.workers.vehicle_state_worker import VehicleStateWorker
from fleet_sim.core.state.workers.environment_state_worker import EnvironmentStateWorker
from fleet_sim.models.location import ServiceArea
from fleet_sim.models.state import FleetState
from fleet_sim.utils.random_seed_manager import RandomSeedManager
import logging
logger = logging.getLogger(__name__)

class StateManager:
    """Owns the FleetState and the only mutations allowed outside a tick.

    ``initialize``/``reset`` rebuild everything from the scenario, ``resize``
    adds or removes vehicles. Ticks mutate ``state`` through the stepper.
    """

    def __init__(
        self,
        config: FleetSimConfig,
        seed_manager: RandomSeedManager,
        scenario: Optional[ScenarioDefinition] = None
    ):
        self.config = config
        self.seed_manager = seed_manager
        self.scenario = scenario or get_scenario(config.simulation.scenario)
        self.service_area = ServiceArea.from_dict(config.service_area.to_dict())
        self.fleet_size = config.simulation.fleet_size
        self.state: Optional[FleetState] = None
        self.vehicle_worker: Optional[VehicleStateWorker] = None
        self.environment_worker = EnvironmentStateWorker(
            scenario=self.scenario,
            demand=config.demand,
            weather=config.weather
        )

    def initialize(self, timestamp: Optional[datetime] = None) -> FleetState:
        """Build a fresh state with the initial generation routine"""
        draws = RandomDraws(
            rng=self.seed_manager.generator("fleet", context="initialize"),
            movement=self.config.movement,
            route_landmarks=self.scenario.route_landmarks
        )
        self.vehicle_worker = VehicleStateWorker(
            scenario=self.scenario,
            service_area=self.service_area,
            draws=draws,
            fleet_size=self.fleet_size
        )
        vehicles = self.vehicle_worker.build(timestamp)
        demand_zones, traffic, weather = self.environment_worker.build()
        self.state = FleetState(
            vehicles=vehicles,
            demand_zones=demand_zones,
            traffic=traffic,
            weather=weather,
            fleet_size=self.fleet_size,
            metadata={'scenario': self.scenario.name}
        )
        logger.info(f"Fleet state initialized for scenario {self.scenario.name}: "
                    f"{len(vehicles)} vehicles, {len(demand_zones)} demand zones, "
                    f"{len(traffic)} traffic records")
        return self.state

    def reset(self, timestamp: Optional[datetime] = None) -> FleetState:
        """Discard the current state and regenerate it from scratch"""
        logger.info("Resetting fleet state")
        self.state = None
        return self.initialize(timestamp)

    def resize(self, target: int, timestamp: Optional[datetime] = None) -> Tuple[List[str], List[str]]:
        """Grow or shrink the fleet to ``target`` vehicles"""
        if isinstance(target, bool) or not isinstance(target, int) or target <= 0:
            raise ConfigurationError(f"Fleet size must be a positive integer, got {target!r}")
        self.fleet_size = target
        if self.state is None:
            return [], []
        added, removed = self.vehicle_worker.resize(self.state.vehicles, target, timestamp)
        self.state.fleet_size = target
        logger.info(f"Fleet resized to {target} vehicles (added {len(added)}, removed {len(removed)})")
        return added, removed

    def get_current_state(self) -> FleetState:
        if self.state is None:
            raise RuntimeError("State manager not initialized")
        return self.state

    def snapshot(self) -> FleetState:
        """Deep copy of the current state for read-only consumers"""
        return self.get_current_state().copy()
