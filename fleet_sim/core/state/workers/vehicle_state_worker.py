from typing import Dict, List, Optional, Tuple
from datetime import datetime

from fleet_sim.core.state.base import StateWorker
from fleet_sim.core.simulation.draws import RandomDraws
from fleet_sim.config.scenario_definitions import ScenarioDefinition
from fleet_sim.models.location import Location, ServiceArea
from fleet_sim.models.vehicle import Vehicle, VehicleStatus
import logging
logger = logging.getLogger(__name__)

class VehicleStateWorker(StateWorker):
    """Creates the fleet and grows or shrinks it to a target size.

    Identifiers are positional (``FL001`` is the first vehicle), so growing
    after a shrink hands out the same identifiers again.
    """

    def __init__(
        self,
        scenario: ScenarioDefinition,
        service_area: ServiceArea,
        draws: RandomDraws,
        fleet_size: int
    ):
        self.scenario = scenario
        self.service_area = service_area
        self.draws = draws
        self.fleet_size = fleet_size

    def build(self, timestamp: Optional[datetime] = None) -> Dict[str, Vehicle]:
        """Seed vehicles first, then random fill-up to the configured size"""
        timestamp = timestamp or datetime.now()
        vehicles: Dict[str, Vehicle] = {}
        for seed in self.scenario.vehicles:
            vehicles[seed.id] = Vehicle(
                id=seed.id,
                location=Location(lat=seed.lat, lon=seed.lon),
                status=VehicleStatus(seed.status),
                fuel=seed.fuel,
                route=self.draws.route(),
                eta=self.draws.eta(),
                last_updated=timestamp
            )
        self.resize(vehicles, self.fleet_size, timestamp)
        logger.info(f"Initialized fleet with {len(vehicles)} vehicles "
                    f"({min(len(self.scenario.vehicles), self.fleet_size)} seeded)")
        return vehicles

    def create_vehicle(self, vehicle_id: str, timestamp: Optional[datetime] = None) -> Vehicle:
        return Vehicle(
            id=vehicle_id,
            location=self.service_area.sample(self.draws.rng),
            status=self.draws.status(),
            fuel=self.draws.fuel(),
            route=self.draws.route(),
            eta=self.draws.eta(),
            last_updated=timestamp or datetime.now()
        )

    def resize(
        self,
        vehicles: Dict[str, Vehicle],
        target: int,
        timestamp: Optional[datetime] = None
    ) -> Tuple[List[str], List[str]]:
        """Add or remove vehicles in place until ``len(vehicles) == target``.

        Removal pops the most recently added vehicles first.

        Returns:
            (added_ids, removed_ids)
        """
        if target <= 0:
            raise ValueError(f"Fleet size must be positive, got {target}")

        added: List[str] = []
        removed: List[str] = []

        while len(vehicles) < target:
            vehicle_id = self.scenario.vehicle_id(len(vehicles))
            if vehicle_id in vehicles:
                raise RuntimeError(f"Vehicle id {vehicle_id} already in use")
            vehicles[vehicle_id] = self.create_vehicle(vehicle_id, timestamp)
            added.append(vehicle_id)

        if len(vehicles) > target:
            removed = list(vehicles.keys())[target:]
            for vehicle_id in reversed(removed):
                del vehicles[vehicle_id]

        self.fleet_size = target
        if added or removed:
            logger.debug(f"Resized fleet to {target}: +{len(added)} -{len(removed)}")
        return added, removed
