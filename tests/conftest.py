# tests/conftest.py
import pytest
from datetime import datetime
from typing import List, Sequence

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.models.demand import DemandZone
from fleet_sim.models.location import Location
from fleet_sim.models.state import FleetState
from fleet_sim.models.traffic import TrafficRecord, CongestionLevel
from fleet_sim.models.vehicle import Vehicle, VehicleStatus, RoutePair
from fleet_sim.models.weather import WeatherState

START_TIME = datetime(2024, 1, 15, 12, 0)

@pytest.fixture
def start_time():
    return START_TIME

@pytest.fixture
def config():
    """Default configuration with a fixed seed and an off-peak start time"""
    cfg = FleetSimConfig(name="test")
    cfg.simulation.start_time = START_TIME.isoformat()
    cfg.simulation.random_seed = 7
    return cfg

@pytest.fixture
def make_state():
    """Factory for hand-built fleet states"""
    def _make_state(
        statuses: Sequence[VehicleStatus],
        requests: Sequence[int] = (3, 3, 3, 3),
        congestion: Sequence[CongestionLevel] = (CongestionLevel.LOW,),
        eta: int = 10
    ) -> FleetState:
        vehicles = {}
        for index, status in enumerate(statuses):
            vehicle_id = f"FL{index + 1:03d}"
            vehicles[vehicle_id] = Vehicle(
                id=vehicle_id,
                location=Location(lat=13.0 + index * 0.001, lon=80.2),
                status=status,
                fuel=80,
                route=RoutePair("T.Nagar", "OMR"),
                eta=eta,
                last_updated=START_TIME
            )
        zones: List[DemandZone] = [
            DemandZone(location=Location(lat=13.0, lon=80.2 + i * 0.01), requests=r)
            for i, r in enumerate(requests)
        ]
        traffic = [
            TrafficRecord(area=f"Area {i}", congestion=level)
            for i, level in enumerate(congestion)
        ]
        weather = WeatherState(temperature=32, wind_speed=12, humidity=78, condition="Partly Cloudy")
        return FleetState(
            vehicles=vehicles,
            demand_zones=zones,
            traffic=traffic,
            weather=weather,
            fleet_size=len(vehicles)
        )

    return _make_state
