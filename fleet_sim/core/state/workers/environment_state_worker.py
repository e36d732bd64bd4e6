from typing import List, Tuple

from fleet_sim.core.state.base import StateWorker
from fleet_sim.config.config import DemandDriftConfig, WeatherConfig
from fleet_sim.config.scenario_definitions import ScenarioDefinition
from fleet_sim.models.demand import DemandZone
from fleet_sim.models.location import Location
from fleet_sim.models.traffic import TrafficRecord, CongestionLevel
from fleet_sim.models.weather import WeatherState

class EnvironmentStateWorker(StateWorker):
    """Builds demand zones, traffic records and weather from the scenario"""

    def __init__(self, scenario: ScenarioDefinition, demand: DemandDriftConfig, weather: WeatherConfig):
        self.scenario = scenario
        self.demand = demand
        self.weather = weather

    def build(self) -> Tuple[List[DemandZone], List[TrafficRecord], WeatherState]:
        return self.build_demand_zones(), self.build_traffic(), self.build_weather()

    def build_demand_zones(self) -> List[DemandZone]:
        return [
            DemandZone(
                location=Location(lat=seed.lat, lon=seed.lon),
                requests=seed.requests,
                high_threshold=self.demand.high_threshold,
                medium_threshold=self.demand.medium_threshold
            )
            for seed in self.scenario.demand_zones
        ]

    def build_traffic(self) -> List[TrafficRecord]:
        return [
            TrafficRecord(
                area=seed.area,
                congestion=CongestionLevel(seed.congestion),
                incidents=seed.incidents
            )
            for seed in self.scenario.traffic
        ]

    def build_weather(self) -> WeatherState:
        seed = self.scenario.weather
        return WeatherState(
            temperature=seed["temperature"],
            wind_speed=seed["wind_speed"],
            humidity=seed["humidity"],
            condition=seed["condition"],
            precipitation=seed.get("precipitation", 0.0),
            temperature_bounds=self.weather.temperature_bounds,
            wind_speed_bounds=self.weather.wind_speed_bounds
        )
