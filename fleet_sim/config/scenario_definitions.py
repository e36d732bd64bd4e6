# fleet_sim/config/scenario_definitions.py
from dataclasses import dataclass, field
from typing import Dict, Any, List
from fleet_sim.models.location import Landmark, Location

@dataclass(frozen=True)
class SeedVehicle:
    id: str
    lat: float
    lon: float
    status: str
    fuel: int

@dataclass(frozen=True)
class SeedDemandZone:
    lat: float
    lon: float
    requests: int

@dataclass(frozen=True)
class SeedTraffic:
    area: str
    congestion: str
    incidents: int

@dataclass
class ScenarioDefinition:
    """Fixed initial data a simulation is built from on every (re)start"""
    name: str
    landmarks: Dict[str, tuple]
    route_landmarks: List[str]
    vehicles: List[SeedVehicle]
    demand_zones: List[SeedDemandZone]
    traffic: List[SeedTraffic]
    weather: Dict[str, Any]
    vehicle_id_prefix: str = "FL"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if len(self.route_landmarks) < 2:
            raise ValueError(f"Scenario {self.name} needs at least two route landmarks")
        missing = [name for name in self.route_landmarks if name not in self.landmarks]
        if missing:
            raise ValueError(f"Route landmarks not defined in scenario {self.name}: {missing}")

    def vehicle_id(self, index: int) -> str:
        """Identifier for the vehicle at zero-based position ``index``"""
        return f"{self.vehicle_id_prefix}{index + 1:03d}"

    def get_landmarks(self) -> List[Landmark]:
        return [Landmark(name=name, location=Location(lat=lat, lon=lon))
                for name, (lat, lon) in self.landmarks.items()]

CHENNAI = ScenarioDefinition(
    name="chennai",
    landmarks={
        "T.Nagar": (13.0418, 80.2341),
        "Anna Nagar": (13.0850, 80.2101),
        "OMR": (12.9279, 80.2397),
        "Marina Beach": (13.0827, 80.2707),
        "Central Station": (13.0836, 80.2753),
        "Airport": (13.0067, 80.1648),
        "Guindy": (13.0067, 80.2206),
        "Velachery": (12.9750, 80.2200),
    },
    route_landmarks=["T.Nagar", "Anna Nagar", "OMR", "Marina Beach", "Central Station"],
    vehicles=[
        SeedVehicle("FL001", 13.0850, 80.2101, "available", 85),
        SeedVehicle("FL002", 13.0418, 80.2341, "occupied", 72),
        SeedVehicle("FL003", 12.9750, 80.2200, "enroute", 94),
        SeedVehicle("FL004", 13.0067, 80.1648, "idle", 45),
        SeedVehicle("FL005", 13.0827, 80.2707, "available", 78),
    ],
    demand_zones=[
        SeedDemandZone(13.0418, 80.2341, 12),
        SeedDemandZone(13.0850, 80.2101, 7),
        SeedDemandZone(12.9279, 80.2397, 15),
        SeedDemandZone(13.0836, 80.2753, 8),
    ],
    traffic=[
        SeedTraffic("T.Nagar", "high", 2),
        SeedTraffic("OMR", "medium", 0),
        SeedTraffic("Anna Nagar", "low", 0),
        SeedTraffic("Marina Beach", "medium", 1),
    ],
    weather={
        "temperature": 32.0,
        "condition": "Partly Cloudy",
        "humidity": 78.0,
        "wind_speed": 12.0,
        "precipitation": 0.0,
    },
    metadata={"city": "Chennai", "center": (13.0878, 80.2785)},
)

SCENARIOS: Dict[str, ScenarioDefinition] = {CHENNAI.name: CHENNAI}

def get_scenario(name: str) -> ScenarioDefinition:
    if name not in SCENARIOS:
        raise ValueError(f"Scenario not found: {name}")
    return SCENARIOS[name]
