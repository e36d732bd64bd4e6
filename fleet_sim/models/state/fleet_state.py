from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict, List, Any
from ..base import ModelBase
from ..vehicle import Vehicle, VehicleStatus
from ..demand import DemandZone, DemandLevel
from ..traffic import TrafficRecord, CongestionLevel
from ..weather import WeatherState

@dataclass
class FleetState(ModelBase):
    """Everything one tick reads and writes.

    Vehicles are keyed by identifier; the dict keeps insertion order, which
    resizing relies on to drop the most recently added vehicles first.
    """
    vehicles: Dict[str, Vehicle]
    demand_zones: List[DemandZone]
    traffic: List[TrafficRecord]
    weather: WeatherState
    fleet_size: int
    tick: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def count_status(self, status: VehicleStatus) -> int:
        return sum(1 for v in self.vehicles.values() if v.status == status)

    def count_demand(self, level: DemandLevel) -> int:
        return sum(1 for zone in self.demand_zones if zone.level == level)

    def count_congestion(self, level: CongestionLevel) -> int:
        return sum(1 for record in self.traffic if record.congestion == level)

    @property
    def vehicle_ids(self) -> List[str]:
        return list(self.vehicles.keys())

    def copy(self) -> 'FleetState':
        """Deep copy handed to read-only consumers"""
        return deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tick': self.tick,
            'fleet_size': self.fleet_size,
            'vehicles': {vid: vehicle.to_dict() for vid, vehicle in self.vehicles.items()},
            'demand_zones': [zone.to_dict() for zone in self.demand_zones],
            'traffic': [record.to_dict() for record in self.traffic],
            'weather': self.weather.to_dict(),
            'metadata': self.metadata
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FleetState':
        return cls(
            vehicles={
                vid: Vehicle.from_dict(vdata)
                for vid, vdata in data['vehicles'].items()
            },
            demand_zones=[DemandZone.from_dict(z) for z in data['demand_zones']],
            traffic=[TrafficRecord.from_dict(t) for t in data['traffic']],
            weather=WeatherState.from_dict(data['weather']),
            fleet_size=data['fleet_size'],
            tick=data.get('tick', 0),
            metadata=data.get('metadata', {})
        )
