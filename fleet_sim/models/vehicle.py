from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum
from .base import ModelBase
from .location import Location
import logging
logger = logging.getLogger(__name__)

FUEL_MIN = 0
FUEL_MAX = 100

class VehicleStatus(Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    ENROUTE = "enroute"
    IDLE = "idle"

    @property
    def is_moving(self) -> bool:
        return self in (VehicleStatus.ENROUTE, VehicleStatus.OCCUPIED)

@dataclass
class RoutePair(ModelBase):
    """Origin/destination landmark names for a vehicle's current trip"""
    origin: str
    destination: str

    def __post_init__(self):
        if self.origin == self.destination:
            raise ValueError(f"Route origin and destination must differ, got {self.origin!r}")

    def __str__(self) -> str:
        return f"{self.origin} → {self.destination}"

    def to_dict(self) -> Dict[str, Any]:
        return {'origin': self.origin, 'destination': self.destination}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoutePair':
        return cls(origin=data['origin'], destination=data['destination'])

@dataclass
class Vehicle(ModelBase):
    id: str
    location: Location
    status: VehicleStatus
    fuel: int
    route: RoutePair
    eta: int
    last_updated: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = VehicleStatus(self.status)
        self.fuel = min(FUEL_MAX, max(FUEL_MIN, int(self.fuel)))
        self.eta = max(0, int(self.eta))

    def __str__(self) -> str:
        return (f"Vehicle[{self.id}|{self.status.value}|fuel={self.fuel}%|"
                f"eta={self.eta}min|{self.route}]")

    def move_to(self, location: Location, timestamp: Optional[datetime] = None) -> None:
        self.location = location
        self.touch(timestamp)

    def decrement_eta(self) -> int:
        """Count the eta down by one minute, never below zero"""
        self.eta = max(0, self.eta - 1)
        return self.eta

    def assign(self, status: VehicleStatus, eta: int, route: Optional[RoutePair] = None,
               timestamp: Optional[datetime] = None) -> None:
        """Move the vehicle to a new status with a freshly drawn eta"""
        old_status = self.status
        self.status = status
        self.eta = max(0, int(eta))
        if route is not None:
            self.route = route
        self.touch(timestamp)
        if old_status != status:
            logger.debug(f"Vehicle {self.id} status {old_status.value} -> {status.value}")

    def set_fuel(self, fuel: int) -> None:
        self.fuel = min(FUEL_MAX, max(FUEL_MIN, int(fuel)))

    def touch(self, timestamp: Optional[datetime] = None) -> None:
        self.last_updated = timestamp or datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'location': self.location.to_dict(),
            'status': self.status.value,
            'fuel': self.fuel,
            'route': self.route.to_dict(),
            'route_label': str(self.route),
            'eta': self.eta,
            'last_updated': self.last_updated.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Vehicle':
        return cls(
            id=data['id'],
            location=Location.from_dict(data['location']),
            status=VehicleStatus(data['status']),
            fuel=data['fuel'],
            route=RoutePair.from_dict(data['route']),
            eta=data['eta'],
            last_updated=datetime.fromisoformat(data['last_updated'])
        )
