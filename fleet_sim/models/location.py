from dataclasses import dataclass
from typing import Dict, Any, Tuple
from shapely.geometry import Point, Polygon, box
import numpy as np
from fleet_sim.models.base import ModelBase

@dataclass
class Location(ModelBase):
    """Represents a point on the city map"""
    lat: float
    lon: float

    def __str__(self) -> str:
        return f"Loc[{self.lat:.5f},{self.lon:.5f}]"

    def to_point(self) -> Point:
        """Convert to Shapely Point"""
        return Point(self.lon, self.lat)

    def offset(self, dlat: float, dlon: float) -> 'Location':
        return Location(lat=self.lat + dlat, lon=self.lon + dlon)

    def distance_to(self, other: 'Location') -> float:
        """Calculate the distance between two locations in meters"""
        return haversine_distance(self, other)

    def to_dict(self) -> Dict[str, Any]:
        return {'lat': self.lat, 'lon': self.lon}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Location':
        return cls(lat=float(data['lat']), lon=float(data['lon']))

@dataclass
class Landmark(ModelBase):
    """Named point of interest used for route descriptions"""
    name: str
    location: Location

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'location': self.location.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Landmark':
        return cls(name=data['name'], location=Location.from_dict(data['location']))

@dataclass
class ServiceArea(ModelBase):
    """Rectangular area in which vehicles are placed"""
    south: float
    north: float
    west: float
    east: float

    def __post_init__(self):
        if self.south >= self.north or self.west >= self.east:
            raise ValueError(
                f"Invalid service area bounds: south={self.south}, north={self.north}, "
                f"west={self.west}, east={self.east}"
            )

    @property
    def polygon(self) -> Polygon:
        return box(self.west, self.south, self.east, self.north)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounds as (min_lon, min_lat, max_lon, max_lat)"""
        return self.polygon.bounds

    def contains(self, location: Location) -> bool:
        return self.polygon.covers(location.to_point())

    def sample(self, rng: np.random.Generator) -> Location:
        """Draw a uniformly distributed location inside the area"""
        lat = self.south + rng.random() * (self.north - self.south)
        lon = self.west + rng.random() * (self.east - self.west)
        return Location(lat=lat, lon=lon)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'south': self.south,
            'north': self.north,
            'west': self.west,
            'east': self.east
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceArea':
        return cls(**{k: float(data[k]) for k in ('south', 'north', 'west', 'east')})

def haversine_distance(loc1: Location, loc2: Location) -> float:
    """Calculate Haversine distance between two locations in meters"""
    R = 6371000  # Earth's radius in meters
    lat1, lon1 = np.radians(loc1.lat), np.radians(loc1.lon)
    lat2, lon2 = np.radians(loc2.lat), np.radians(loc2.lon)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat/2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon/2)**2
    c = 2 * np.arcsin(np.sqrt(a))
    return float(R * c)
