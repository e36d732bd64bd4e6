from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any
from .base import ModelBase
from .location import Location

HIGH_DEMAND_THRESHOLD = 12
MEDIUM_DEMAND_THRESHOLD = 6

class DemandLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

def demand_level_for(requests: int,
                     high_threshold: int = HIGH_DEMAND_THRESHOLD,
                     medium_threshold: int = MEDIUM_DEMAND_THRESHOLD) -> DemandLevel:
    """Map an active request count onto a demand level.

    Counts strictly above ``high_threshold`` are high, strictly above
    ``medium_threshold`` medium, anything else low.
    """
    if requests > high_threshold:
        return DemandLevel.HIGH
    if requests > medium_threshold:
        return DemandLevel.MEDIUM
    return DemandLevel.LOW

@dataclass
class DemandZone(ModelBase):
    """Area with an aggregated ride-request count"""
    location: Location
    requests: int
    high_threshold: int = HIGH_DEMAND_THRESHOLD
    medium_threshold: int = MEDIUM_DEMAND_THRESHOLD

    def __post_init__(self):
        self.requests = max(0, int(self.requests))

    @property
    def level(self) -> DemandLevel:
        return demand_level_for(self.requests, self.high_threshold, self.medium_threshold)

    def adjust(self, delta: int) -> DemandLevel:
        """Shift the request count by ``delta``, floored at zero"""
        self.requests = max(0, self.requests + int(delta))
        return self.level

    def __str__(self) -> str:
        return f"Zone[{self.location}|{self.level.value}|req={self.requests}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'location': self.location.to_dict(),
            'requests': self.requests,
            'level': self.level.value,
            'high_threshold': self.high_threshold,
            'medium_threshold': self.medium_threshold
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DemandZone':
        return cls(
            location=Location.from_dict(data['location']),
            requests=data['requests'],
            high_threshold=data.get('high_threshold', HIGH_DEMAND_THRESHOLD),
            medium_threshold=data.get('medium_threshold', MEDIUM_DEMAND_THRESHOLD)
        )
