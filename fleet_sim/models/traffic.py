from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any
from .base import ModelBase

class CongestionLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        return {CongestionLevel.LOW: 1, CongestionLevel.MEDIUM: 2, CongestionLevel.HIGH: 3}[self]

@dataclass
class TrafficRecord(ModelBase):
    area: str
    congestion: CongestionLevel
    incidents: int = 0

    def __post_init__(self):
        if isinstance(self.congestion, str):
            self.congestion = CongestionLevel(self.congestion)
        self.incidents = max(0, int(self.incidents))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'area': self.area,
            'congestion': self.congestion.value,
            'incidents': self.incidents
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrafficRecord':
        return cls(
            area=data['area'],
            congestion=CongestionLevel(data['congestion']),
            incidents=data.get('incidents', 0)
        )
