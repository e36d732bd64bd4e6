# fleet_sim/models/metrics.py
from dataclasses import dataclass, asdict
from typing import Dict, Any
import math

def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up"""
    return int(math.floor(value + 0.5))

@dataclass
class PerformanceMetrics:
    """Display metrics derived from the fleet after each tick"""
    fleet_utilization: float = 78.0
    avg_response_time: float = 4.2
    customer_satisfaction: float = 87.0
    fuel_efficiency: float = 12.5
    revenue_per_hour: float = 850.0

    @property
    def performance_score(self) -> int:
        return round_half_up((self.fleet_utilization + self.customer_satisfaction) / 2)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['performance_score'] = self.performance_score
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PerformanceMetrics':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

@dataclass
class FleetStatusCounts:
    available: int = 0
    occupied: int = 0
    enroute: int = 0
    idle: int = 0

    @property
    def total(self) -> int:
        return self.available + self.occupied + self.enroute + self.idle

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data['total'] = self.total
        return data

@dataclass
class DemandDistribution:
    """Weighted demand split used by the demand chart"""
    high: int = 0
    medium: int = 0
    low: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
