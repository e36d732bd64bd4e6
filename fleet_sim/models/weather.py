from dataclasses import dataclass
from typing import Dict, Any, Tuple
from .base import ModelBase

TEMPERATURE_BOUNDS: Tuple[float, float] = (20.0, 40.0)
WIND_SPEED_BOUNDS: Tuple[float, float] = (0.0, 30.0)

def clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))

@dataclass
class WeatherState(ModelBase):
    """Process-wide weather record, perturbed in place each tick"""
    temperature: float
    wind_speed: float
    humidity: float
    condition: str
    precipitation: float = 0.0
    temperature_bounds: Tuple[float, float] = TEMPERATURE_BOUNDS
    wind_speed_bounds: Tuple[float, float] = WIND_SPEED_BOUNDS

    def __post_init__(self):
        self.temperature_bounds = tuple(self.temperature_bounds)
        self.wind_speed_bounds = tuple(self.wind_speed_bounds)
        self.temperature = clamp(float(self.temperature), self.temperature_bounds)
        self.wind_speed = clamp(float(self.wind_speed), self.wind_speed_bounds)

    def perturb(self, temperature_delta: float, wind_delta: float) -> None:
        """Apply a perturbation, clamping both readings to their bounds"""
        self.temperature = clamp(self.temperature + temperature_delta, self.temperature_bounds)
        self.wind_speed = clamp(self.wind_speed + wind_delta, self.wind_speed_bounds)

    def __str__(self) -> str:
        return (f"Weather[{self.condition}|{self.temperature:.1f}C|"
                f"wind={self.wind_speed:.1f}km/h|hum={self.humidity:.0f}%]")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'temperature': self.temperature,
            'wind_speed': self.wind_speed,
            'humidity': self.humidity,
            'condition': self.condition,
            'precipitation': self.precipitation
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeatherState':
        return cls(
            temperature=data['temperature'],
            wind_speed=data['wind_speed'],
            humidity=data['humidity'],
            condition=data['condition'],
            precipitation=data.get('precipitation', 0.0)
        )
