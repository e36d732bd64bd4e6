from dataclasses import dataclass, field, is_dataclass
from enum import Enum
from typing import List, Optional, Dict, Any, Union, Tuple
from datetime import datetime, timedelta
from pathlib import Path
from fleet_sim.config.parameters import RuntimeSettings, validate_runtime_settings
import yaml
import logging
logger = logging.getLogger(__name__)

class DataclassYAMLMixin:
    """Mixin class to make dataclasses YAML serializable"""
    def to_dict(self) -> Dict[str, Any]:
        """Convert dataclass instance to a dictionary for YAML serialization"""
        def _serialize(obj: Any) -> Any:
            if is_dataclass(obj):
                return {k: _serialize(v) for k, v in obj.__dict__.items() if not k.startswith('_')}
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, (datetime, timedelta)):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: _serialize(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [_serialize(i) for i in obj]
            elif isinstance(obj, Path):
                return str(obj)
            return obj

        return _serialize(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Any:
        """Create a dataclass instance from a dictionary"""
        def _deserialize(value: Any, field_type: Any) -> Any:
            if is_dataclass(field_type) and isinstance(value, dict):
                return field_type.from_dict(value)
            elif isinstance(field_type, type) and issubclass(field_type, Enum):
                return field_type(value)
            elif field_type == datetime and isinstance(value, str):
                return datetime.fromisoformat(value)
            elif field_type == timedelta:
                return timedelta(seconds=float(value))
            elif field_type == Path:
                return Path(value)
            elif hasattr(field_type, "__origin__"):  # Handle generic types
                if field_type.__origin__ == list:
                    item_type = field_type.__args__[0]
                    return [_deserialize(item, item_type) for item in value]
                elif field_type.__origin__ == tuple:
                    return tuple(value)
                elif field_type.__origin__ == dict:
                    key_type, val_type = field_type.__args__
                    return {_deserialize(k, key_type): _deserialize(v, val_type) for k, v in value.items()}
                elif field_type.__origin__ == Union:
                    if type(None) in field_type.__args__ and value is None:
                        return None
                    for arg in field_type.__args__:
                        if arg != type(None):
                            try:
                                return _deserialize(value, arg)
                            except (TypeError, ValueError):
                                continue
                    raise ValueError(f"Could not deserialize {value} as {field_type}")
            return value

        field_types = {f.name: f.type for f in cls.__dataclass_fields__.values()}
        unknown = set(data) - set(field_types)
        if unknown:
            logger.warning(f"Ignoring unknown {cls.__name__} keys: {sorted(unknown)}")
        kwargs = {key: _deserialize(value, field_types[key]) for key, value in data.items() if key in field_types}
        return cls(**kwargs)

@dataclass
class SimulationConfig(DataclassYAMLMixin):
    """Run-time cadence and fleet size.

    ``tick_period`` is wall-clock seconds between ticks at speed 1.0;
    ``time_step`` is how many seconds of simulated time one tick represents.
    """
    fleet_size: int = 25
    tick_period: float = 3.0
    speed_multiplier: float = 1.0
    time_step: int = 60
    start_time: Optional[str] = None
    random_seed: Optional[int] = 42
    scenario: str = "chennai"

    def __post_init__(self):
        self.runtime_settings()
        if self.time_step <= 0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if self.start_time is not None:
            datetime.fromisoformat(str(self.start_time))

    def runtime_settings(self) -> RuntimeSettings:
        return validate_runtime_settings(
            fleet_size=self.fleet_size,
            tick_period=self.tick_period,
            speed_multiplier=self.speed_multiplier
        )

    def start_datetime(self) -> datetime:
        if self.start_time is None:
            return datetime.now().replace(microsecond=0)
        return datetime.fromisoformat(str(self.start_time))

@dataclass
class MovementConfig(DataclassYAMLMixin):
    """Random-walk movement and status flip parameters"""
    step_distance: float = 0.001
    status_flip_probability: float = 0.02
    status_weights: Dict[str, float] = field(default_factory=lambda: {
        "available": 0.4,
        "occupied": 0.3,
        "enroute": 0.2,
        "idle": 0.1
    })
    eta_range: Tuple[int, int] = (5, 25)
    fill_fuel_range: Tuple[int, int] = (40, 99)

    def __post_init__(self):
        self.eta_range = tuple(self.eta_range)
        self.fill_fuel_range = tuple(self.fill_fuel_range)
        _check_probability("status_flip_probability", self.status_flip_probability)
        if not self.status_weights or any(w < 0 for w in self.status_weights.values()):
            raise ValueError("status_weights must be non-empty and non-negative")
        if sum(self.status_weights.values()) <= 0:
            raise ValueError("status_weights must not all be zero")
        _check_range("eta_range", self.eta_range, minimum=0)
        _check_range("fill_fuel_range", self.fill_fuel_range, minimum=0, maximum=100)

@dataclass
class DemandDriftConfig(DataclassYAMLMixin):
    """Rush-hour windows are inclusive hour ranges on the simulated clock"""
    rush_hours: List[Tuple[int, int]] = field(default_factory=lambda: [(8, 10), (17, 19)])
    rush_increment_max: int = 2
    off_peak_decrement_max: int = 1
    high_threshold: int = 12
    medium_threshold: int = 6

    def __post_init__(self):
        self.rush_hours = [tuple(window) for window in self.rush_hours]
        for window in self.rush_hours:
            _check_range("rush_hours", window, minimum=0, maximum=23)
        if self.rush_increment_max < 0 or self.off_peak_decrement_max < 0:
            raise ValueError("Demand drift magnitudes must be non-negative")
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must not exceed high_threshold")

    def is_rush_hour(self, hour: int) -> bool:
        return any(start <= hour <= end for start, end in self.rush_hours)

@dataclass
class TrafficConfig(DataclassYAMLMixin):
    change_probability: float = 0.05

    def __post_init__(self):
        _check_probability("change_probability", self.change_probability)

@dataclass
class WeatherConfig(DataclassYAMLMixin):
    drift_probability: float = 0.02
    temperature_delta: float = 2.0
    wind_speed_delta: float = 3.0
    temperature_bounds: Tuple[float, float] = (20.0, 40.0)
    wind_speed_bounds: Tuple[float, float] = (0.0, 30.0)

    def __post_init__(self):
        self.temperature_bounds = tuple(self.temperature_bounds)
        self.wind_speed_bounds = tuple(self.wind_speed_bounds)
        _check_probability("drift_probability", self.drift_probability)
        _check_range("temperature_bounds", self.temperature_bounds)
        _check_range("wind_speed_bounds", self.wind_speed_bounds, minimum=0)

@dataclass
class AdvisorConfig(DataclassYAMLMixin):
    """Thresholds for the rule-based decisions and the filler channel"""
    high_demand_zone_threshold: int = 2
    low_availability_threshold: int = 5
    congestion_threshold: int = 1
    excess_availability_ratio: float = 0.6
    filler_probability: float = 0.3
    log_capacity: int = 10

    def __post_init__(self):
        _check_probability("filler_probability", self.filler_probability)
        _check_probability("excess_availability_ratio", self.excess_availability_ratio)
        if self.log_capacity <= 0:
            raise ValueError(f"log_capacity must be positive, got {self.log_capacity}")

@dataclass
class MetricsConfig(DataclassYAMLMixin):
    base_response_time: float = 4.2
    base_fuel_efficiency: float = 12.5
    revenue_base: float = 800.0
    revenue_spread: float = 200.0
    satisfaction_step: float = 2.0
    satisfaction_bounds: Tuple[float, float] = (70.0, 98.0)
    history_length: int = 7
    initial_utilization_history: List[float] = field(
        default_factory=lambda: [65, 72, 78, 85, 79, 82, 78]
    )

    def __post_init__(self):
        self.satisfaction_bounds = tuple(self.satisfaction_bounds)
        _check_range("satisfaction_bounds", self.satisfaction_bounds, minimum=0, maximum=100)
        if self.history_length <= 0:
            raise ValueError(f"history_length must be positive, got {self.history_length}")

@dataclass
class ServiceAreaConfig(DataclassYAMLMixin):
    south: float = 12.8
    north: float = 13.4
    west: float = 80.0
    east: float = 80.6

@dataclass
class LoggingConfig(DataclassYAMLMixin):
    log_dir: str = "logs"
    level: str = "INFO"

@dataclass
class FleetSimConfig(DataclassYAMLMixin):
    name: str = "default"
    description: str = ""
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    movement: MovementConfig = field(default_factory=MovementConfig)
    demand: DemandDriftConfig = field(default_factory=DemandDriftConfig)
    traffic: TrafficConfig = field(default_factory=TrafficConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)
    advisor: AdvisorConfig = field(default_factory=AdvisorConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    service_area: ServiceAreaConfig = field(default_factory=ServiceAreaConfig)
    logs: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Initialize nested configurations"""
        if isinstance(self.simulation, dict):
            self.simulation = SimulationConfig.from_dict(self.simulation)
        if isinstance(self.movement, dict):
            self.movement = MovementConfig.from_dict(self.movement)
        if isinstance(self.demand, dict):
            self.demand = DemandDriftConfig.from_dict(self.demand)
        if isinstance(self.traffic, dict):
            self.traffic = TrafficConfig.from_dict(self.traffic)
        if isinstance(self.weather, dict):
            self.weather = WeatherConfig.from_dict(self.weather)
        if isinstance(self.advisor, dict):
            self.advisor = AdvisorConfig.from_dict(self.advisor)
        if isinstance(self.metrics, dict):
            self.metrics = MetricsConfig.from_dict(self.metrics)
        if isinstance(self.service_area, dict):
            self.service_area = ServiceAreaConfig.from_dict(self.service_area)
        if isinstance(self.logs, dict):
            self.logs = LoggingConfig.from_dict(self.logs)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FleetSimConfig":
        """
        Load a FleetSimConfig from a YAML file.
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        return cls.from_dict(data)

    def dump(self, path: Union[str, Path]) -> None:
        """
        Dump the current FleetSimConfig to a YAML file.
        """
        with open(path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")

def _check_range(name: str, bounds: Tuple[float, float],
                 minimum: Optional[float] = None, maximum: Optional[float] = None) -> None:
    if len(bounds) != 2:
        raise ValueError(f"{name} must be a (low, high) pair, got {bounds}")
    low, high = bounds
    if low > high:
        raise ValueError(f"{name} lower bound exceeds upper bound: {bounds}")
    if minimum is not None and low < minimum:
        raise ValueError(f"{name} lower bound must be >= {minimum}, got {low}")
    if maximum is not None and high > maximum:
        raise ValueError(f"{name} upper bound must be <= {maximum}, got {high}")
