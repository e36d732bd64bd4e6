# fleet_sim/config/parameters.py

from __future__ import annotations
import math
from typing import Any, Dict
from pydantic import BaseModel, Field, ValidationError

class ConfigurationError(ValueError):
    """Raised when a configuration change is rejected at the boundary"""

class RuntimeSettings(BaseModel):
    """Settings the hosting application may change while the simulation exists"""
    fleet_size: int = Field(default=25, gt=0, description="Target number of vehicles")
    tick_period: float = Field(default=3.0, gt=0, allow_inf_nan=False, description="Seconds between ticks at 1x speed")
    speed_multiplier: float = Field(default=1.0, gt=0, allow_inf_nan=False, description="Divides the tick period")

    @property
    def effective_period(self) -> float:
        """Wall-clock seconds between two scheduled ticks"""
        return self.tick_period / self.speed_multiplier

    def as_dict(self) -> Dict[str, Any]:
        return {
            'fleet_size': self.fleet_size,
            'tick_period': self.tick_period,
            'speed_multiplier': self.speed_multiplier
        }

    def with_changes(self, **changes: Any) -> RuntimeSettings:
        """Validate a partial update and return a new settings object.

        The receiver is never modified, so a rejected update leaves the
        previous settings in effect.
        """
        unknown = set(changes) - set(self.as_dict())
        if unknown:
            raise ConfigurationError(f"Unknown runtime settings: {sorted(unknown)}")
        data = self.as_dict()
        data.update({k: v for k, v in changes.items() if v is not None})
        return validate_runtime_settings(**data)

def validate_runtime_settings(**values: Any) -> RuntimeSettings:
    if any(isinstance(v, bool) for v in values.values()):
        raise ConfigurationError(f"Runtime settings must be numeric, got {values}")
    try:
        settings = RuntimeSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
    period = settings.effective_period
    if not math.isfinite(period) or period <= 0:
        raise ConfigurationError(
            f"Tick period {settings.tick_period}s at {settings.speed_multiplier}x "
            f"gives an unusable effective period of {period}s"
        )
    return settings
