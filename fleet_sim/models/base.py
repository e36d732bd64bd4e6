# fleet_sim/models/base.py
from datetime import datetime
from enum import Enum
import json
from numpy import int64, floating
from typing import Any, Dict

class SimulationEncoder(json.JSONEncoder):
    """Custom JSON encoder for simulation state classes"""
    def default(self, obj):
        class_name = obj.__class__.__name__

        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, int64):
            return int(obj)
        if isinstance(obj, floating):
            return float(obj)
        if hasattr(obj, 'to_dict') and callable(getattr(obj, 'to_dict')):
            return obj.to_dict()

        raise TypeError(f'Object of type {class_name} is not JSON serializable. '
                       f'Consider implementing to_dict() method or adding specific handling to SimulationEncoder.')

class ModelBase:
    """Base class for all models with common functionality"""

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_json(self) -> str:
        """Convert the object to a JSON string"""
        return json.dumps(self, cls=SimulationEncoder)

    @classmethod
    def from_json(cls, json_str: str) -> 'ModelBase':
        """Create an object from a JSON string"""
        data = json.loads(json_str)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ModelBase':
        raise NotImplementedError
