# fleet_sim/core/state/base.py
from abc import ABC, abstractmethod
from typing import Any

class StateWorker(ABC):
    """Abstract base class for the builders behind the state manager"""

    @abstractmethod
    def build(self) -> Any:
        """Create this worker's slice of the initial state"""
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__
