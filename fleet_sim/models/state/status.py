from enum import Enum

class SimulationStatus(Enum):
    """Possible states of the simulation"""
    INITIALIZED = "initialized"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
