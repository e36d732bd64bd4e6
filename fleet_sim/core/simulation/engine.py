from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
import time

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.core.advisor.decision_advisor import DecisionAdvisor
from fleet_sim.core.hooks import HookManager, HookType
from fleet_sim.core.monitoring.metrics.aggregator import MetricsAggregator
from fleet_sim.core.simulation.context import SimulationContext
from fleet_sim.core.simulation.stepper import FleetStepper, StepResult
from fleet_sim.core.state.manager import StateManager
from fleet_sim.models.decision import DecisionLogEntry, DecisionLog
from fleet_sim.models.metrics import PerformanceMetrics
from fleet_sim.models.state import FleetState, SimulationStatus
from fleet_sim.utils.random_seed_manager import RandomSeedManager

import logging
logger = logging.getLogger(__name__)

@dataclass
class SimulationStep:
    """Represents the result of a single simulation step"""
    tick: int
    timestamp: datetime
    result: StepResult
    decisions: List[DecisionLogEntry] = field(default_factory=list)
    metrics: Optional[PerformanceMetrics] = None
    execution_time: float = 0.0  # in seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tick': self.tick,
            'timestamp': self.timestamp.isoformat(),
            'result': self.result.to_dict(),
            'decisions': [d.to_dict() for d in self.decisions],
            'metrics': self.metrics.to_dict() if self.metrics else None,
            'execution_time': self.execution_time
        }

    def __str__(self) -> str:
        return (f"SimulationStep(tick={self.tick}, time={self.timestamp}, "
                f"decisions={len(self.decisions)}, "
                f"exec_time={self.execution_time:.4f}s)")

class SimulationEngine:
    """
    Explicit simulation instance holding all state. The hosting application
    builds one and hands it to the scheduler and to presentation adapters;
    adapters only read what the engine returns or pushes through hooks.
    """

    def __init__(
        self,
        config: Optional[FleetSimConfig] = None,
        seed_manager: Optional[RandomSeedManager] = None,
        hooks: Optional[HookManager] = None
    ):
        self.config = config or FleetSimConfig()
        self.seed_manager = seed_manager or RandomSeedManager(self.config.simulation.random_seed)
        self.hooks = hooks or HookManager()

        self.state_manager = StateManager(config=self.config, seed_manager=self.seed_manager)
        self.context = SimulationContext(
            start_time=self.config.simulation.start_datetime(),
            time_step=timedelta(seconds=self.config.simulation.time_step)
        )
        self.decision_log = DecisionLog(capacity=self.config.advisor.log_capacity)
        self.stepper: Optional[FleetStepper] = None
        self.advisor: Optional[DecisionAdvisor] = None
        self.metrics: Optional[MetricsAggregator] = None

        self.total_steps_executed = 0
        self.initialized = False

    def initialize(self) -> FleetState:
        """Build the initial state and fresh random streams"""
        self._build_components()
        state = self.state_manager.initialize(self.context.current_time)
        self.metrics.update(state, self.context.current_time)
        self.initialized = True
        logger.info(f"Simulation engine initialized (seed={self.seed_manager.base_seed}, "
                    f"fleet={len(state.vehicles)})")
        return state

    def _build_components(self) -> None:
        route_landmarks = self.state_manager.scenario.route_landmarks
        self.stepper = FleetStepper(
            config=self.config,
            rng=self.seed_manager.generator("stepper"),
            route_landmarks=route_landmarks
        )
        self.advisor = DecisionAdvisor(
            config=self.config.advisor,
            rng=self.seed_manager.generator("advisor"),
            log=self.decision_log
        )
        self.metrics = MetricsAggregator(
            config=self.config.metrics,
            rng=self.seed_manager.generator("metrics"),
            demand_config=self.config.demand
        )

    @property
    def state(self) -> FleetState:
        return self.state_manager.get_current_state()

    @property
    def status(self) -> SimulationStatus:
        return self.context.status

    def tick(self) -> SimulationStep:
        """Advance the simulation by exactly one tick."""
        if not self.initialized:
            raise RuntimeError("Engine must be initialized before ticking")

        step_start = time.perf_counter()
        timestamp = self.context.advance_time()
        state = self.state

        result = self.stepper.step(state, self.context.tick, timestamp)
        decisions = self.advisor.advise(state, timestamp)
        metrics = self.metrics.update(state, timestamp)
        self.total_steps_executed += 1

        step = SimulationStep(
            tick=self.context.tick,
            timestamp=timestamp,
            result=result,
            decisions=decisions,
            metrics=metrics,
            execution_time=time.perf_counter() - step_start
        )

        for entry in decisions:
            self.hooks.call_hooks(HookType.DECISION_MADE, entry)
        self.hooks.call_hooks(HookType.METRICS_UPDATE, metrics)
        self.hooks.call_hooks(HookType.TICK_COMPLETED, step)
        return step

    def run_ticks(self, count: int) -> List[SimulationStep]:
        if count < 0:
            raise ValueError(f"Tick count must be non-negative, got {count}")
        return [self.tick() for _ in range(count)]

    def resize_fleet(self, target: int) -> None:
        added, removed = self.state_manager.resize(target, self.context.current_time)
        self.config.simulation.fleet_size = target
        self.hooks.call_hooks(HookType.FLEET_RESIZED, {
            'fleet_size': target,
            'added': added,
            'removed': removed
        })

    def restart(self) -> FleetState:
        """Synchronous full reset; reproduces the initial run for the same seed."""
        logger.info("Restarting simulation engine")
        self.context.reset(self.config.simulation.start_datetime())
        self.decision_log.clear()
        self.total_steps_executed = 0
        state = self.initialize()
        self.hooks.call_hooks(HookType.SIMULATION_RESET, state.copy())
        return state

    def snapshot(self) -> FleetState:
        return self.state_manager.snapshot()

    def recent_decisions(self, limit: Optional[int] = None) -> List[DecisionLogEntry]:
        return self.decision_log.recent(limit)

    def dashboard_summary(self) -> Dict[str, Any]:
        return self.metrics.summary(self.state, self.context.current_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'tick': self.context.tick,
            'current_time': self.context.current_time.isoformat(),
            'seed': self.seed_manager.base_seed,
            'state': self.state.to_dict(),
            'landmarks': [landmark.to_dict() for landmark in self.state_manager.scenario.get_landmarks()],
            'decisions': self.decision_log.to_dict(),
            'summary': self.dashboard_summary()
        }
