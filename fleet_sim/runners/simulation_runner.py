from pathlib import Path
from typing import Dict, Any, Optional
import asyncio
import json
import logging

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.core.hooks import HookType
from fleet_sim.core.simulation.engine import SimulationEngine, SimulationStep
from fleet_sim.core.simulation.orchestrator import SimulationOrchestrator
from fleet_sim.models.base import SimulationEncoder
from fleet_sim.models.decision import DecisionLogEntry

logger = logging.getLogger(__name__)

class TickLogger:
    """Minimal presentation adapter: reports each tick to the log"""

    def __init__(self, every: int = 1):
        self.every = max(1, every)
        self.ticks_seen = 0
        self.decisions_seen = 0

    def attach(self, engine: SimulationEngine) -> None:
        engine.hooks.register_hook(HookType.TICK_COMPLETED, self.on_tick)
        engine.hooks.register_hook(HookType.DECISION_MADE, self.on_decision)

    def on_tick(self, step: SimulationStep) -> None:
        self.ticks_seen += 1
        if step.tick % self.every == 0:
            logger.info(
                f"Tick {step.tick} [{step.timestamp:%H:%M}] "
                f"utilization={step.metrics.fleet_utilization:.0f}% "
                f"arrived={len(step.result.arrived)} "
                f"decisions={len(step.decisions)}"
            )

    def on_decision(self, entry: DecisionLogEntry) -> None:
        self.decisions_seen += 1

class SimulationRunner:
    """Runs one engine headless or on the real-time schedule and saves results."""

    def __init__(self, config: FleetSimConfig, output_dir: Optional[Path] = None,
                 log_every: int = 10):
        self.config = config
        self.output_dir = Path(output_dir) if output_dir else None
        self.engine = SimulationEngine(config)
        self.engine.initialize()
        self.tick_logger = TickLogger(every=log_every)
        self.tick_logger.attach(self.engine)

    def run(self, ticks: int) -> Dict[str, Any]:
        """Step the engine ``ticks`` times as fast as possible."""
        logger.info(f"Running {ticks} ticks headless for config {self.config.name}")
        self.engine.run_ticks(ticks)
        return self._finish()

    async def run_realtime(self, duration: float) -> Dict[str, Any]:
        """Drive the engine through the tick scheduler for ``duration`` seconds."""
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}")
        orchestrator = SimulationOrchestrator(self.engine)
        logger.info(f"Running in real time for {duration}s "
                    f"(one tick every {orchestrator.settings.effective_period:.3f}s)")
        orchestrator.start()
        try:
            await asyncio.sleep(duration)
        finally:
            await orchestrator.shutdown()
        return self._finish()

    def _finish(self) -> Dict[str, Any]:
        summary = {
            'name': self.config.name,
            'ticks': self.engine.context.tick,
            'seed': self.engine.seed_manager.base_seed,
            'fleet_size': len(self.engine.state.vehicles),
            'decisions': len(self.engine.decision_log),
            'summary': self.engine.dashboard_summary()
        }
        if self.output_dir is not None:
            summary['outputs'] = self.save_results(self.output_dir)
        return summary

    def save_results(self, output_dir: Path) -> Dict[str, str]:
        """Write the final snapshot, the decision log and the metrics history"""
        output_dir.mkdir(parents=True, exist_ok=True)

        snapshot_path = output_dir / "snapshot.json"
        with open(snapshot_path, 'w') as f:
            json.dump(self.engine.to_dict(), f, cls=SimulationEncoder, indent=2)

        metrics_path = output_dir / "metrics.csv"
        self.engine.metrics.to_dataframe().to_csv(metrics_path, index=False)

        config_path = output_dir / "config.yaml"
        self.config.dump(config_path)

        logger.info(f"Results saved to {output_dir}")
        return {
            'snapshot': str(snapshot_path),
            'metrics': str(metrics_path),
            'config': str(config_path)
        }
