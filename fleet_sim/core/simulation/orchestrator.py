from typing import Any, Dict, Optional
import logging

from fleet_sim.config.parameters import RuntimeSettings, ConfigurationError
from fleet_sim.core.hooks import HookType
from fleet_sim.core.simulation.engine import SimulationEngine
from fleet_sim.core.simulation.scheduler import TickScheduler
from fleet_sim.models.state import SimulationStatus

logger = logging.getLogger(__name__)

class SimulationOrchestrator:
    """
    Command surface for the hosting application: start, pause, restart and
    the three runtime settings. Owns the tick schedule for one engine.

    ``start`` needs a running asyncio event loop; every other command is
    synchronous and can be called from loop callbacks or coroutines.
    """

    def __init__(self, engine: SimulationEngine):
        self.engine = engine
        self.scheduler = TickScheduler(
            self._on_tick, self.settings.effective_period, on_error=self._on_tick_error
        )
        if not engine.initialized:
            engine.initialize()
        engine.advisor.pause()

    @property
    def settings(self) -> RuntimeSettings:
        """Current runtime settings, read from the engine's configuration"""
        return self.engine.config.simulation.runtime_settings()

    @property
    def status(self) -> SimulationStatus:
        return self.engine.context.status

    def _set_status(self, status: SimulationStatus) -> None:
        previous = self.engine.context.status
        self.engine.context.status = status
        if previous != status:
            logger.info(f"Simulation status {previous.value} -> {status.value}")
            self.engine.hooks.call_hooks(HookType.STATUS_CHANGED, status)

    def _on_tick(self) -> None:
        self.engine.tick()

    def _on_tick_error(self, error: BaseException) -> None:
        logger.error(f"Simulation stopped after failed tick {self.engine.context.tick}: {error}")
        self.engine.advisor.pause()
        self._set_status(SimulationStatus.STOPPED)

    def start(self) -> None:
        """Start or resume ticking from the current state"""
        if self.status == SimulationStatus.RUNNING:
            return
        self.engine.advisor.start()
        self.scheduler.reschedule(self.settings.effective_period)
        self.scheduler.start()
        self._set_status(SimulationStatus.RUNNING)
        self.engine.hooks.call_hooks(HookType.SIMULATION_START, self.settings)

    def resume(self) -> None:
        if self.status == SimulationStatus.PAUSED:
            self.start()

    def pause(self) -> None:
        """Stop scheduling ticks; all state is kept"""
        if self.status != SimulationStatus.RUNNING:
            return
        self.scheduler.stop()
        self.engine.advisor.pause()
        self._set_status(SimulationStatus.PAUSED)
        self.engine.hooks.call_hooks(HookType.SIMULATION_PAUSE, self.engine.context.tick)

    def restart(self) -> None:
        """Cancel the schedule, then rebuild the state from scratch.

        Ticks are synchronous callbacks on the loop thread, so once the
        schedule is cancelled here none can run until ``start`` is called.
        """
        self.scheduler.stop()
        self.engine.restart()
        self.engine.advisor.pause()
        self._set_status(SimulationStatus.STOPPED)

    def configure(
        self,
        fleet_size: Optional[int] = None,
        tick_period: Optional[float] = None,
        speed_multiplier: Optional[float] = None
    ) -> RuntimeSettings:
        """Apply any subset of the runtime settings.

        The whole update is validated before anything changes; on
        ConfigurationError the previous settings and state stay in effect.
        """
        changes: Dict[str, Any] = {
            'fleet_size': fleet_size,
            'tick_period': tick_period,
            'speed_multiplier': speed_multiplier
        }
        try:
            new_settings = self.settings.with_changes(**changes)
        except ConfigurationError as e:
            logger.warning(f"Rejected configuration change {changes}: {e}")
            raise

        if new_settings.fleet_size != self.engine.state_manager.fleet_size:
            self.engine.resize_fleet(new_settings.fleet_size)

        simulation_cfg = self.engine.config.simulation
        simulation_cfg.fleet_size = new_settings.fleet_size
        simulation_cfg.tick_period = new_settings.tick_period
        simulation_cfg.speed_multiplier = new_settings.speed_multiplier

        if new_settings.effective_period != self.scheduler.period:
            self.scheduler.reschedule(new_settings.effective_period)
            self.engine.hooks.call_hooks(HookType.SCHEDULE_CHANGED, new_settings)
            logger.info(f"Tick period now {new_settings.effective_period:.3f}s "
                        f"({new_settings.tick_period}s / {new_settings.speed_multiplier}x)")
        return new_settings

    def set_fleet_size(self, fleet_size: int) -> RuntimeSettings:
        return self.configure(fleet_size=fleet_size)

    def set_tick_period(self, tick_period: float) -> RuntimeSettings:
        return self.configure(tick_period=tick_period)

    def set_speed(self, speed_multiplier: float) -> RuntimeSettings:
        return self.configure(speed_multiplier=speed_multiplier)

    async def shutdown(self) -> None:
        await self.scheduler.stop_and_wait()
        if self.status in (SimulationStatus.RUNNING, SimulationStatus.PAUSED):
            self._set_status(SimulationStatus.STOPPED)
