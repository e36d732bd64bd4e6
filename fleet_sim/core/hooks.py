# fleet_sim/core/hooks.py
from typing import Dict, List, Callable, Any, Optional
from enum import Enum, auto
import logging
from dataclasses import dataclass, field

class HookType(Enum):
    """Points at which presentation adapters are notified"""
    # Lifecycle
    SIMULATION_START = auto()
    SIMULATION_PAUSE = auto()
    SIMULATION_RESET = auto()
    STATUS_CHANGED = auto()

    # Per tick
    TICK_COMPLETED = auto()
    DECISION_MADE = auto()
    METRICS_UPDATE = auto()

    # Configuration
    FLEET_RESIZED = auto()
    SCHEDULE_CHANGED = auto()

@dataclass
class HookRegistration:
    """Registration details for a hook"""
    callback: Callable
    priority: int
    condition: Optional[Callable] = None
    enabled: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

class HookManager:
    """Fan-out of engine notifications to read-only consumers.

    A failing callback is logged and skipped so a broken adapter cannot stop
    the simulation.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._hooks: Dict[HookType, List[HookRegistration]] = {
            hook_type: [] for hook_type in HookType
        }

    def register_hook(self,
                     hook_type: HookType,
                     callback: Callable,
                     priority: int = 0,
                     condition: Optional[Callable] = None,
                     metadata: Optional[Dict[str, Any]] = None) -> None:
        """Register a new hook"""
        if not callable(callback):
            raise ValueError("Callback must be callable")

        registration = HookRegistration(
            callback=callback,
            priority=priority,
            condition=condition,
            metadata=metadata or {}
        )

        self._hooks[hook_type].append(registration)
        # Higher priority runs first
        self._hooks[hook_type].sort(key=lambda x: -x.priority)

        self.logger.debug(
            f"Registered hook for {hook_type.name} with priority {priority}"
        )

    def deregister_hook(self,
                       hook_type: HookType,
                       callback: Callable) -> bool:
        """Remove a registered hook"""
        hooks = self._hooks[hook_type]
        for i, registration in enumerate(hooks):
            if registration.callback == callback:
                hooks.pop(i)
                self.logger.debug(
                    f"Deregistered hook for {hook_type.name}"
                )
                return True
        return False

    def set_enabled(self,
                    hook_type: HookType,
                    callback: Callable,
                    enabled: bool) -> bool:
        for registration in self._hooks[hook_type]:
            if registration.callback == callback:
                registration.enabled = enabled
                return True
        return False

    def call_hooks(self,
                  hook_type: HookType,
                  context: Any,
                  *args,
                  **kwargs) -> None:
        """Call all registered hooks of a specific type"""
        for registration in self._hooks[hook_type]:
            if not registration.enabled:
                continue

            try:
                if registration.condition and not registration.condition(context):
                    continue

                registration.callback(context, *args, **kwargs)

            except Exception as e:
                self.logger.error(
                    f"Error in {hook_type.name} hook: {str(e)}", exc_info=True
                )

    def get_hooks(self,
                 hook_type: HookType) -> List[HookRegistration]:
        """Get all hooks registered for a specific type"""
        return self._hooks[hook_type].copy()

