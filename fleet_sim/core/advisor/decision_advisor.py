from datetime import datetime
from typing import List, Optional
import numpy as np

from fleet_sim.config.config import AdvisorConfig
from fleet_sim.models.decision import (
    DecisionImpact, DecisionLog, DecisionLogEntry, DecisionSource, DecisionTemplate
)
from fleet_sim.models.demand import DemandLevel
from fleet_sim.models.state import FleetState
from fleet_sim.models.traffic import CongestionLevel
from fleet_sim.models.vehicle import VehicleStatus
import logging
logger = logging.getLogger(__name__)

REALLOCATE = DecisionTemplate(
    action="Reallocate vehicles to high-demand areas",
    reason="High demand detected with low availability",
    impact=DecisionImpact.POSITIVE
)
REROUTE = DecisionTemplate(
    action="Reroute vehicles to avoid congestion",
    reason="Traffic congestion affecting multiple areas",
    impact=DecisionImpact.POSITIVE
)
OPTIMIZE_DISTRIBUTION = DecisionTemplate(
    action="Optimize vehicle distribution",
    reason="Excess vehicle availability detected",
    impact=DecisionImpact.NEUTRAL
)

FILLER_CATALOG = (
    DecisionTemplate(
        action="Adjusted fleet coverage based on weather",
        reason="Weather conditions optimal for increased service",
        impact=DecisionImpact.POSITIVE
    ),
    DecisionTemplate(
        action="Fuel optimization protocol activated",
        reason="Multiple vehicles approaching low fuel threshold",
        impact=DecisionImpact.NEUTRAL
    ),
    DecisionTemplate(
        action="Predictive demand analysis updated",
        reason="Historical patterns indicate peak demand incoming",
        impact=DecisionImpact.POSITIVE
    ),
)

class DecisionAdvisor:
    """Emits advisory log entries from threshold rules on a fleet snapshot.

    Two independent channels feed the log on every invocation:

    * the rule channel, where the first matching rule wins
      (reallocate > reroute > optimize distribution);
    * the filler channel, which with ``filler_probability`` appends one
      random entry from a fixed catalog regardless of the fleet state.
    """

    def __init__(self, config: AdvisorConfig, rng: np.random.Generator,
                 log: Optional[DecisionLog] = None):
        self.config = config
        self.rng = rng
        self.log = log if log is not None else DecisionLog(capacity=config.log_capacity)
        self.is_active = True

    def start(self) -> None:
        self.is_active = True

    def pause(self) -> None:
        self.is_active = False

    def reset(self) -> None:
        self.log.clear()

    def evaluate_rules(self, state: FleetState) -> Optional[DecisionTemplate]:
        """Return the template of the first matching rule, if any"""
        available = state.count_status(VehicleStatus.AVAILABLE)
        high_demand_zones = state.count_demand(DemandLevel.HIGH)
        congested_areas = state.count_congestion(CongestionLevel.HIGH)
        fleet_size = len(state.vehicles)

        if (high_demand_zones > self.config.high_demand_zone_threshold
                and available < self.config.low_availability_threshold):
            return REALLOCATE
        if congested_areas > self.config.congestion_threshold:
            return REROUTE
        if available > fleet_size * self.config.excess_availability_ratio:
            return OPTIMIZE_DISTRIBUTION
        return None

    def draw_filler(self) -> Optional[DecisionTemplate]:
        if self.rng.random() >= self.config.filler_probability:
            return None
        return FILLER_CATALOG[int(self.rng.integers(len(FILLER_CATALOG)))]

    def advise(self, state: FleetState, timestamp: Optional[datetime] = None) -> List[DecisionLogEntry]:
        """Evaluate both channels and push any resulting entries onto the log"""
        if not self.is_active:
            return []

        timestamp = timestamp or datetime.now()
        emitted: List[DecisionLogEntry] = []

        rule = self.evaluate_rules(state)
        if rule is not None:
            emitted.append(DecisionLogEntry.from_template(rule, timestamp, DecisionSource.RULE))

        filler = self.draw_filler()
        if filler is not None:
            emitted.append(DecisionLogEntry.from_template(filler, timestamp, DecisionSource.FILLER))

        for entry in emitted:
            self.log.push(entry)
            logger.info(f"Decision: {entry.action} ({entry.impact.value}, {entry.source.value})")
        return emitted
