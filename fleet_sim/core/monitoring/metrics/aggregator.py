from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Optional, Any
import numpy as np
import pandas as pd

from fleet_sim.config.config import MetricsConfig, DemandDriftConfig
from fleet_sim.models.demand import DemandLevel
from fleet_sim.models.metrics import (
    PerformanceMetrics, FleetStatusCounts, DemandDistribution, round_half_up
)
from fleet_sim.models.state import FleetState
from fleet_sim.models.traffic import CongestionLevel
from fleet_sim.models.vehicle import VehicleStatus
import logging

logger = logging.getLogger(__name__)

DEMAND_CHART_WEIGHTS = {DemandLevel.HIGH: 35, DemandLevel.MEDIUM: 30, DemandLevel.LOW: 25}

class MetricsAggregator:
    """Derives display metrics from the fleet state.

    Data only flows from the state into the metrics; nothing here is read
    back by the stepper or the advisor. Apart from utilization the values are
    bounded random walks around fixed baselines.
    """

    def __init__(self, config: MetricsConfig, rng: np.random.Generator,
                 demand_config: Optional[DemandDriftConfig] = None):
        self.config = config
        self.rng = rng
        self.demand_config = demand_config or DemandDriftConfig()
        self.current = PerformanceMetrics()
        self.utilization_history: Deque[float] = deque(
            config.initial_utilization_history[-config.history_length:],
            maxlen=config.history_length
        )
        self._records: List[Dict[str, Any]] = []

    def update(self, state: FleetState, timestamp: Optional[datetime] = None) -> PerformanceMetrics:
        """Compute this tick's metrics and append them to the history"""
        counts = self.status_counts(state)
        low, high = self.config.satisfaction_bounds
        previous = self.current

        self.current = PerformanceMetrics(
            fleet_utilization=self.utilization(state),
            avg_response_time=round(self.config.base_response_time + self.rng.uniform(-1, 1), 1),
            customer_satisfaction=float(np.clip(
                previous.customer_satisfaction
                + self.rng.uniform(-self.config.satisfaction_step, self.config.satisfaction_step),
                low, high
            )),
            fuel_efficiency=round(self.config.base_fuel_efficiency + self.rng.uniform(-1, 1), 1),
            revenue_per_hour=float(round_half_up(self.config.revenue_base + self.rng.random() * self.config.revenue_spread))
        )
        self.utilization_history.append(self.current.fleet_utilization)

        record = {'timestamp': timestamp or datetime.now(), 'tick': state.tick}
        record.update(self.current.to_dict())
        record.update({f"vehicles_{k}": v for k, v in counts.to_dict().items()})
        record['average_traffic'] = self.average_traffic_level(state).value
        self._records.append(record)
        return self.current

    @staticmethod
    def utilization(state: FleetState) -> float:
        """Occupied share of the fleet, in whole percent"""
        total = len(state.vehicles)
        if total == 0:
            return 0.0
        return float(round_half_up(state.count_status(VehicleStatus.OCCUPIED) / total * 100))

    @staticmethod
    def status_counts(state: FleetState) -> FleetStatusCounts:
        return FleetStatusCounts(
            available=state.count_status(VehicleStatus.AVAILABLE),
            occupied=state.count_status(VehicleStatus.OCCUPIED),
            enroute=state.count_status(VehicleStatus.ENROUTE),
            idle=state.count_status(VehicleStatus.IDLE)
        )

    @staticmethod
    def demand_distribution(state: FleetState) -> DemandDistribution:
        return DemandDistribution(
            high=state.count_demand(DemandLevel.HIGH) * DEMAND_CHART_WEIGHTS[DemandLevel.HIGH],
            medium=state.count_demand(DemandLevel.MEDIUM) * DEMAND_CHART_WEIGHTS[DemandLevel.MEDIUM],
            low=state.count_demand(DemandLevel.LOW) * DEMAND_CHART_WEIGHTS[DemandLevel.LOW]
        )

    @staticmethod
    def average_traffic_level(state: FleetState) -> CongestionLevel:
        if not state.traffic:
            return CongestionLevel.LOW
        average = sum(record.congestion.weight for record in state.traffic) / len(state.traffic)
        if average <= 1.5:
            return CongestionLevel.LOW
        if average <= 2.5:
            return CongestionLevel.MEDIUM
        return CongestionLevel.HIGH

    def peak_period(self, timestamp: datetime) -> str:
        """Label for the rush window ``timestamp`` falls in"""
        windows = self.demand_config.rush_hours
        labels = ["Morning Rush", "Evening Rush"]
        for index, (start, end) in enumerate(windows):
            if start <= timestamp.hour <= end:
                return labels[index] if index < len(labels) else "Rush Hour"
        return "Off Peak"

    def summary(self, state: FleetState, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        """Everything a dashboard shows besides the map, as plain data"""
        timestamp = timestamp or datetime.now()
        return {
            'metrics': self.current.to_dict(),
            'status_counts': self.status_counts(state).to_dict(),
            'demand_distribution': self.demand_distribution(state).to_dict(),
            'average_traffic': self.average_traffic_level(state).value,
            'peak_period': self.peak_period(timestamp),
            'utilization_history': list(self.utilization_history)
        }

    def to_dataframe(self, start_time: Optional[datetime] = None,
                     end_time: Optional[datetime] = None) -> pd.DataFrame:
        """Metrics history with one row per tick"""
        if not self._records:
            return pd.DataFrame()

        df = pd.DataFrame(self._records)
        df['timestamp'] = pd.to_datetime(df['timestamp'])
        if start_time is not None:
            df = df[df['timestamp'] >= start_time]
        if end_time is not None:
            df = df[df['timestamp'] <= end_time]
        return df.reset_index(drop=True)
