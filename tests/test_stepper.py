# tests/test_stepper.py
import pytest
from datetime import datetime, timedelta

import numpy as np

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.core.simulation.stepper import FleetStepper
from fleet_sim.models.demand import DemandLevel, demand_level_for
from fleet_sim.models.traffic import CongestionLevel
from fleet_sim.models.vehicle import VehicleStatus, FUEL_MIN, FUEL_MAX

ROUTE_LANDMARKS = ["T.Nagar", "Anna Nagar", "OMR", "Marina Beach", "Central Station"]
OFF_PEAK = datetime(2024, 1, 15, 12, 0)
RUSH = datetime(2024, 1, 15, 8, 30)


def _stepper(config: FleetSimConfig, seed: int = 3) -> FleetStepper:
    return FleetStepper(config=config, rng=np.random.default_rng(seed), route_landmarks=ROUTE_LANDMARKS)


class TestMovement:
    def test_only_moving_vehicles_move(self, make_state):
        config = FleetSimConfig()
        config.movement.status_flip_probability = 0.0
        state = make_state([VehicleStatus.AVAILABLE, VehicleStatus.ENROUTE,
                            VehicleStatus.OCCUPIED, VehicleStatus.IDLE])
        before = {vid: v.location for vid, v in state.vehicles.items()}

        result = _stepper(config).step(state, 1, OFF_PEAK)

        assert sorted(result.moved) == ["FL002", "FL003"]
        assert state.vehicles["FL001"].location == before["FL001"]
        assert state.vehicles["FL004"].location == before["FL004"]
        moved = state.vehicles["FL002"]
        assert moved.location.distance_to(before["FL002"]) > 0
        assert moved.eta == 9
        assert moved.last_updated == OFF_PEAK

    def test_step_distance(self, make_state):
        config = FleetSimConfig()
        config.movement.status_flip_probability = 0.0
        state = make_state([VehicleStatus.ENROUTE])
        origin = state.vehicles["FL001"].location

        _stepper(config).step(state, 1, OFF_PEAK)

        location = state.vehicles["FL001"].location
        displacement = np.hypot(location.lat - origin.lat, location.lon - origin.lon)
        assert displacement == pytest.approx(config.movement.step_distance)

    def test_arrival_makes_vehicle_available(self, make_state):
        config = FleetSimConfig()
        config.movement.status_flip_probability = 0.0
        state = make_state([VehicleStatus.ENROUTE], eta=1)

        result = _stepper(config).step(state, 1, OFF_PEAK)

        vehicle = state.vehicles["FL001"]
        assert result.arrived == ["FL001"]
        assert vehicle.status == VehicleStatus.AVAILABLE
        low, high = config.movement.eta_range
        assert low <= vehicle.eta <= high

    def test_status_flip_draws_new_eta_and_route(self, make_state):
        config = FleetSimConfig()
        config.movement.status_flip_probability = 1.0
        config.movement.status_weights = {"idle": 1.0}
        state = make_state([VehicleStatus.AVAILABLE, VehicleStatus.IDLE])

        result = _stepper(config).step(state, 1, OFF_PEAK)

        assert result.status_changes == {"FL001": "idle"}
        flipped = state.vehicles["FL001"]
        assert flipped.status == VehicleStatus.IDLE
        assert flipped.route.origin != flipped.route.destination
        assert 5 <= flipped.eta <= 25

    def test_invariants_hold_over_many_ticks(self, make_state):
        config = FleetSimConfig()
        config.movement.status_flip_probability = 0.3
        config.weather.drift_probability = 1.0
        state = make_state([VehicleStatus.ENROUTE] * 5 + [VehicleStatus.OCCUPIED] * 5
                           + [VehicleStatus.AVAILABLE] * 5, eta=3)
        stepper = _stepper(config)

        now = OFF_PEAK
        for tick in range(1, 301):
            now += timedelta(minutes=1)
            stepper.step(state, tick, now)
            for vehicle in state.vehicles.values():
                assert FUEL_MIN <= vehicle.fuel <= FUEL_MAX
                assert vehicle.eta >= 0
            assert 20 <= state.weather.temperature <= 40
            assert 0 <= state.weather.wind_speed <= 30
            for zone in state.demand_zones:
                assert zone.requests >= 0
                assert zone.level == demand_level_for(zone.requests)
        assert state.tick == 300


class TestDemandDrift:
    def test_rush_hour_never_decreases(self, make_state):
        config = FleetSimConfig()
        state = make_state([VehicleStatus.IDLE], requests=(0, 5, 10, 15))
        before = [z.requests for z in state.demand_zones]

        result = _stepper(config).step(state, 1, RUSH)

        assert result.rush_hour
        after = [z.requests for z in state.demand_zones]
        for old, new in zip(before, after):
            assert old <= new <= old + config.demand.rush_increment_max

    def test_off_peak_never_increases(self, make_state):
        config = FleetSimConfig()
        state = make_state([VehicleStatus.IDLE], requests=(0, 5, 10, 15))
        before = [z.requests for z in state.demand_zones]

        result = _stepper(config).step(state, 1, OFF_PEAK)

        assert not result.rush_hour
        after = [z.requests for z in state.demand_zones]
        for old, new in zip(before, after):
            assert max(0, old - config.demand.off_peak_decrement_max) <= new <= old

    def test_sustained_rush_builds_high_demand(self, make_state):
        config = FleetSimConfig()
        state = make_state([VehicleStatus.IDLE], requests=(8, 8, 8, 8))
        stepper = _stepper(config)
        for tick in range(1, 61):
            stepper.step(state, tick, RUSH)
        assert state.count_demand(DemandLevel.HIGH) == 4

    @pytest.mark.parametrize("hour,expected", [
        (7, False), (8, True), (10, True), (11, False), (16, False), (17, True), (19, True), (20, False)
    ])
    def test_rush_windows_are_inclusive(self, hour, expected):
        assert FleetSimConfig().demand.is_rush_hour(hour) is expected


class TestEnvironmentDrift:
    def test_traffic_changes_use_known_levels(self, make_state):
        config = FleetSimConfig()
        config.traffic.change_probability = 1.0
        state = make_state([VehicleStatus.IDLE], congestion=[CongestionLevel.LOW] * 4)

        result = _stepper(config).step(state, 1, OFF_PEAK)

        assert set(result.traffic_changes) == {r.area for r in state.traffic}
        assert all(isinstance(r.congestion, CongestionLevel) for r in state.traffic)

    def test_no_weather_drift_when_disabled(self, make_state):
        config = FleetSimConfig()
        config.weather.drift_probability = 0.0
        state = make_state([VehicleStatus.IDLE])
        before = (state.weather.temperature, state.weather.wind_speed)

        stepper = _stepper(config)
        for tick in range(1, 51):
            assert not stepper.step(state, tick, OFF_PEAK).weather_changed
        assert (state.weather.temperature, state.weather.wind_speed) == before


def test_same_seed_same_run(make_state):
    config = FleetSimConfig()
    config.movement.status_flip_probability = 0.2
    states = [make_state([VehicleStatus.ENROUTE, VehicleStatus.AVAILABLE, VehicleStatus.OCCUPIED])
              for _ in range(2)]
    for state in states:
        stepper = _stepper(config, seed=11)
        for tick in range(1, 41):
            stepper.step(state, tick, OFF_PEAK + timedelta(minutes=tick))
    assert states[0].to_dict() == states[1].to_dict()
