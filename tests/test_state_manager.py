# tests/test_state_manager.py
import pytest

from fleet_sim.config.parameters import ConfigurationError
from fleet_sim.config.scenario_definitions import CHENNAI, get_scenario
from fleet_sim.core.state.manager import StateManager
from fleet_sim.models.demand import DemandLevel
from fleet_sim.models.vehicle import VehicleStatus
from fleet_sim.utils.random_seed_manager import RandomSeedManager


@pytest.fixture
def manager(config, start_time):
    manager = StateManager(config=config, seed_manager=RandomSeedManager(config.simulation.random_seed))
    manager.initialize(start_time)
    return manager


class TestInitialState:
    def test_seed_vehicles_come_first(self, manager):
        state = manager.get_current_state()
        assert len(state.vehicles) == 25
        assert state.vehicle_ids[:5] == ["FL001", "FL002", "FL003", "FL004", "FL005"]
        assert state.vehicles["FL004"].status == VehicleStatus.IDLE
        assert state.vehicles["FL004"].fuel == 45
        assert state.vehicle_ids[-1] == "FL025"

    def test_fill_vehicles_are_inside_service_area(self, manager):
        state = manager.get_current_state()
        for vehicle_id in state.vehicle_ids[5:]:
            vehicle = state.vehicles[vehicle_id]
            assert manager.service_area.contains(vehicle.location)
            assert 40 <= vehicle.fuel <= 99
            assert 5 <= vehicle.eta <= 25

    def test_environment_seeds(self, manager):
        state = manager.get_current_state()
        assert [z.requests for z in state.demand_zones] == [12, 7, 15, 8]
        assert [z.level for z in state.demand_zones] == [
            DemandLevel.MEDIUM, DemandLevel.MEDIUM, DemandLevel.HIGH, DemandLevel.MEDIUM
        ]
        assert [t.area for t in state.traffic] == ["T.Nagar", "OMR", "Anna Nagar", "Marina Beach"]
        assert 20 <= state.weather.temperature <= 40

    def test_small_fleet_trims_seeds(self, config, start_time):
        config.simulation.fleet_size = 3
        manager = StateManager(config=config, seed_manager=RandomSeedManager(1))
        state = manager.initialize(start_time)
        assert state.vehicle_ids == ["FL001", "FL002", "FL003"]

    def test_same_seed_same_fleet(self, config, start_time):
        first = StateManager(config=config, seed_manager=RandomSeedManager(99)).initialize(start_time)
        second = StateManager(config=config, seed_manager=RandomSeedManager(99)).initialize(start_time)
        assert first.to_dict() == second.to_dict()

    def test_uninitialized_manager(self, config):
        manager = StateManager(config=config, seed_manager=RandomSeedManager(1))
        with pytest.raises(RuntimeError):
            manager.get_current_state()


class TestResize:
    def test_grow_then_shrink_restores_ids(self, manager):
        original = manager.get_current_state().vehicle_ids
        added, removed = manager.resize(30)
        assert added == ["FL026", "FL027", "FL028", "FL029", "FL030"]
        assert removed == []

        added, removed = manager.resize(25)
        assert added == []
        assert sorted(removed) == ["FL026", "FL027", "FL028", "FL029", "FL030"]
        assert manager.get_current_state().vehicle_ids == original

    def test_shrink_keeps_remaining_vehicles_untouched(self, manager):
        before = manager.snapshot()
        manager.resize(10)
        state = manager.get_current_state()
        assert state.vehicle_ids == before.vehicle_ids[:10]
        for vehicle_id in state.vehicle_ids:
            assert state.vehicles[vehicle_id] == before.vehicles[vehicle_id]
        assert state.fleet_size == 10

    @pytest.mark.parametrize("target", [0, -5, 2.5, True, "10"])
    def test_invalid_target_is_rejected_without_mutation(self, manager, target):
        before = manager.snapshot()
        with pytest.raises(ConfigurationError):
            manager.resize(target)
        assert manager.get_current_state().to_dict() == before.to_dict()
        assert manager.fleet_size == 25

    def test_reset_uses_current_target(self, manager, start_time):
        manager.resize(8)
        state = manager.reset(start_time)
        assert len(state.vehicles) == 8


def test_scenario_lookup():
    assert get_scenario("chennai") is CHENNAI
    assert CHENNAI.vehicle_id(0) == "FL001"
    with pytest.raises(ValueError):
        get_scenario("atlantis")
