# tests/test_config.py
import pytest
import yaml

from fleet_sim.config.config import (
    FleetSimConfig, SimulationConfig, MovementConfig, DemandDriftConfig,
    WeatherConfig, AdvisorConfig
)
from fleet_sim.config.config_loader import ConfigLoader
from fleet_sim.config.parameters import ConfigurationError


class TestFleetSimConfig:
    def test_defaults(self):
        config = FleetSimConfig()
        assert config.simulation.fleet_size == 25
        assert config.simulation.tick_period == 3.0
        assert config.simulation.runtime_settings().effective_period == 3.0
        assert config.movement.eta_range == (5, 25)
        assert config.advisor.log_capacity == 10
        assert config.demand.rush_hours == [(8, 10), (17, 19)]

    def test_nested_dicts_are_converted(self):
        config = FleetSimConfig.from_dict({
            'name': 'nested',
            'simulation': {'fleet_size': 40, 'speed_multiplier': 2.0},
            'movement': {'eta_range': [3, 9]},
            'weather': {'temperature_bounds': [18, 35]}
        })
        assert isinstance(config.simulation, SimulationConfig)
        assert config.simulation.fleet_size == 40
        assert config.movement.eta_range == (3, 9)
        assert config.weather.temperature_bounds == (18, 35)

    def test_yaml_round_trip(self, tmp_path):
        config = FleetSimConfig(name="saved")
        config.simulation.fleet_size = 12
        config.simulation.start_time = "2024-01-15T07:30:00"
        path = tmp_path / "saved.yaml"
        config.dump(path)

        loaded = FleetSimConfig.load(path)
        assert loaded.name == "saved"
        assert loaded.simulation.fleet_size == 12
        assert loaded.simulation.start_datetime().hour == 7
        assert loaded.demand.rush_hours == config.demand.rush_hours

    def test_unknown_keys_are_ignored(self, caplog):
        config = FleetSimConfig.from_dict({'simulation': {'fleet_size': 5, 'warp_drive': True}})
        assert config.simulation.fleet_size == 5
        assert "warp_drive" in caplog.text

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            FleetSimConfig.load(path)


class TestValidation:
    @pytest.mark.parametrize("values", [
        {'fleet_size': 0},
        {'fleet_size': -1},
        {'tick_period': 0},
        {'speed_multiplier': 0},
        {'speed_multiplier': -2.0},
    ])
    def test_invalid_runtime_settings(self, values):
        with pytest.raises(ConfigurationError):
            SimulationConfig(**values)

    def test_invalid_time_step_and_start_time(self):
        with pytest.raises(ValueError):
            SimulationConfig(time_step=0)
        with pytest.raises(ValueError):
            SimulationConfig(start_time="not a date")

    def test_invalid_probabilities_and_ranges(self):
        with pytest.raises(ValueError):
            MovementConfig(status_flip_probability=1.5)
        with pytest.raises(ValueError):
            MovementConfig(eta_range=(25, 5))
        with pytest.raises(ValueError):
            MovementConfig(status_weights={"available": 0.0})
        with pytest.raises(ValueError):
            WeatherConfig(wind_speed_bounds=(-5, 30))
        with pytest.raises(ValueError):
            AdvisorConfig(log_capacity=0)
        with pytest.raises(ValueError):
            DemandDriftConfig(rush_hours=[(8, 25)])

    def test_invalid_yaml_values_are_rejected_on_load(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({'simulation': {'tick_period': -3}}))
        with pytest.raises(ConfigurationError):
            FleetSimConfig.load(path)


class TestConfigLoader:
    def test_load_save_and_cache(self, tmp_path):
        loader = ConfigLoader(tmp_path)
        config = FleetSimConfig(description="rush hour study")
        config.simulation.fleet_size = 30
        loader.save(config, "rush.yaml")

        assert loader.available() == ["rush"]
        loaded = loader.load("rush")
        assert loaded.simulation.fleet_size == 30
        assert loaded.description == "rush hour study"
        assert loader.load("rush") is loaded

    def test_name_defaults_to_file_stem(self, tmp_path):
        (tmp_path / "quiet.yaml").write_text("simulation:\n  fleet_size: 8\n")
        loaded = ConfigLoader(tmp_path).load("quiet")
        assert loaded.name == "quiet"

    def test_missing_config(self, tmp_path):
        with pytest.raises(ValueError):
            ConfigLoader(tmp_path).load("absent")
