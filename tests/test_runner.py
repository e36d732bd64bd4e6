# tests/test_runner.py
import asyncio
import json
import logging

import pandas as pd
import pytest
from click.testing import CliRunner

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.core.logging_config import configure_logging, cleanup_logging
from fleet_sim.models.state import SimulationStatus
from fleet_sim.runners.simulation_runner import SimulationRunner
from scripts.run_simulation import main


class TestSimulationRunner:
    def test_headless_run_writes_outputs(self, config, tmp_path):
        runner = SimulationRunner(config, output_dir=tmp_path / "out", log_every=5)
        result = runner.run(25)

        assert result['ticks'] == 25
        assert result['fleet_size'] == 25
        assert runner.tick_logger.ticks_seen == 25

        with open(result['outputs']['snapshot']) as f:
            snapshot = json.load(f)
        assert snapshot['tick'] == 25
        assert len(snapshot['state']['vehicles']) == 25

        df = pd.read_csv(result['outputs']['metrics'])
        assert len(df) == 26
        assert FleetSimConfig.load(result['outputs']['config']).name == config.name

    def test_run_without_output_dir(self, config):
        result = SimulationRunner(config).run(3)
        assert 'outputs' not in result
        assert result['summary']['peak_period'] == "Off Peak"

    def test_realtime_run(self, config):
        config.simulation.tick_period = 0.01
        runner = SimulationRunner(config)
        result = asyncio.run(runner.run_realtime(0.1))
        assert result['ticks'] > 0
        assert runner.engine.status == SimulationStatus.STOPPED

    def test_realtime_rejects_non_positive_duration(self, config):
        runner = SimulationRunner(config)
        with pytest.raises(ValueError):
            asyncio.run(runner.run_realtime(0))


class TestCommandLine:
    def test_run_from_yaml(self, config, tmp_path):
        config_path = tmp_path / "cli.yaml"
        config.dump(config_path)

        result = CliRunner().invoke(main, [
            str(config_path), '--ticks', '10', '--seed', '3',
            '--output-dir', str(tmp_path / "results")
        ])

        assert result.exit_code == 0, result.output
        run_dirs = list((tmp_path / "results" / config.name).iterdir())
        assert len(run_dirs) == 1
        assert (run_dirs[0] / "snapshot.json").exists()
        assert (run_dirs[0] / "logs" / "modules").is_dir()

    def test_invalid_fleet_size(self, tmp_path):
        result = CliRunner().invoke(main, ['--fleet-size', '0', '--output-dir', str(tmp_path)])
        assert result.exit_code != 0
        assert "fleet_size" in result.output


def test_configure_logging_writes_module_files(tmp_path):
    configure_logging(tmp_path, log_level="DEBUG")
    try:
        logging.getLogger("fleet_sim.core.simulation.engine").info("hello")
    finally:
        cleanup_logging()
    assert (tmp_path / "modules" / "fleet_sim" / "core" / "simulation" / "engine" / "module.log").exists()
    assert logging.getLogger().handlers == []
