#!/usr/bin/env python3
import asyncio
import click
from pathlib import Path
import logging
from datetime import datetime
import json
from typing import Optional, Dict, Any

from fleet_sim.config.config import FleetSimConfig
from fleet_sim.config.parameters import ConfigurationError
from fleet_sim.runners.simulation_runner import SimulationRunner
from fleet_sim.core.logging_config import configure_logging, cleanup_logging
from fleet_sim.models.base import SimulationEncoder

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str], seed: Optional[int],
                fleet_size: Optional[int]) -> FleetSimConfig:
    """Load the YAML config (or defaults) and apply command-line overrides."""
    config = FleetSimConfig.load(config_path) if config_path else FleetSimConfig()
    if seed is not None:
        config.simulation.random_seed = seed
    if fleet_size is not None:
        config.simulation.fleet_size = fleet_size
        # re-run validation for the overridden value
        config.simulation.runtime_settings()
    return config


async def main_async(
    config_path: Optional[str],
    ticks: int,
    seed: Optional[int],
    fleet_size: Optional[int],
    output_dir: str,
    realtime: Optional[float],
    log_level: str
) -> Dict[str, Any]:
    """Async implementation of the main function."""
    try:
        config = load_config(config_path, seed, fleet_size)

        output_path = Path(output_dir) / config.name / datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path.mkdir(parents=True, exist_ok=True)
        base_log_dir = output_path / config.logs.log_dir
        configure_logging(base_log_dir=base_log_dir, log_level=log_level or config.logs.level)
        logger.info(f"Configured logging to directory: {base_log_dir}")

        runner = SimulationRunner(config, output_dir=output_path)
        if realtime is not None:
            result = await runner.run_realtime(realtime)
        else:
            result = runner.run(ticks)

        logger.info(f"Simulation completed after {result['ticks']} ticks. "
                    f"Results saved to {output_path}")
        return result

    except (ConfigurationError, ValueError, OSError) as e:
        logger.error("Error running simulation", exc_info=True)
        raise click.ClickException(str(e))
    finally:
        cleanup_logging()


@click.command()
@click.argument('config_path', type=click.Path(exists=True, dir_okay=False), required=False)
@click.option('--ticks', type=int, default=100, show_default=True,
              help='Number of ticks to run headless')
@click.option('--seed', type=int, default=None,
              help='Override the random seed from the configuration')
@click.option('--fleet-size', type=int, default=None,
              help='Override the fleet size from the configuration')
@click.option('--output-dir', type=click.Path(), default='results',
              help='Directory for simulation outputs')
@click.option('--realtime', type=float, default=None,
              help='Run on the wall-clock schedule for this many seconds instead of --ticks')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                                                case_sensitive=False),
              default=None, help='Console log level (default: from configuration)')
def main(config_path: Optional[str], ticks: int, seed: Optional[int], fleet_size: Optional[int],
         output_dir: str, realtime: Optional[float], log_level: Optional[str]):
    """Run the fleet simulation from a YAML configuration."""
    result = asyncio.run(main_async(config_path, ticks, seed, fleet_size,
                                    output_dir, realtime, log_level))
    click.echo(json.dumps(result['summary'], cls=SimulationEncoder, indent=2))


if __name__ == "__main__":
    main()
