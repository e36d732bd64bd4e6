# fleet_sim/config/config_loader.py
from pathlib import Path
from typing import Dict, Union
import yaml
from .config import FleetSimConfig
import logging
logger = logging.getLogger(__name__)

class ConfigLoader:
    """Loads and validates configuration files from a directory"""

    def __init__(self, config_dir: Union[str, Path]):
        self.config_dir = Path(config_dir)
        self._cache: Dict[str, FleetSimConfig] = {}

    def load(self, config_name: str) -> FleetSimConfig:
        """Load a configuration by name (file stem, without .yaml)"""
        if config_name in self._cache:
            return self._cache[config_name]

        config_file = self.config_dir / f"{config_name}.yaml"
        if not config_file.exists():
            raise ValueError(f"Configuration not found: {config_name}")

        with config_file.open() as f:
            config_data = yaml.safe_load(f) or {}

        config_data.setdefault('name', config_name)
        config = FleetSimConfig.from_dict(config_data)
        self._cache[config_name] = config
        logger.info(f"Loaded configuration {config_name} from {config_file}")
        return config

    def available(self):
        return sorted(p.stem for p in self.config_dir.glob('*.yaml'))

    def save(self, config: FleetSimConfig, filename: str) -> Path:
        """Save a configuration to file"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config_file = self.config_dir / filename
        config.dump(config_file)
        self._cache.pop(config_file.stem, None)
        return config_file
