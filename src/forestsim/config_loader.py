"""
Configuration loader for ForestSim.
Provides unified access to YAML, TOML, and JSON configuration files.

Supports:
- YAML (.yaml, .yml) - default simulation settings shipped in cfg/
- TOML (.toml) - user configuration with types
- JSON (.json) - machine-written configuration

Settings are merged in order: built-in defaults, the packaged
cfg/simulation.yaml, an optional user file, then explicit overrides.
"""
import json
import tomllib
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from .exceptions import (
    ConfigurationError,
    ForestFileNotFoundError,
    InvalidDataError,
)

DEFAULT_CONFIG_FILE = 'simulation.yaml'


@dataclass
class SimulationConfig:
    """Settings for a simulation session.

    Attributes:
        min_height_to_plant: Lower bound of a new sapling's height (feet)
        min_growth_rate: Lower bound of a new sapling's growth rate (percent)
        data_dir: Directory holding tree lists and snapshots
        csv_extension: Suffix of bulk tree-list files
        snapshot_extension: Suffix of saved forest snapshots
        initial_forest: Forest to start on; first loaded forest if None
        log_level: Logging level name
        seed: Seed for the random generator; fresh entropy if None
    """
    min_height_to_plant: float = 10.0
    min_growth_rate: float = 10.0
    data_dir: str = '.'
    csv_extension: str = '.csv'
    snapshot_extension: str = '.db'
    initial_forest: Optional[str] = None
    log_level: str = 'INFO'
    seed: Optional[int] = None

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    def csv_path(self, forest_name: str) -> Path:
        """Path of the bulk tree list for a forest."""
        return self.data_path / f"{forest_name}{self.csv_extension}"

    def snapshot_path(self, forest_name: str) -> Path:
        """Path of the saved snapshot for a forest."""
        return self.data_path / f"{forest_name}{self.snapshot_extension}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_FIELD_TYPES = {
    'min_height_to_plant': (int, float),
    'min_growth_rate': (int, float),
    'data_dir': (str,),
    'csv_extension': (str,),
    'snapshot_extension': (str,),
    'initial_forest': (str, type(None)),
    'log_level': (str,),
    'seed': (int, type(None)),
}


class ConfigLoader:
    """Loads ForestSim configuration files.

    Attributes:
        cfg_dir: Directory holding the packaged default configuration
    """

    def __init__(self, cfg_dir: Optional[Path] = None):
        """Initialize the configuration loader.

        Args:
            cfg_dir: Path to the configuration directory. Defaults to the
                cfg/ directory inside the package.
        """
        if cfg_dir is None:
            cfg_dir = Path(__file__).parent / 'cfg'
        self.cfg_dir = Path(cfg_dir)

    def _load_config_file(self, file_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML, TOML or JSON file.

        Args:
            file_path: Path to the configuration file

        Returns:
            Dictionary containing configuration data

        Raises:
            ForestFileNotFoundError: If file doesn't exist
            InvalidDataError: If the file cannot be parsed
            ConfigurationError: If the format is not supported
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ForestFileNotFoundError(str(file_path), "configuration file")

        suffix = file_path.suffix.lower()

        try:
            if suffix in ['.yaml', '.yml']:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f)
            elif suffix == '.toml':
                with open(file_path, 'rb') as f:
                    data = tomllib.load(f)
            elif suffix == '.json':
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported configuration file format: {suffix}. "
                                         f"Supported formats: .yaml, .yml, .toml, .json")
        except yaml.YAMLError as e:
            raise InvalidDataError("YAML configuration", f"parsing error: {str(e)}") from e
        except tomllib.TOMLDecodeError as e:
            raise InvalidDataError("TOML configuration", f"parsing error: {str(e)}") from e
        except json.JSONDecodeError as e:
            raise InvalidDataError("JSON configuration", f"parsing error: {str(e)}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {file_path}: {str(e)}") from e

        # An empty YAML document means "no settings"
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise InvalidDataError("configuration", f"{file_path} must contain a mapping")
        return data

    def load_defaults(self) -> Dict[str, Any]:
        """Load the packaged default settings, if present."""
        default_file = self.cfg_dir / DEFAULT_CONFIG_FILE
        if not default_file.exists():
            return {}
        return self._section(self._load_config_file(default_file))

    def load(self, path: Optional[Union[str, Path]] = None,
             **overrides: Any) -> SimulationConfig:
        """Build a SimulationConfig.

        Args:
            path: Optional user configuration file
            **overrides: Settings taking precedence over every file;
                None values are ignored

        Returns:
            Validated SimulationConfig

        Raises:
            ConfigurationError: If a setting is unknown or has the wrong type
        """
        settings = self.load_defaults()
        if path is not None:
            settings.update(self._section(self._load_config_file(Path(path))))
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return build_config(settings)

    @staticmethod
    def _section(data: Dict[str, Any]) -> Dict[str, Any]:
        # Settings may sit at top level or under a "simulation" table
        section = data.get('simulation', data)
        if not isinstance(section, dict):
            raise InvalidDataError("configuration", "'simulation' must be a mapping")
        return dict(section)


def build_config(settings: Dict[str, Any]) -> SimulationConfig:
    """Validate a settings mapping and build a SimulationConfig.

    Raises:
        ConfigurationError: If a key is unknown or a value has the wrong type
    """
    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {unknown}. "
            f"Supported keys: {sorted(known)}"
        )

    for key, value in settings.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass but never a valid setting here
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigurationError(
                f"Invalid value for '{key}': {value!r}"
            )

    for key in ('min_height_to_plant', 'min_growth_rate'):
        if key in settings and settings[key] < 0:
            raise ConfigurationError(f"'{key}' must not be negative, got {settings[key]}")

    config = SimulationConfig(**settings)
    config.min_height_to_plant = float(config.min_height_to_plant)
    config.min_growth_rate = float(config.min_growth_rate)
    return config


def load_simulation_config(path: Optional[Union[str, Path]] = None,
                           **overrides: Any) -> SimulationConfig:
    """Convenience function to load the simulation configuration.

    Args:
        path: Optional user configuration file (YAML, TOML or JSON)
        **overrides: Settings taking precedence over the files
    """
    return ConfigLoader().load(path, **overrides)
