"""
Configuration Loader - Load and validate configuration from YAML.

A single config.yaml holds three sections:
- game: grid size, obstacles, autopilot switch, random seed
- autopilot: pathfinder fallback strategy
- logging: log level and optional log file

Missing sections and keys fall back to the dataclass defaults.
"""
import logging
from copy import deepcopy
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..solver.fallback import FALLBACKS


logger = logging.getLogger(__name__)

MIN_GRID_WIDTH = 12
MIN_GRID_HEIGHT = 12


@dataclass
class GameConfig:
    """Round setup."""
    grid_width: int = 20
    grid_height: int = 15
    obstacles: int = 10
    no_obstacles: bool = False
    autopilot: bool = True
    seed: Optional[int] = None


@dataclass
class AutopilotConfig:
    """Pathfinder settings."""
    fallback: str = "corridor"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class Config:
    """Complete application configuration."""
    game: GameConfig = field(default_factory=GameConfig)
    autopilot: AutopilotConfig = field(default_factory=AutopilotConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


SECTIONS = {
    'game': GameConfig,
    'autopilot': AutopilotConfig,
    'logging': LoggingConfig,
}


def _dict_to_dataclass(data: dict, cls: type) -> Any:
    """Convert a dictionary to a dataclass instance."""
    if not data:
        return cls()

    # Get the fields that the dataclass expects
    field_names = {f.name for f in cls.__dataclass_fields__.values()}

    unknown = set(data) - field_names
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", cls.__name__, ", ".join(sorted(unknown)))

    filtered_data = {k: v for k, v in data.items() if k in field_names}

    return cls(**filtered_data)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries, with override values taking precedence.

    Args:
        base: Base dictionary
        override: Dictionary with values to override

    Returns:
        Merged dictionary
    """
    result = deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def config_from_dict(data: Optional[Dict]) -> Config:
    """
    Build and validate a Config from plain data.

    Args:
        data: Mapping of section name to section values

    Returns:
        Validated Config object

    Raises:
        ValueError: If the data or a section is not a mapping, or a value
            is invalid
    """
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping of sections, got {type(data).__name__}")

    config = Config()

    for section, cls in SECTIONS.items():
        if data and section in data:
            if data[section] is not None and not isinstance(data[section], dict):
                raise ValueError(
                    f"Config section '{section}' must be a mapping, "
                    f"got {type(data[section]).__name__}"
                )
            setattr(config, section, _dict_to_dataclass(data[section], cls))

    validate_config(config)
    return config


def apply_overrides(config: Config, overrides: Dict) -> Config:
    """
    Return a new Config with override values merged in.

    None values in overrides are dropped, so unset CLI options keep the
    loaded value.
    """
    cleaned = {
        section: {k: v for k, v in values.items() if v is not None}
        for section, values in overrides.items()
    }
    return config_from_dict(_deep_merge(asdict(config), cleaned))


def _check_type(section: str, name: str, value: Any, expected: type, allow_none: bool = False):
    """Raise ValueError unless value is an instance of expected."""
    if value is None and allow_none:
        return
    # bool is an int subclass; only accept it where a bool is expected
    if isinstance(value, expected) and (expected is bool or not isinstance(value, bool)):
        return
    raise ValueError(
        f"{section}.{name} must be {expected.__name__}"
        f"{' or null' if allow_none else ''}, got {value!r}"
    )


def validate_config(config: Config):
    """
    Check config value types and ranges.

    Raises:
        ValueError: If any value has the wrong type or is out of range
    """
    game = config.game
    for name in ("grid_width", "grid_height", "obstacles"):
        _check_type("game", name, getattr(game, name), int)
    for name in ("no_obstacles", "autopilot"):
        _check_type("game", name, getattr(game, name), bool)
    _check_type("game", "seed", game.seed, int, allow_none=True)
    _check_type("autopilot", "fallback", config.autopilot.fallback, str)
    _check_type("logging", "level", config.logging.level, str)
    _check_type("logging", "log_file", config.logging.log_file, str, allow_none=True)

    if game.grid_width < MIN_GRID_WIDTH:
        raise ValueError(f"Grid width must be at least {MIN_GRID_WIDTH}, got {game.grid_width}")
    if game.grid_height < MIN_GRID_HEIGHT:
        raise ValueError(f"Grid height must be at least {MIN_GRID_HEIGHT}, got {game.grid_height}")
    if game.obstacles < 0:
        raise ValueError(f"Obstacle count cannot be negative, got {game.obstacles}")
    if config.autopilot.fallback not in FALLBACKS:
        raise ValueError(
            f"Unknown fallback '{config.autopilot.fallback}'. "
            f"Available: {', '.join(sorted(FALLBACKS))}"
        )
    if not isinstance(logging.getLevelName(config.logging.level.upper()), int):
        raise ValueError(f"Unknown log level '{config.logging.level}'")


def _find_config_file() -> Optional[Path]:
    """Find config.yaml in the working directory or project root."""
    possible_paths = [
        Path("config.yaml"),
        Path(__file__).parent.parent.parent / "config.yaml",
    ]

    for path in possible_paths:
        if path.exists():
            return path

    return None


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file (defaults to config.yaml in the
            working directory or project root)

    Returns:
        Config object with all settings

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the file is not valid YAML or holds invalid values
    """
    if config_path is None:
        path = _find_config_file()
        if path is None:
            logger.info("No config file found, using defaults")
            return Config()
    else:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config_from_dict(data)


def save_config(config: Config, config_path: str):
    """
    Save configuration to a YAML file.

    Args:
        config: Config object to save
        config_path: Path to save to
    """
    data = asdict(config)

    with open(config_path, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
