"""
Configuration loading and data classes for the path engine.
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = os.path.join("configs", "default.yaml")


@dataclass
class GridConfig:
    """Grid geometry."""
    spacing: float = 1.5


@dataclass
class SearchConfig:
    """Budgets and thresholds for the path constructors."""
    backtrack_timeout_sec: float = 5.0
    backtrack_max_dim: int = 4
    greedy_step_factor: int = 3
    greedy_min_steps: int = 10
    greedy_repair_ratio: float = 0.7
    dfs_depth_cap: int = 100
    dfs_max_expansions: int = 20000
    repair_max_rotations: int = 2000
    random_retry_ratio: float = 0.1


@dataclass
class PlaybackConfig:
    """Playback timing and the reveal schedule."""
    speed: Optional[float] = None
    traversal_seconds: float = 3.0
    frame_rate: int = 60
    reveal_min_ms: float = 5.0
    reveal_max_ms: float = 30.0
    reveal_budget_ms: float = 200.0


@dataclass
class DiagnosticsConfig:
    """Diagnostics sink settings."""
    level: str = "info"
    echo: bool = False


@dataclass
class EngineConfig:
    """Complete engine configuration."""
    grid: GridConfig = field(default_factory=GridConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_SECTIONS = ("grid", "search", "playback", "diagnostics")


def load_yaml(path: str) -> Dict[str, Any]:
    """Load a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_grid_config(data: Optional[Dict[str, Any]]) -> GridConfig:
    """Parse grid section from dictionary."""
    if data is None:
        return GridConfig()
    return GridConfig(
        spacing=float(data.get("spacing", 1.5)),
    )


def parse_search_config(data: Optional[Dict[str, Any]]) -> SearchConfig:
    """Parse search section from dictionary."""
    if data is None:
        return SearchConfig()
    return SearchConfig(
        backtrack_timeout_sec=float(data.get("backtrack_timeout_sec", 5.0)),
        backtrack_max_dim=int(data.get("backtrack_max_dim", 4)),
        greedy_step_factor=int(data.get("greedy_step_factor", 3)),
        greedy_min_steps=int(data.get("greedy_min_steps", 10)),
        greedy_repair_ratio=float(data.get("greedy_repair_ratio", 0.7)),
        dfs_depth_cap=int(data.get("dfs_depth_cap", 100)),
        dfs_max_expansions=int(data.get("dfs_max_expansions", 20000)),
        repair_max_rotations=int(data.get("repair_max_rotations", 2000)),
        random_retry_ratio=float(data.get("random_retry_ratio", 0.1)),
    )


def parse_playback_config(data: Optional[Dict[str, Any]]) -> PlaybackConfig:
    """Parse playback section from dictionary."""
    if data is None:
        return PlaybackConfig()
    speed = data.get("speed")
    config = PlaybackConfig(
        speed=None if speed is None else float(speed),
        traversal_seconds=float(data.get("traversal_seconds", 3.0)),
        frame_rate=int(data.get("frame_rate", 60)),
        reveal_min_ms=float(data.get("reveal_min_ms", 5.0)),
        reveal_max_ms=float(data.get("reveal_max_ms", 30.0)),
        reveal_budget_ms=float(data.get("reveal_budget_ms", 200.0)),
    )

    for key in ("speed", "traversal_seconds", "frame_rate", "reveal_budget_ms"):
        value = getattr(config, key)
        if value is not None and value <= 0:
            raise ConfigError(f"playback.{key} must be positive, got {value}")
    if config.reveal_min_ms < 0:
        raise ConfigError(f"playback.reveal_min_ms must not be negative, got {config.reveal_min_ms}")
    if config.reveal_max_ms < config.reveal_min_ms:
        raise ConfigError(
            f"playback.reveal_max_ms ({config.reveal_max_ms}) is below reveal_min_ms ({config.reveal_min_ms})"
        )
    return config


def parse_diagnostics_config(data: Optional[Dict[str, Any]]) -> DiagnosticsConfig:
    """Parse diagnostics section from dictionary."""
    if data is None:
        return DiagnosticsConfig()
    return DiagnosticsConfig(
        level=str(data.get("level", "info")),
        echo=bool(data.get("echo", False)),
    )


def parse_engine_config(data: Optional[Dict[str, Any]]) -> EngineConfig:
    """Build an EngineConfig from a parsed YAML mapping."""
    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level configuration must be a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown configuration sections: {unknown}. Available: {list(_SECTIONS)}")

    for name in _SECTIONS:
        section = data.get(name)
        if section is not None and not isinstance(section, dict):
            raise ConfigError(f"Section '{name}' must be a mapping")

    try:
        return EngineConfig(
            grid=parse_grid_config(data.get("grid")),
            search=parse_search_config(data.get("search")),
            playback=parse_playback_config(data.get("playback")),
            diagnostics=parse_diagnostics_config(data.get("diagnostics")),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e


def load_config(path: Optional[str] = None) -> EngineConfig:
    """
    Load the engine configuration.

    Args:
        path: YAML file to read; None returns the built-in defaults

    Returns:
        EngineConfig
    """
    if path is None:
        return EngineConfig()
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e
    return parse_engine_config(data)
