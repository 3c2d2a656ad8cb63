"""
AetherCast Configuration.

Central configuration for the simulation engine and the caster's resource
ledger. All durations are in milliseconds.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

CONFIG_ENV_VAR = "AETHERCAST_CONFIG"
LOG_LEVEL_ENV_VAR = "AETHERCAST_LOG_LEVEL"


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class SimulationConfig:
    """Initial state, safety bounds and timings for the simulation engine."""

    # Initial state
    initial_energy_level: float = 100.0
    initial_probability_shift: float = 0.0
    initial_entropy_level: float = 20.0
    initial_time_speed: float = 1.0
    width: int = 800
    height: int = 600

    # Safety bounds
    max_safe_shift: int = 200
    energy_ceiling: float = 200.0
    entropy_ceiling: float = 200.0
    privileged_entropy_ceiling: float = 500.0
    max_time_multiplier: float = 5.0
    time_normal_min: float = 0.5
    time_normal_max: float = 2.0
    probability_threshold: float = 100.0

    # Effect durations
    energy_duration: int = 8000
    probability_duration: int = 12000
    entropy_duration: int = 10000
    time_duration: int = 15000
    kernel_space_duration: int = 20000

    # Deferred corrections
    probability_correction_delay: int = 5000
    time_normalization_delay: int = 15000
    sweep_interval: int = 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class LedgerConfig:
    """Configuration for the caster's spendable energy pool."""

    initial_energy: float = 100.0
    max_energy: float = 100.0
    regeneration: float = 10.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_energy": self.initial_energy,
            "max_energy": self.max_energy,
            "regeneration": self.regeneration,
        }


@dataclass
class AetherConfig:
    """Main configuration for AetherCast.

    Aggregates all sub-configurations and provides load/save functionality.
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_dir: Path | None = None

    def __post_init__(self):
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "AetherConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file. Missing files yield defaults.

        Returns:
            AetherConfig instance
        """
        if config_path is None:
            return cls()

        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "AetherConfig":
        """Load configuration named by the environment.

        Reads AETHERCAST_CONFIG for the file path and AETHERCAST_LOG_LEVEL
        to override the log level.
        """
        config = cls.load(os.environ.get(CONFIG_ENV_VAR))
        if level := os.environ.get(LOG_LEVEL_ENV_VAR):
            config.log_level = level.upper()
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AetherConfig":
        """Create config from dictionary."""
        return cls(
            simulation=SimulationConfig.from_dict(data.get("simulation", {})),
            ledger=LedgerConfig.from_dict(data.get("ledger", {})),
            log_level=data.get("log_level", "WARNING"),
            log_dir=data.get("log_dir"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "simulation": self.simulation.to_dict(),
            "ledger": self.ledger.to_dict(),
            "log_level": self.log_level,
            "log_dir": str(self.log_dir) if self.log_dir else None,
        }

    def save(self, config_path: str | Path) -> Path:
        """Save configuration to a JSON file.

        Args:
            config_path: Path to save to

        Returns:
            Path to saved file
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        return config_path


# ============================================================================
# Global Config Instance
# ============================================================================


_global_config: AetherConfig | None = None


def get_config() -> AetherConfig:
    """Get the global configuration instance.

    Returns:
        AetherConfig singleton
    """
    global _global_config
    if _global_config is None:
        _global_config = AetherConfig.from_env()
    return _global_config


def set_config(config: AetherConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reload_config(config_path: str | Path | None = None) -> AetherConfig:
    """Reload configuration from disk.

    Args:
        config_path: Optional path to load from; falls back to the environment

    Returns:
        Newly loaded configuration
    """
    global _global_config
    _global_config = AetherConfig.load(config_path) if config_path else AetherConfig.from_env()
    return _global_config
