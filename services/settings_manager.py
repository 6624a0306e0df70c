"""
Settings Manager.

Handles engine settings with JSON file storage.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from typing import Optional
from pathlib import Path

from models.simulation import DEFAULT_LOG_CAPACITY, DEFAULT_SPEED, MAX_SPEED, MIN_SPEED

logger = logging.getLogger(__name__)


@dataclass
class SimulationDefaults:
    """Default simulation parameters."""
    speed: int = DEFAULT_SPEED
    min_speed: int = MIN_SPEED
    max_speed: int = MAX_SPEED
    base_tick_ms: int = 1000          # Tick period at speed 1
    log_capacity: int = DEFAULT_LOG_CAPACITY
    sort_neighbors: bool = False      # Sort BFS neighbours by id


@dataclass
class AppSettings:
    """Complete application settings."""
    simulation: SimulationDefaults = field(default_factory=SimulationDefaults)
    last_template: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "simulation": asdict(self.simulation),
            "last_template": self.last_template,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValueError(f"Settings must be a JSON object, got {type(data).__name__}")
        settings = cls()

        simulation = data.get("simulation")
        if isinstance(simulation, dict):
            known = SimulationDefaults.__dataclass_fields__
            settings.simulation = SimulationDefaults(
                **{k: v for k, v in simulation.items() if k in known}
            )
        elif simulation is not None:
            logger.warning(f"Ignoring malformed simulation settings: {simulation!r}")
        if isinstance(data.get("last_template"), str):
            settings.last_template = data["last_template"]

        return settings


class SettingsManager:
    """
    Manages engine settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/NetTopoSim/settings.json
    - Linux: ~/.config/NetTopoSim/settings.json
    - macOS: ~/Library/Application Support/NetTopoSim/settings.json
    """

    APP_NAME = "NetTopoSim"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = AppSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        self.load()

    @property
    def settings(self) -> AppSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    @property
    def simulation(self) -> SimulationDefaults:
        return self._settings.simulation

    @property
    def last_template(self) -> str:
        return self._settings.last_template

    @last_template.setter
    def last_template(self, value: str):
        self._settings.last_template = value
        self.save()

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings directory."""
        if self._config_override:
            return Path(self._config_override)

        import platform
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
            config_dir = Path(base) / self.APP_NAME
        elif system == "Darwin":  # macOS
            config_dir = Path.home() / "Library" / "Application Support" / self.APP_NAME
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
            config_dir = Path(xdg_config) / self.APP_NAME

        return config_dir / self.SETTINGS_FILE

    def load(self) -> bool:
        """Load settings from file."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = AppSettings.from_dict(data)
            return True
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Error loading settings from {self._settings_path}: {e}")
            return False

    def save(self) -> bool:
        """Save settings to file."""
        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.warning(f"Error saving settings to {self._settings_path}: {e}")
            return False

    def reset(self):
        """Reset settings to defaults."""
        self._settings = AppSettings()
        self.save()


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_override: Optional[str] = None) -> SettingsManager:
    """
    Get the global settings manager instance.

    Args:
        config_override: Optional path to override config location.
                        Only used on first call to initialize.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_override)
    return _settings_manager


def reset_settings_manager():
    """Reset the global settings manager (useful for testing)."""
    global _settings_manager
    _settings_manager = None
