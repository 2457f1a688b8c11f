"""Configuration management for fretboard trainer components."""

from typing import Dict, Any, Optional
import copy
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)


class ConfigManager:
    """Configuration manager for fretboard trainer components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/fretboard_trainer by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "fretboard_trainer")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "trainer": {
                "auto_advance_delay_ms": 800,
                "storage_dir": None,  # None means <config_dir>/storage
            },
            "display": {
                "width": 1024,
                "height": 768,
                "fps": 30,
            },
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                if not isinstance(config, dict):
                    raise ValueError("top-level value is not an object")
                logger.info(f"Loaded configuration from {config_file}")

                # Ensure all default keys are present
                for key, value in default_config.items():
                    if key not in config:
                        config[key] = value

                return config
            except (OSError, ValueError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return copy.deepcopy(default_config)
        else:
            config = copy.deepcopy(default_config)
            self.save_config(name, config)
            return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get a copy of the configuration by name."""
        return self.configs.get(name, {}).copy()

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default."""
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = copy.deepcopy(self.default_configs[name])
        return self.save_config(name, self.configs[name])

    @property
    def storage_dir(self) -> Path:
        """Where the settings and stats records live."""
        configured = self.configs["trainer"].get("storage_dir")
        return Path(configured) if configured else self.config_dir / "storage"
