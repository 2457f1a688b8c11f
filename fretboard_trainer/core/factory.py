"""Factory for creating fretboard trainer components."""

import random
from typing import Any, Dict, Optional, Type

from ..logger import get_logger
from ..round_controller import AUTO_ADVANCE_DELAY_MS, RoundController
from ..scheduler import LoopScheduler
from ..settings import SettingsStore
from ..stats import StatsStore
from ..storage import JsonFileStorage, MemoryStorage
from .config import ConfigManager
from .interfaces import IKeyValueStorage, IScheduler

logger = get_logger(__name__)

MAX_AUTO_ADVANCE_DELAY_MS = 10000

# key: (lowest, highest) accepted value
DISPLAY_LIMITS = {
    "width": (320, 7680),
    "height": (240, 4320),
    "fps": (1, 240),
}


def bounded_int(section: str, config: Dict[str, Any], key: str, default: int, low: int, high: int) -> int:
    """Read config[key] as an int, falling back to default and clamping to [low, high]."""
    value = config.get(key, default)
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid {section}.{key} {value!r}; using {default}")
        return default
    clamped = max(low, min(high, number))
    if clamped != number:
        logger.warning(f"{section}.{key} {value!r} out of range; using {clamped}")
    return clamped


class ComponentFactory:
    """Factory for creating fretboard trainer components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        self.storage_classes: Dict[str, Type[IKeyValueStorage]] = {
            "default": JsonFileStorage,
            "memory": MemoryStorage,
        }
        self._storage: Optional[IKeyValueStorage] = None

    def create_storage(self, implementation: str = "default") -> IKeyValueStorage:
        """Create the key-value storage, once; later calls return the same instance.

        Raises:
            ValueError: If the implementation is not registered
        """
        if self._storage is not None:
            return self._storage
        if implementation not in self.storage_classes:
            raise ValueError(f"Unknown storage implementation: {implementation}")

        cls = self.storage_classes[implementation]
        if cls is JsonFileStorage:
            self._storage = cls(self.config_manager.storage_dir)
        else:
            self._storage = cls()

        logger.info(f"Created storage: {implementation}")
        return self._storage

    def create_settings_store(self) -> SettingsStore:
        return SettingsStore(self.create_storage())

    def create_stats_store(self) -> StatsStore:
        return StatsStore(self.create_storage())

    def create_round_controller(
        self,
        stats_store: Optional[StatsStore] = None,
        scheduler: Optional[IScheduler] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ) -> RoundController:
        """Create a round controller.

        Args:
            stats_store: Stats store to update, or None to create one
            scheduler: Scheduler for auto-advance, or None for a LoopScheduler
            rng: Random source, or None for an unseeded one
            **kwargs: Overrides for the 'trainer' configuration
        """
        config = self.config_manager.get_config("trainer")
        config.update(kwargs)
        delay = bounded_int(
            "trainer",
            config,
            "auto_advance_delay_ms",
            AUTO_ADVANCE_DELAY_MS,
            0,
            MAX_AUTO_ADVANCE_DELAY_MS,
        )

        controller = RoundController(
            stats_store=stats_store or self.create_stats_store(),
            scheduler=scheduler or LoopScheduler(),
            rng=rng,
            auto_advance_delay_ms=delay,
        )
        logger.info(f"Created round controller (auto-advance {delay}ms)")
        return controller

    def display_config(self) -> Dict[str, int]:
        """The window size and frame rate, coerced to ints within sane limits."""
        config = self.config_manager.get_config("display")
        defaults = self.config_manager.default_configs["display"]
        return {
            key: bounded_int("display", config, key, defaults[key], low, high)
            for key, (low, high) in DISPLAY_LIMITS.items()
        }
