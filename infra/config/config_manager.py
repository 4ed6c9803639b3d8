"""
Config file loading and management.

The config is stored at {storage_root}/config.yaml and contains:
- API keys (with env var expansion)
- LLM provider definitions
- Default session settings
"""

from pathlib import Path
from typing import Any
import yaml

from .schemas import LektorConfig


CONFIG_FILENAME = "config.yaml"


class ConfigManager:
    """
    Manages the Lektor configuration file.

    Usage:
        manager = ConfigManager(storage_root)
        config = manager.load()  # Returns LektorConfig
        manager.save(config)     # Persists to disk
    """

    def __init__(self, storage_root: Path):
        self.storage_root = Path(storage_root).expanduser().resolve()
        self.config_path = self.storage_root / CONFIG_FILENAME

    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> LektorConfig:
        """
        Load config from disk.

        Returns LektorConfig with defaults if file doesn't exist.
        """
        if not self.config_path.exists():
            return LektorConfig.with_defaults()

        with open(self.config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return LektorConfig.model_validate(data)

    def save(self, config: LektorConfig) -> None:
        """
        Save config to disk.

        Creates storage_root directory if needed.
        """
        self.storage_root.mkdir(parents=True, exist_ok=True)

        data = config.model_dump(exclude_none=True)

        with open(self.config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def update(self, updates: dict) -> LektorConfig:
        """
        Update specific fields in the config.

        Args:
            updates: Dict of fields to update (can be nested)

        Returns:
            Updated LektorConfig
        """
        config = self.load()
        data = config.model_dump()

        _deep_merge(data, updates)

        new_config = LektorConfig.model_validate(data)
        self.save(new_config)
        return new_config

    def set_value(self, dotted_key: str, value: Any) -> LektorConfig:
        """Set a nested value, e.g. set_value("defaults.history_page_size", 15)."""
        parts = dotted_key.split('.')
        if len(parts) == 1:
            raise ValueError(
                f"Cannot set top-level key '{dotted_key}' directly. "
                "Use nested keys like 'defaults.llm_provider' or 'api_keys.openrouter'"
            )

        updates: dict = {}
        current = updates
        for part in parts[:-1]:
            current[part] = {}
            current = current[part]
        current[parts[-1]] = value

        return self.update(updates)

    def set_api_key(self, key_name: str, value: str) -> None:
        config = self.load()
        config.api_keys[key_name] = value
        self.save(config)


def _deep_merge(base: dict, updates: dict) -> None:
    """
    Deep merge updates into base dict (mutates base).
    """
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def load_config(storage_root: Path) -> LektorConfig:
    return ConfigManager(storage_root).load()
