"""
Configuration management for Lektor.

Two layers:
- Environment: OPENROUTER_API_KEY, LEKTOR_STORAGE_ROOT (.env supported)
- Config file: {storage_root}/config.yaml

Usage:
    from infra.config import ConfigManager, Config

    manager = ConfigManager(Config.storage_root)
    config = manager.load()
    provider = config.default_provider()
"""

from .schemas import (
    LLMProviderConfig,
    DefaultsConfig,
    LektorConfig,
    resolve_env_vars,
)

from .config_manager import (
    ConfigManager,
    load_config,
)

from .runtime import (
    get_storage_root,
    get_config,
    get_api_key,
    get_provider,
    reload_config,
)

from .legacy import Config, EnvConfig


__all__ = [
    "Config",
    "EnvConfig",
    "LLMProviderConfig",
    "DefaultsConfig",
    "LektorConfig",
    "resolve_env_vars",
    "ConfigManager",
    "load_config",
    "get_storage_root",
    "get_config",
    "get_api_key",
    "get_provider",
    "reload_config",
]
