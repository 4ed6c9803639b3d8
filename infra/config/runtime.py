"""
Runtime configuration access.

Combines the environment layer (storage root, fallback API key) with the
config file at {storage_root}/config.yaml.
"""

from pathlib import Path
from functools import lru_cache

from .legacy import Config
from .schemas import LektorConfig, LLMProviderConfig


def get_storage_root() -> Path:
    return Config.storage_root


@lru_cache(maxsize=1)
def get_config() -> LektorConfig:
    """
    Load and cache the configuration.

    Returns LektorConfig with defaults if config.yaml doesn't exist.
    """
    from .config_manager import load_config
    return load_config(get_storage_root())


def get_api_key(name: str) -> str:
    """
    Get an API key by name, resolving ${ENV_VAR} references.

    Falls back to OPENROUTER_API_KEY from the environment layer for the
    "openrouter" key. Returns an empty string when nothing is configured.
    """
    resolved = get_config().resolve_api_key(name)
    if resolved:
        return resolved
    if name == "openrouter":
        return Config.openrouter_api_key
    return ""


def get_provider(name: str = None) -> LLMProviderConfig:
    config = get_config()
    if name is None:
        return config.default_provider()
    provider = config.get_llm_provider(name)
    if provider is None:
        raise ValueError(f"LLM provider '{name}' is not defined. Available: {sorted(config.llm_providers)}")
    return provider


def reload_config() -> LektorConfig:
    """Force reload of config (clears cache)."""
    get_config.cache_clear()
    return get_config()
