"""
Configuration schemas for Lektor.

Defines the structure of the config file stored at
{storage_root}/config.yaml (storage root defaults to ~/Documents/lektor,
override with LEKTOR_STORAGE_ROOT).
"""

from typing import Dict, Optional, Any
from pydantic import BaseModel, Field
import os
import re


class LLMProviderConfig(BaseModel):
    """Configuration for an LLM provider (inference endpoint + model)."""
    type: str = Field(..., description="Provider type: openrouter")
    model: str = Field(..., description="Model identifier (e.g., google/gemini-2.0-flash-001)")
    api_key_ref: Optional[str] = Field(None, description="Reference to api_keys entry (defaults to type)")
    temperature: float = Field(0.2, ge=0.0, le=2.0, description="Sampling temperature")
    timeout: int = Field(120, gt=0, description="Request timeout in seconds")
    extra: Dict[str, Any] = Field(default_factory=dict, description="Provider-specific settings")


class DefaultsConfig(BaseModel):
    """Default settings for correction sessions."""
    llm_provider: str = Field(
        default="gemini-flash",
        description="Default LLM provider for correction, explanation and chat"
    )
    history_page_size: int = Field(
        default=20,
        ge=15,
        le=20,
        description="Number of history entries per page"
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per model call (retryable failures only)"
    )


class LektorConfig(BaseModel):
    """
    Top-level configuration.

    Stored at: {storage_root}/config.yaml
    """
    api_keys: Dict[str, str] = Field(
        default_factory=dict,
        description="API keys (can use ${ENV_VAR} syntax)"
    )
    llm_providers: Dict[str, LLMProviderConfig] = Field(
        default_factory=dict,
        description="LLM provider definitions (inference)"
    )
    defaults: DefaultsConfig = Field(
        default_factory=DefaultsConfig,
        description="Default session settings"
    )

    def resolve_api_key(self, key_name: str) -> Optional[str]:
        """
        Resolve an API key, expanding ${ENV_VAR} references.

        Returns None if key not found or env var not set.
        """
        if key_name not in self.api_keys:
            return None

        value = resolve_env_vars(self.api_keys[key_name])
        return value or None

    def get_llm_provider(self, name: str) -> Optional[LLMProviderConfig]:
        """Get an LLM provider config by name."""
        return self.llm_providers.get(name)

    def default_provider(self) -> LLMProviderConfig:
        """Provider named by defaults.llm_provider."""
        provider = self.get_llm_provider(self.defaults.llm_provider)
        if provider is None:
            raise ValueError(
                f"Default LLM provider '{self.defaults.llm_provider}' is not defined. "
                f"Available: {sorted(self.llm_providers)}"
            )
        return provider

    @classmethod
    def with_defaults(cls) -> "LektorConfig":
        """Create a config with sensible defaults."""
        return cls(
            api_keys={
                "openrouter": "${OPENROUTER_API_KEY}",
            },
            llm_providers={
                "gemini-flash": LLMProviderConfig(
                    type="openrouter",
                    model="google/gemini-2.0-flash-001",
                ),
                "claude-sonnet": LLMProviderConfig(
                    type="openrouter",
                    model="anthropic/claude-3.5-sonnet",
                ),
            },
            defaults=DefaultsConfig(),
        )


def resolve_env_vars(value: str) -> str:
    """
    Resolve ${ENV_VAR} references in a string.

    Examples:
        "${OPENROUTER_API_KEY}" -> actual value from environment
        "literal-value" -> "literal-value"
        "${MISSING_VAR}" -> "" (empty string if not set)
    """
    if not isinstance(value, str):
        return value

    pattern = r'\$\{([^}]+)\}'

    def replace(match):
        var_name = match.group(1)
        return os.environ.get(var_name, "")

    return re.sub(pattern, replace, value)
