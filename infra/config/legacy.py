"""
Environment-based configuration.

Values come from the process environment (and a local .env file). The
OpenRouter key is optional here: a missing key only matters once a model
call is attempted, where it surfaces as CredentialMissingError.
"""

import os
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

load_dotenv()


class EnvConfig(BaseModel):
    openrouter_api_key: str = Field(
        default="",
        description="OpenRouter API key"
    )

    openrouter_site_url: str = Field(
        default="https://github.com/lektor-tutor/lektor",
        description="Site URL sent as HTTP-Referer for OpenRouter tracking"
    )

    openrouter_site_name: str = Field(
        default="Lektor",
        description="Site name sent as X-Title for OpenRouter tracking"
    )

    storage_root: Path = Field(
        default=Path.home() / "Documents" / "lektor",
        description="Root directory for config, history and logs"
    )

    @field_validator('openrouter_api_key')
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator('storage_root')
    @classmethod
    def validate_storage_root(cls, v: Path) -> Path:
        return Path(v).expanduser().resolve()

    model_config = {
        "frozen": True,
        "validate_assignment": True
    }


def _load_config() -> EnvConfig:
    return EnvConfig(
        openrouter_api_key=os.getenv('OPENROUTER_API_KEY', ''),
        openrouter_site_url=os.getenv('OPENROUTER_SITE_URL', 'https://github.com/lektor-tutor/lektor'),
        openrouter_site_name=os.getenv('OPENROUTER_SITE_NAME', 'Lektor'),
        storage_root=Path(os.getenv('LEKTOR_STORAGE_ROOT', '~/Documents/lektor')),
    )


Config = _load_config()
