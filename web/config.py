"""
Web application configuration.

Mirrors infra.config.Config for the web frontend.
"""

import os

from infra.config import get_storage_root


class Config:
    """Web app configuration."""

    STORAGE_ROOT = get_storage_root()

    HOST = os.getenv("WEB_HOST", "127.0.0.1")
    PORT = int(os.getenv("WEB_PORT", "1337"))
    DEBUG = os.getenv("WEB_DEBUG", "false").lower() == "true"
    JSON_SORT_KEYS = False
