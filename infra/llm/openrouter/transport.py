import requests
from typing import Dict, Any, Optional

from infra.config import Config, get_api_key
from infra.logger import TutorLogger, null_logger

from .errors import CredentialMissingError


OPENROUTER_CHAT_URL = "https://openrouter.ai/api/v1/chat/completions"


class OpenRouterTransport:
    def __init__(
        self,
        logger: Optional[TutorLogger] = None,
        api_key: Optional[str] = None,
        site_url: str = None,
        site_name: str = None,
        session: Optional[requests.Session] = None,
    ):
        self.logger = logger or null_logger("llm")
        self.api_key = api_key if api_key is not None else get_api_key("openrouter")
        self.site_url = site_url or Config.openrouter_site_url
        self.site_name = site_name or Config.openrouter_site_name
        self.base_url = OPENROUTER_CHAT_URL
        self.session = session or requests.Session()

    def post(self, payload: Dict[str, Any], timeout: int = 120) -> Dict[str, Any]:
        if not self.api_key:
            raise CredentialMissingError("openrouter")

        model = payload.get('model', 'unknown')

        self.logger.debug(
            "OpenRouter API request",
            model=model,
            duration_seconds=timeout,
        )

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.site_url,
            "X-Title": self.site_name
        }

        response = self.session.post(
            self.base_url,
            headers=headers,
            json=payload,
            timeout=timeout
        )

        self.logger.debug(
            f"OpenRouter API response: HTTP {response.status_code}",
            model=model,
        )

        if response.status_code == 401:
            raise CredentialMissingError("openrouter")

        response.raise_for_status()

        return response.json()
