class LLMError(Exception):
    """Base class for failures talking to the model provider."""


class CredentialMissingError(LLMError):
    """No API key is configured for the provider."""

    def __init__(self, provider: str = "openrouter"):
        self.provider = provider
        super().__init__(
            f"{provider} API key is missing. "
            f"Set OPENROUTER_API_KEY in your environment or .env file, "
            f"or run: lektor config set api_keys.{provider} <key>"
        )


class MalformedResponseError(LLMError):
    """The provider answered, but without the expected completion structure."""
