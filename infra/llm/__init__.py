"""
LLM subsystem for OpenRouter API integration.

Provides:
- LLMClient: Single chat-completion calls with retry logic and cost tracking
- Pricing: Dynamic cost calculation from OpenRouter API
- Errors: credential and malformed-response failures
"""

from infra.llm.client import LLMClient
from infra.llm.openrouter import (
    LLMError,
    CredentialMissingError,
    MalformedResponseError,
    PricingCache,
    CostCalculator,
)

__all__ = [
    "LLMClient",
    "LLMError",
    "CredentialMissingError",
    "MalformedResponseError",
    "PricingCache",
    "CostCalculator",
]
