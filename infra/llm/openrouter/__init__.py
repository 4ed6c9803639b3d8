"""
OpenRouter API client components.

Clean separation of concerns:
- transport.py: HTTP requests
- response_parser.py: Response parsing
- retry_policy.py: Retry logic
- pricing.py: Cost calculation from the models endpoint
"""

from .errors import LLMError, CredentialMissingError, MalformedResponseError
from .transport import OpenRouterTransport
from .response_parser import ResponseParser, ParsedResponse
from .retry_policy import RetryPolicy
from .pricing import PricingCache, CostCalculator

__all__ = [
    'LLMError',
    'CredentialMissingError',
    'MalformedResponseError',
    'OpenRouterTransport',
    'ResponseParser',
    'ParsedResponse',
    'RetryPolicy',
    'PricingCache',
    'CostCalculator',
]
