#!/usr/bin/env python3
"""
Unified LLM Client for OpenRouter API.

Orchestrates transport, retry, parsing, and cost tracking layers.
"""

from typing import List, Dict, Tuple, Optional

from infra.logger import TutorLogger, null_logger
from infra.llm.openrouter import (
    OpenRouterTransport,
    ResponseParser,
    RetryPolicy,
    CostCalculator,
)


class LLMClient:
    """
    Orchestrates OpenRouter API calls with retry, parsing, and cost tracking.

    Components:
    - OpenRouterTransport: HTTP requests
    - RetryPolicy: Retry logic with backoff and nonce
    - ResponseParser: Response extraction and malformed handling
    - CostCalculator: Dynamic pricing from OpenRouter
    """

    def __init__(
        self,
        logger: Optional[TutorLogger] = None,
        transport: Optional[OpenRouterTransport] = None,
        retry: Optional[RetryPolicy] = None,
        parser: Optional[ResponseParser] = None,
        cost_calculator: Optional[CostCalculator] = None,
        max_retries: int = 3,
    ):
        self.logger = logger or null_logger("llm")
        self.transport = transport or OpenRouterTransport(logger=self.logger)
        self.retry = retry or RetryPolicy(logger=self.logger, max_retries=max_retries)
        self.parser = parser or ResponseParser(logger=self.logger)
        self.cost_calculator = cost_calculator or CostCalculator(logger=self.logger)

    def call(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        timeout: int = 120,
        response_format: Optional[Dict] = None,
    ) -> Tuple[str, Dict, float]:
        """
        Make LLM API call with automatic retries and cost tracking.

        Args:
            model: OpenRouter model name (e.g., "google/gemini-2.0-flash-001")
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate (None = no limit)
            timeout: Request timeout in seconds
            response_format: Optional structured output hint,
                           e.g. {"type": "json_object"}

        Returns:
            Tuple of (response_text, usage_dict, cost_usd)

        Raises:
            CredentialMissingError: No API key configured, or the key was rejected
            MalformedResponseError: Response structure still broken after retries
            requests.exceptions.RequestException: On non-retryable errors
        """
        payload = {
            "model": model,
            "messages": [dict(m) for m in messages],
            "temperature": temperature,
        }

        if max_tokens:
            payload["max_tokens"] = max_tokens

        if response_format:
            payload["response_format"] = response_format

        def _make_call():
            result = self.transport.post(payload, timeout)
            return self.parser.parse_chat_completion(result, model)

        parsed = self.retry.execute_with_retry(_make_call, payload)

        cost = self.cost_calculator.calculate_cost(
            model,
            parsed.prompt_tokens,
            parsed.completion_tokens,
        )

        self.logger.info(
            "LLM call complete",
            model=parsed.model_used,
            tokens=parsed.total_tokens,
            cost_usd=round(cost, 6),
        )

        return parsed.content or "", parsed.usage, cost

    def simple_call(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.0,
        **kwargs,
    ) -> Tuple[str, Dict, float]:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return self.call(model, messages, temperature=temperature, **kwargs)
