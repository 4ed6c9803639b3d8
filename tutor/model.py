"""
Correction, explanation and chat calls against the configured LLM provider.

All transport and decoding failures surface as TutorModelError, except a
missing or rejected API key, which surfaces as CredentialMissingError.
"""

import time
from typing import List, Optional, Sequence, Union

import requests

from infra.config import LLMProviderConfig, get_api_key, get_config, get_provider
from infra.llm import LLMClient, CredentialMissingError, LLMError
from infra.llm.openrouter import OpenRouterTransport
from infra.logger import TutorLogger, null_logger
from tutor import prompts
from tutor.errors import TutorModelError
from tutor.response import parse_correction, parse_explanation
from tutor.schemas import ChatMessage, CorrectionResult, ExplanationResult


JSON_RESPONSE_FORMAT = {"type": "json_object"}

CHAT_ROLES = {"user": "user", "model": "assistant"}


class TutorModel:
    def __init__(
        self,
        client: LLMClient,
        provider: LLMProviderConfig,
        logger: Optional[TutorLogger] = None,
    ):
        self.client = client
        self.provider = provider
        self.logger = logger or null_logger("model")
        self.last_cost = 0.0

    @classmethod
    def from_config(cls, provider_name: str = None, logger: Optional[TutorLogger] = None) -> "TutorModel":
        logger = logger or null_logger("model")
        provider = get_provider(provider_name)
        api_key = get_api_key(provider.api_key_ref or provider.type)
        transport = OpenRouterTransport(logger=logger.child("llm"), api_key=api_key)
        client = LLMClient(
            logger=logger.child("llm"),
            transport=transport,
            max_retries=get_config().defaults.max_retries,
        )
        return cls(client, provider, logger=logger)

    def _complete(self, messages: List[dict], mode: str, json_output: bool = True) -> str:
        start = time.time()
        try:
            content, usage, cost = self.client.call(
                self.provider.model,
                messages,
                temperature=self.provider.temperature,
                timeout=self.provider.timeout,
                response_format=JSON_RESPONSE_FORMAT if json_output else None,
            )
        except CredentialMissingError:
            self.logger.error("Model call rejected: API key missing", mode=mode, model=self.provider.model)
            raise
        except (LLMError, requests.exceptions.RequestException) as e:
            self.logger.error(
                "Model call failed",
                mode=mode,
                model=self.provider.model,
                error=f"{type(e).__name__}: {e}",
            )
            raise TutorModelError(f"The {mode} request failed: {e}") from e

        self.last_cost = cost
        self.logger.info(
            "Model call complete",
            mode=mode,
            model=self.provider.model,
            tokens=usage.get("total_tokens", 0),
            cost_usd=round(cost, 6),
            duration_seconds=round(time.time() - start, 2),
        )
        return content

    def correct(self, text: str) -> CorrectionResult:
        content = self._complete(
            [
                {"role": "system", "content": prompts.CORRECTION_SYSTEM_PROMPT},
                {"role": "user", "content": prompts.build_correction_user_prompt(text)},
            ],
            mode="correction",
        )
        try:
            return parse_correction(content)
        except TutorModelError as e:
            self.logger.error("Unusable correction response", mode="correction", error=str(e))
            raise

    def explain(self, text: str) -> ExplanationResult:
        content = self._complete(
            [
                {"role": "system", "content": prompts.EXPLANATION_SYSTEM_PROMPT},
                {"role": "user", "content": prompts.build_explanation_user_prompt(text)},
            ],
            mode="explanation",
        )
        try:
            return parse_explanation(content, logger=self.logger)
        except TutorModelError as e:
            self.logger.error("Unusable explanation response", mode="explanation", error=str(e))
            raise

    def chat(
        self,
        context: Union[CorrectionResult, ExplanationResult],
        history: Sequence[ChatMessage],
        message: str,
        original_text: str,
    ) -> str:
        messages = build_chat_messages(context, history, message, original_text)
        return self._complete(messages, mode="chat", json_output=False)


def build_chat_messages(
    context: Union[CorrectionResult, ExplanationResult],
    history: Sequence[ChatMessage],
    message: str,
    original_text: str,
) -> List[dict]:
    messages = [
        {"role": "system", "content": prompts.build_chat_system_prompt(context, original_text)},
        {"role": "assistant", "content": prompts.chat_acknowledgement(context)},
    ]
    for item in history:
        messages.append({"role": CHAT_ROLES[item.role], "content": item.content})
    messages.append({"role": "user", "content": message})
    return messages
