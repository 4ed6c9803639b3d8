from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from infra.logger import TutorLogger, null_logger

from .errors import MalformedResponseError


@dataclass
class ParsedResponse:
    content: Optional[str]
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    reasoning_tokens: int
    model_used: str
    provider: Optional[str] = None
    usage: Dict[str, Any] = field(default_factory=dict)


class ResponseParser:
    def __init__(self, logger: Optional[TutorLogger] = None):
        self.logger = logger or null_logger("llm")

    def parse_chat_completion(self, result: Dict[str, Any], model: str) -> ParsedResponse:
        try:
            content = result['choices'][0]['message']['content']
            usage = result.get('usage') or {}

            prompt_tokens = usage.get('prompt_tokens', 0)
            completion_tokens = usage.get('completion_tokens', 0)
            total_tokens = usage.get('total_tokens', 0)
            reasoning_tokens = (usage.get('completion_tokens_details') or {}).get('reasoning_tokens', 0)

            provider = model.split('/')[0] if '/' in model else None

            self.logger.debug(
                f"Parsed chat completion: provider={provider}, "
                f"content_length={len(content) if content else 0}",
                model=model,
                tokens=total_tokens,
            )

            return ParsedResponse(
                content=content,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=total_tokens,
                reasoning_tokens=reasoning_tokens,
                model_used=result.get('model', model),
                provider=provider,
                usage=usage,
            )

        except (KeyError, IndexError, TypeError) as e:
            response_keys = list(result.keys()) if isinstance(result, dict) else type(result).__name__
            self.logger.error(
                "Malformed API response from OpenRouter (missing expected keys)",
                model=model,
                error=f"{type(e).__name__}: {e}; response_keys={response_keys}",
            )

            raise MalformedResponseError(
                f"Malformed API response from OpenRouter: missing '{e.args[0] if e.args else 'expected key'}'"
            )
