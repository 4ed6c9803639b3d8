"""Decode model output into result schemas."""

import json
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from infra.logger import TutorLogger, null_logger
from tutor.errors import ModelResponseError
from tutor.schemas import (
    Annotation,
    CorrectionResult,
    ExplanationResult,
    SentenceAnnotation,
)


FENCE_OPEN_RE = re.compile(r"^```(?:json)?")
FENCE_CLOSE_RE = re.compile(r"```$")


def strip_code_fences(text: str) -> str:
    """Remove a ```json ... ``` (or bare ```) wrapper around the payload."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = FENCE_OPEN_RE.sub("", cleaned, count=1)
        cleaned = FENCE_CLOSE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def decode_json(text: str) -> Dict[str, Any]:
    if not isinstance(text, str):
        raise ModelResponseError("Model returned a non-string response")

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ModelResponseError(f"Model response is not valid JSON: {e}", raw=text) from e

    if not isinstance(data, dict):
        raise ModelResponseError("Model response JSON is not an object", raw=text)
    return data


def parse_correction(text: str) -> CorrectionResult:
    data = decode_json(text)
    try:
        return CorrectionResult.model_validate(data)
    except ValidationError as e:
        raise ModelResponseError(f"Correction response failed validation: {e}", raw=text) from e


def _parse_annotations(raw: Any, sentence_index: int, logger: TutorLogger) -> List[Annotation]:
    if not isinstance(raw, list):
        return []

    annotations = []
    for item in raw:
        try:
            annotations.append(Annotation.model_validate(item))
        except ValidationError as e:
            logger.debug(
                "Dropped invalid annotation",
                sentence_index=sentence_index,
                error=str(e).splitlines()[0],
            )
    return annotations


def parse_explanation(text: str, logger: Optional[TutorLogger] = None) -> ExplanationResult:
    """Best-effort parse: bad annotations and empty sentences are dropped,
    only a missing language or sentence list fails the whole response."""
    logger = logger or null_logger("model")
    data = decode_json(text)

    raw_sentences = data.get("sentences")
    if not isinstance(raw_sentences, list):
        raise ModelResponseError("Explanation response has no sentence list", raw=text)

    sentences = []
    for index, raw in enumerate(raw_sentences):
        if not isinstance(raw, dict) or not isinstance(raw.get("text"), str) or not raw["text"]:
            logger.debug("Dropped sentence without text", sentence_index=index)
            continue

        annotations = _parse_annotations(raw.get("annotations"), index, logger)
        try:
            sentences.append(SentenceAnnotation(
                text=raw["text"],
                annotations=annotations,
                simplified_expression=raw.get("simplifiedExpression") or None,
                teacher_comment=raw.get("teacherComment") or None,
            ))
        except ValidationError as e:
            logger.debug("Dropped invalid sentence", sentence_index=index, error=str(e).splitlines()[0])

    try:
        return ExplanationResult(detected_language=data.get("detectedLanguage"), sentences=sentences)
    except ValidationError as e:
        raise ModelResponseError(f"Explanation response failed validation: {e}", raw=text) from e
