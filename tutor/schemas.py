from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


Language = Literal["en", "de"]


class AnnotationType(str, Enum):
    VOCABULARY = "vocabulary"
    GRAMMAR = "grammar"
    IDIOM = "idiom"
    STRUCTURE = "structure"


class Annotation(BaseModel):
    """Highlight metadata as returned by the model. Offsets are not trusted."""
    model_config = {"frozen": True}

    text: str = Field(..., description="Exact substring of the sentence being explained")
    start: int = Field(0, description="Claimed start offset within the sentence")
    end: int = Field(0, description="Claimed exclusive end offset within the sentence")
    type: AnnotationType
    explanation: str = Field(..., description="Why this span matters, in the detected language")
    examples: Optional[List[str]] = Field(None, description="Usage examples, expected for vocabulary and idiom")


class RepairedAnnotation(BaseModel):
    """An annotation whose offsets were verified against its sentence."""
    model_config = {"frozen": True}

    identity: int = Field(..., ge=0, description="Index of the annotation in the model's list")
    text: str
    start: int = Field(..., ge=0)
    end: int
    type: AnnotationType
    explanation: str
    examples: Optional[List[str]] = None

    @classmethod
    def from_annotation(cls, annotation: Annotation, identity: int, start: int, text: str) -> "RepairedAnnotation":
        return cls(
            identity=identity,
            text=text,
            start=start,
            end=start + len(text),
            type=annotation.type,
            explanation=annotation.explanation,
            examples=annotation.examples,
        )


class SentenceAnnotation(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    text: str
    annotations: List[Annotation] = Field(default_factory=list)
    simplified_expression: Optional[str] = Field(None, alias="simplifiedExpression")
    teacher_comment: Optional[str] = Field(None, alias="teacherComment")


class CorrectionResult(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    detected_language: Language = Field(..., alias="detectedLanguage")
    corrected: str
    mistakes: str = ""
    knowledge: str = ""


class ExplanationResult(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    detected_language: Language = Field(..., alias="detectedLanguage")
    sentences: List[SentenceAnnotation] = Field(default_factory=list)


class ChatMessage(BaseModel):
    model_config = {"frozen": True}

    role: Literal["user", "model"]
    content: str


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CorrectionEntry(BaseModel):
    kind: Literal["correction"] = "correction"
    id: Optional[str] = None
    original: str
    corrected: str
    mistakes: Optional[str] = None
    knowledge: Optional[str] = None
    language: Language
    timestamp: datetime = Field(default_factory=_now)
    cost_usd: float = 0.0


class ExplanationEntry(BaseModel):
    kind: Literal["explanation"] = "explanation"
    id: Optional[str] = None
    original: str
    sentences: List[SentenceAnnotation] = Field(default_factory=list)
    language: Language
    timestamp: datetime = Field(default_factory=_now)
    cost_usd: float = 0.0

    @field_validator("sentences", mode="before")
    @classmethod
    def _drop_empty_sentences(cls, v):
        if isinstance(v, list):
            return [s for s in v if not isinstance(s, dict) or s.get("text")]
        return v


HistoryEntry = Union[CorrectionEntry, ExplanationEntry]
