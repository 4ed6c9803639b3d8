"""
Lektor tutor domain.

Annotation repair and composition, word diffs, the model adapter, the
session state machine, clipboard capture and history.
"""

from tutor.schemas import (
    AnnotationType,
    Annotation,
    RepairedAnnotation,
    SentenceAnnotation,
    CorrectionResult,
    ExplanationResult,
    ChatMessage,
    CorrectionEntry,
    ExplanationEntry,
)
from tutor.errors import (
    CredentialMissingError,
    TutorModelError,
    ModelResponseError,
    HistoryWriteError,
)

__all__ = [
    "AnnotationType",
    "Annotation",
    "RepairedAnnotation",
    "SentenceAnnotation",
    "CorrectionResult",
    "ExplanationResult",
    "ChatMessage",
    "CorrectionEntry",
    "ExplanationEntry",
    "CredentialMissingError",
    "TutorModelError",
    "ModelResponseError",
    "HistoryWriteError",
]
