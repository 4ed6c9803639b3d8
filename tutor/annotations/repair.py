"""
Offset repair for model-supplied annotations.

The model's start/end claims are hints. An annotation is kept only when its
text can be located in the sentence, and the returned offsets always satisfy
sentence[start:end] == text.
"""

from typing import List, Optional, Sequence

from infra.logger import TutorLogger, null_logger
from tutor.schemas import Annotation, RepairedAnnotation


def find_occurrences(sentence: str, text: str) -> List[int]:
    """Every start index of text in sentence, overlapping matches included."""
    if not text:
        return []
    positions = []
    pos = sentence.find(text)
    while pos != -1:
        positions.append(pos)
        pos = sentence.find(text, pos + 1)
    return positions


def closest_occurrence(positions: Sequence[int], claimed_start: int) -> Optional[int]:
    """Position nearest the claimed start; the earlier one wins a tie."""
    if not positions:
        return None
    return min(positions, key=lambda p: (abs(p - claimed_start), p))


def _exact_match(sentence: str, annotation: Annotation) -> bool:
    start, end = annotation.start, annotation.end
    return 0 <= start < end <= len(sentence) and sentence[start:end] == annotation.text


def locate(sentence: str, annotation: Annotation, identity: int) -> Optional[RepairedAnnotation]:
    if not annotation.text:
        return None

    if _exact_match(sentence, annotation):
        return RepairedAnnotation.from_annotation(annotation, identity, annotation.start, annotation.text)

    start = closest_occurrence(find_occurrences(sentence, annotation.text), annotation.start)
    if start is not None:
        return RepairedAnnotation.from_annotation(annotation, identity, start, annotation.text)

    trimmed = annotation.text.strip()
    if not trimmed:
        return None

    start = closest_occurrence(find_occurrences(sentence, trimmed), annotation.start)
    if start is not None:
        return RepairedAnnotation.from_annotation(annotation, identity, start, trimmed)

    return None


def repair(
    sentence: str,
    annotations: Sequence[Annotation],
    logger: Optional[TutorLogger] = None,
) -> List[RepairedAnnotation]:
    """Verify or relocate each annotation; unlocatable ones are dropped.

    Result is ordered by start offset, then by identity.
    """
    logger = logger or null_logger("annotations")
    repaired = []

    for identity, annotation in enumerate(annotations):
        located = locate(sentence, annotation, identity)
        if located is None:
            logger.debug(
                f"Dropped annotation {annotation.text!r}: not found in sentence",
                dropped=1,
            )
            continue
        repaired.append(located)

    dropped = len(annotations) - len(repaired)
    if dropped:
        logger.debug("Repair finished with drops", kept=len(repaired), dropped=dropped)

    repaired.sort(key=lambda a: (a.start, a.identity))
    return repaired
