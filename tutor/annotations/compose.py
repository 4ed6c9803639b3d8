"""Split a sentence into plain and annotated segments with no overlaps."""

from dataclasses import dataclass
from typing import List, Sequence, Union

from tutor.schemas import RepairedAnnotation


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class AnnotatedText:
    text: str
    annotation: RepairedAnnotation


Segment = Union[PlainText, AnnotatedText]


def compose(sentence: str, repaired: Sequence[RepairedAnnotation]) -> List[Segment]:
    """Segments covering the sentence exactly once.

    An annotation that starts inside an earlier-claimed span is skipped.
    """
    segments: List[Segment] = []
    cursor = 0

    for annotation in sorted(repaired, key=lambda a: (a.start, a.identity)):
        if annotation.start < cursor:
            continue
        if annotation.start > cursor:
            segments.append(PlainText(sentence[cursor:annotation.start]))
        segments.append(AnnotatedText(sentence[annotation.start:annotation.end], annotation))
        cursor = annotation.end

    if cursor < len(sentence):
        segments.append(PlainText(sentence[cursor:]))

    return segments


def segments_text(segments: Sequence[Segment]) -> str:
    return "".join(segment.text for segment in segments)
