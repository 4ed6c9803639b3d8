from tutor.annotations.repair import repair, find_occurrences, closest_occurrence
from tutor.annotations.compose import compose, segments_text, PlainText, AnnotatedText, Segment
from tutor.annotations.selection import Collapsed, Expanded, Selection, COLLAPSED, toggle, expanded_identity
from tutor.annotations.styles import CATEGORY_STYLES, CategoryStyle, style_for

__all__ = [
    "repair",
    "find_occurrences",
    "closest_occurrence",
    "compose",
    "segments_text",
    "PlainText",
    "AnnotatedText",
    "Segment",
    "Collapsed",
    "Expanded",
    "Selection",
    "COLLAPSED",
    "toggle",
    "expanded_identity",
    "CATEGORY_STYLES",
    "CategoryStyle",
    "style_for",
]
