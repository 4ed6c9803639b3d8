"""Static presentation table for annotation categories."""

from dataclasses import dataclass
from typing import Dict

from tutor.schemas import AnnotationType


@dataclass(frozen=True)
class CategoryStyle:
    label: str
    icon: str
    rich_style: str
    css_class: str


CATEGORY_STYLES: Dict[AnnotationType, CategoryStyle] = {
    AnnotationType.VOCABULARY: CategoryStyle("Vocabulary", "📖", "black on yellow", "mark-vocabulary"),
    AnnotationType.GRAMMAR: CategoryStyle("Grammar", "✏️", "black on light_sky_blue1", "mark-grammar"),
    AnnotationType.IDIOM: CategoryStyle("Idiom", "💬", "black on plum1", "mark-idiom"),
    AnnotationType.STRUCTURE: CategoryStyle("Structure", "🧱", "black on pale_green1", "mark-structure"),
}

_unstyled = set(AnnotationType) - set(CATEGORY_STYLES)
if _unstyled:
    raise RuntimeError(f"Annotation types without a style: {sorted(t.value for t in _unstyled)}")


def style_for(annotation_type: AnnotationType) -> CategoryStyle:
    return CATEGORY_STYLES[AnnotationType(annotation_type)]
