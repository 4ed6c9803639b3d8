"""JSON-ready dictionaries for views, entries and history pages."""

from typing import Any, Dict, List, Optional

from tutor.annotations import AnnotatedText, expanded_identity, style_for
from tutor.schemas import RepairedAnnotation
from tutor.session import CorrectionView, ExplanationView, SentenceView, SessionError


def annotation_data(annotation: RepairedAnnotation) -> Dict[str, Any]:
    style = style_for(annotation.type)
    return {
        'identity': annotation.identity,
        'text': annotation.text,
        'start': annotation.start,
        'end': annotation.end,
        'type': annotation.type.value,
        'label': style.label,
        'icon': style.icon,
        'css_class': style.css_class,
        'explanation': annotation.explanation,
        'examples': annotation.examples or [],
    }


def sentence_data(view: SentenceView) -> Dict[str, Any]:
    segments = []
    for segment in view.segments:
        if isinstance(segment, AnnotatedText):
            segments.append({'text': segment.text, 'annotation': annotation_data(segment.annotation)})
        else:
            segments.append({'text': segment.text, 'annotation': None})

    return {
        'index': view.index,
        'text': view.sentence.text,
        'simplifiedExpression': view.sentence.simplified_expression,
        'teacherComment': view.sentence.teacher_comment,
        'expanded': expanded_identity(view.selection),
        'segments': segments,
    }


def view_data(view) -> Optional[Dict[str, Any]]:
    if view is None:
        return None

    if isinstance(view, CorrectionView):
        return {
            'mode': view.mode,
            'entry_id': view.entry_id,
            'original': view.original,
            'detectedLanguage': view.result.detected_language,
            'corrected': view.result.corrected,
            'mistakes': view.result.mistakes,
            'knowledge': view.result.knowledge,
            'diff': [
                {'value': p.value, 'added': p.added, 'removed': p.removed}
                for p in view.parts
            ],
        }

    if isinstance(view, ExplanationView):
        return {
            'mode': view.mode,
            'entry_id': view.entry_id,
            'original': view.original,
            'detectedLanguage': view.result.detected_language,
            'sentences': [sentence_data(s) for s in view.sentences],
        }

    raise TypeError(f"Unsupported view type: {type(view).__name__}")


def entry_summary(entry) -> Dict[str, Any]:
    return {
        'id': entry.id,
        'kind': entry.kind,
        'language': entry.language,
        'original': entry.original,
        'timestamp': entry.timestamp.isoformat(),
    }


def error_data(error: Optional[SessionError]) -> Optional[Dict[str, str]]:
    if error is None:
        return None
    return {'kind': error.kind, 'message': error.message}


def chat_data(messages) -> List[Dict[str, str]]:
    return [{'role': m.role, 'content': m.content} for m in messages]
