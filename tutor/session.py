"""
One user's working state: the current result, its chat, and any error.

A session runs at most one model request at a time. Submits that arrive
while a request is in flight are ignored. clear() and load_history_item()
start a new generation, and a result belonging to an older generation is
discarded when it arrives.
"""

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Union

from infra.logger import TutorLogger, null_logger
from infra.storage import HistoryStore
from tutor.annotations import COLLAPSED, AnnotatedText, Segment, Selection, compose, repair, toggle
from tutor.diff import DiffPart, diff_words
from tutor.errors import CredentialMissingError, HistoryWriteError, TutorModelError
from tutor.model import TutorModel
from tutor.schemas import (
    ChatMessage,
    CorrectionEntry,
    CorrectionResult,
    ExplanationEntry,
    ExplanationResult,
    RepairedAnnotation,
    SentenceAnnotation,
)


CORRECTION = "correction"
EXPLANATION = "explanation"
MODES = (CORRECTION, EXPLANATION)

NO_ANALYSIS = "No analysis available for this legacy or simple correction."
NO_KNOWLEDGE = "No specific knowledge points available."


@dataclass
class SessionError:
    kind: str
    message: str

    CREDENTIAL_MISSING = "credential_missing"
    PROCESSING_FAILED = "processing_failed"


@dataclass
class SentenceView:
    index: int
    sentence: SentenceAnnotation
    annotations: List[RepairedAnnotation]
    segments: List[Segment]
    selection: Selection = COLLAPSED

    def highlighted(self) -> List[RepairedAnnotation]:
        """Annotations that own a span in the rendered sentence."""
        return [s.annotation for s in self.segments if isinstance(s, AnnotatedText)]

    def annotation(self, identity: int) -> Optional[RepairedAnnotation]:
        for annotation in self.highlighted():
            if annotation.identity == identity:
                return annotation
        return None


@dataclass
class CorrectionView:
    original: str
    result: CorrectionResult
    parts: List[DiffPart]
    entry_id: Optional[str] = None
    mode: str = CORRECTION


@dataclass
class ExplanationView:
    original: str
    result: ExplanationResult
    sentences: List[SentenceView] = field(default_factory=list)
    entry_id: Optional[str] = None
    mode: str = EXPLANATION

    def select(self, sentence_index: int, identity: int) -> Selection:
        view = self.sentences[sentence_index]
        if view.annotation(identity) is None:
            raise ValueError(f"Sentence {sentence_index} has no highlighted annotation {identity}")
        view.selection = toggle(view.selection, identity)
        return view.selection


ResultView = Union[CorrectionView, ExplanationView]


def build_correction_view(original: str, result: CorrectionResult, entry_id: str = None) -> CorrectionView:
    return CorrectionView(
        original=original,
        result=result,
        parts=diff_words(original, result.corrected),
        entry_id=entry_id,
    )


def build_explanation_view(
    original: str,
    result: ExplanationResult,
    entry_id: str = None,
    logger: Optional[TutorLogger] = None,
) -> ExplanationView:
    logger = logger or null_logger("annotations")
    sentences = []
    for index, sentence in enumerate(result.sentences):
        repaired = repair(sentence.text, sentence.annotations, logger=logger)
        if len(repaired) < len(sentence.annotations):
            logger.debug(
                "Annotations dropped during repair",
                sentence_index=index,
                kept=len(repaired),
                dropped=len(sentence.annotations) - len(repaired),
            )
        sentences.append(SentenceView(
            index=index,
            sentence=sentence,
            annotations=repaired,
            segments=compose(sentence.text, repaired),
        ))
    return ExplanationView(original=original, result=result, sentences=sentences, entry_id=entry_id)


def build_entry_view(
    entry: Union[CorrectionEntry, ExplanationEntry],
    logger: Optional[TutorLogger] = None,
) -> ResultView:
    """View of a saved entry. Legacy corrections without notes get placeholders."""
    if isinstance(entry, CorrectionEntry):
        result = CorrectionResult(
            detected_language=entry.language,
            corrected=entry.corrected,
            mistakes=entry.mistakes or NO_ANALYSIS,
            knowledge=entry.knowledge or NO_KNOWLEDGE,
        )
        return build_correction_view(entry.original, result, entry_id=entry.id)

    result = ExplanationResult(detected_language=entry.language, sentences=entry.sentences)
    return build_explanation_view(entry.original, result, entry_id=entry.id, logger=logger)


class TutorSession:
    def __init__(
        self,
        model: TutorModel,
        history: Optional[HistoryStore] = None,
        logger: Optional[TutorLogger] = None,
    ):
        self.model = model
        self.history = history
        self.logger = logger or null_logger("session")

        self.current: Optional[ResultView] = None
        self.chat: List[ChatMessage] = []
        self.error: Optional[SessionError] = None

        self._request_lock = threading.Lock()
        self._state_lock = threading.RLock()
        self._generation = 0

    @property
    def busy(self) -> bool:
        return self._request_lock.locked()

    @property
    def generation(self) -> int:
        return self._generation

    def _fail(self, generation: int, kind: str, error: Exception):
        with self._state_lock:
            if generation != self._generation:
                return
            self.error = SessionError(kind, str(error))

    def submit(self, text: str, mode: str = CORRECTION) -> Optional[ResultView]:
        """Run one correction or explanation. Returns None when the submit
        was ignored, failed, or went stale."""
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}'. Expected one of: {', '.join(MODES)}")

        if not text or not text.strip():
            self.logger.debug("Ignored blank submit", mode=mode)
            return None

        if not self._request_lock.acquire(blocking=False):
            self.logger.info("Ignored submit while a request is in flight", mode=mode)
            return None

        try:
            with self._state_lock:
                generation = self._generation
                self.error = None

            try:
                if mode == CORRECTION:
                    result = self.model.correct(text)
                else:
                    result = self.model.explain(text)
            except CredentialMissingError as e:
                self._fail(generation, SessionError.CREDENTIAL_MISSING, e)
                return None
            except TutorModelError as e:
                self._fail(generation, SessionError.PROCESSING_FAILED, e)
                return None

            with self._state_lock:
                if generation != self._generation:
                    self.logger.warning("Discarded stale result", mode=mode)
                    return None

                if mode == CORRECTION:
                    view = build_correction_view(text, result)
                else:
                    view = build_explanation_view(text, result, logger=self.logger.child("annotations"))

                self.current = view
                self.chat = []

            view.entry_id = self._save(text, result, mode)
            return view
        finally:
            self._request_lock.release()

    def _save(self, text: str, result, mode: str) -> Optional[str]:
        if self.history is None:
            return None

        if mode == CORRECTION:
            entry = CorrectionEntry(
                original=text,
                corrected=result.corrected,
                mistakes=result.mistakes,
                knowledge=result.knowledge,
                language=result.detected_language,
                cost_usd=self.model.last_cost,
            )
        else:
            entry = ExplanationEntry(
                original=text,
                sentences=list(result.sentences),
                language=result.detected_language,
                cost_usd=self.model.last_cost,
            )

        try:
            return self.history.append(entry)["id"]
        except HistoryWriteError as e:
            self.logger.error("Result shown but not saved to history", mode=mode, error=str(e))
            return None

    def clear(self):
        with self._state_lock:
            self._generation += 1
            self.current = None
            self.chat = []
            self.error = None

    def dismiss_error(self):
        with self._state_lock:
            self.error = None

    def select(self, sentence_index: int, identity: int) -> Selection:
        if not isinstance(self.current, ExplanationView):
            raise ValueError("No explanation is being shown")
        return self.current.select(sentence_index, identity)

    def send_chat(self, message: str) -> Optional[ChatMessage]:
        """Ask a follow-up question about the current result."""
        if self.current is None or not message or not message.strip():
            return None

        if not self._request_lock.acquire(blocking=False):
            self.logger.info("Ignored chat message while a request is in flight", mode="chat")
            return None

        try:
            with self._state_lock:
                generation = self._generation
                view = self.current
                history = list(self.chat)
                self.error = None

            try:
                reply = self.model.chat(view.result, history, message, view.original)
            except CredentialMissingError as e:
                self._fail(generation, SessionError.CREDENTIAL_MISSING, e)
                return None
            except TutorModelError as e:
                self._fail(generation, SessionError.PROCESSING_FAILED, e)
                return None

            with self._state_lock:
                if generation != self._generation:
                    self.logger.warning("Discarded stale chat reply", mode="chat")
                    return None
                answer = ChatMessage(role="model", content=reply)
                self.chat.extend([ChatMessage(role="user", content=message), answer])
                return answer
        finally:
            self._request_lock.release()

    def load_history_item(self, entry: Union[CorrectionEntry, ExplanationEntry]) -> ResultView:
        """Show a saved entry as the current result."""
        view = build_entry_view(entry, logger=self.logger.child("annotations"))

        with self._state_lock:
            self._generation += 1
            self.current = view
            self.chat = []
            self.error = None

        self.logger.info("Loaded history entry", entry_id=entry.id, mode=view.mode)
        return view
