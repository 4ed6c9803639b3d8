from infra.llm.openrouter.errors import CredentialMissingError
from infra.storage.history import HistoryWriteError


class TutorModelError(Exception):
    """The model call failed or produced something unusable."""


class ModelResponseError(TutorModelError):
    """The model answered, but the answer is not the JSON we asked for."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


__all__ = [
    "CredentialMissingError",
    "TutorModelError",
    "ModelResponseError",
    "HistoryWriteError",
]
