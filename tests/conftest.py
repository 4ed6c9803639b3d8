"""
Shared fixtures for tutor tests.

Storage tests use real temporary directories. The network seam (the LLM
client) is replaced by FakeClient, which replays canned completions.
"""

import json
import threading
from typing import List

import pytest

from infra.config import LLMProviderConfig
from infra.storage import HistoryStore
from tutor.model import TutorModel
from tutor.session import TutorSession


SENTENCE = "I have went to the store yesterday."


class FakeClient:
    """Stands in for LLMClient: returns queued replies, records calls."""

    def __init__(self, replies=None):
        self.replies: List = list(replies or [])
        self.calls = []
        self.gate = None

    def queue(self, reply):
        self.replies.append(reply)

    def call(self, model, messages, temperature=0.0, max_tokens=None, timeout=120, response_format=None):
        self.calls.append({
            'model': model,
            'messages': messages,
            'temperature': temperature,
            'response_format': response_format,
        })
        if self.gate is not None:
            self.gate.wait(timeout=5)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply, {'total_tokens': 42}, 0.0015


def correction_json(corrected="I went to the store yesterday.", language="en", **extra):
    data = {
        "detectedLanguage": language,
        "corrected": corrected,
        "mistakes": "- `have went` mixes two tenses.",
        "knowledge": "**Simple past** for finished time: `yesterday`.",
    }
    data.update(extra)
    return json.dumps(data)


def explanation_json(sentences=None, language="en"):
    if sentences is None:
        sentences = [{
            "text": SENTENCE,
            "teacherComment": "Watch the tense.",
            "annotations": [
                {"text": "have went", "start": 2, "end": 11, "type": "grammar",
                 "explanation": "Use the simple past with 'yesterday'."},
                {"text": "store", "start": 99, "end": 104, "type": "vocabulary",
                 "explanation": "A shop.", "examples": ["The store opens at 9.", "I ran to the store."]},
            ],
        }]
    return json.dumps({"detectedLanguage": language, "sentences": sentences})


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def provider():
    return LLMProviderConfig(type="openrouter", model="google/gemini-2.0-flash-001")


@pytest.fixture
def tutor_model(fake_client, provider):
    return TutorModel(fake_client, provider)


@pytest.fixture
def history_store(tmp_path):
    return HistoryStore(tmp_path)


@pytest.fixture
def session(tutor_model, history_store):
    return TutorSession(tutor_model, history=history_store)


@pytest.fixture
def gate():
    return threading.Event()


@pytest.fixture
def make_correction():
    return correction_json


@pytest.fixture
def make_explanation():
    return explanation_json


@pytest.fixture
def sentence():
    return SENTENCE


@pytest.fixture
def overlapping_explanation(sentence):
    """'went' (identity 1) sits inside 'have went', so only identities 0 and 2 get a span."""
    return explanation_json([{
        "text": sentence,
        "annotations": [
            {"text": "have went", "start": 2, "end": 11, "type": "grammar", "explanation": "Mixed tenses."},
            {"text": "went", "start": 7, "end": 11, "type": "vocabulary", "explanation": "Irregular past of go."},
            {"text": "store", "start": 19, "end": 24, "type": "vocabulary", "explanation": "A shop."},
        ],
    }])
