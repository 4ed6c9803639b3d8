"""
Shared fixtures for infra tests.

All tests use real filesystem operations with temporary directories.
HTTP is replaced by a fake requests session.
"""

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}", response=self)


class FakeHTTPSession:
    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.requests.append({'url': url, 'headers': headers, 'json': json, 'timeout': timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def completion(content="ok", model="google/gemini-2.0-flash-001"):
    return {
        'model': model,
        'choices': [{'message': {'role': 'assistant', 'content': content}}],
        'usage': {'prompt_tokens': 100, 'completion_tokens': 20, 'total_tokens': 120},
    }


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def http_session():
    return FakeHTTPSession()


@pytest.fixture
def log_dir(tmp_path):
    return tmp_path / "logs"


class StaticPricing:
    def __init__(self, table=None, error=None):
        self.table = table or {}
        self.error = error

    def get_model_pricing(self, model_id, refresh=False):
        if self.error is not None:
            raise self.error
        return self.table.get(model_id)


@pytest.fixture
def static_pricing():
    return StaticPricing


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_http():
    return FakeHTTPSession


@pytest.fixture
def http_error():
    def make(status):
        return requests.exceptions.HTTPError(f"HTTP {status}", response=FakeResponse(status))
    return make
