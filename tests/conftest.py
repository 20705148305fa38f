"""Pytest configuration and fixtures."""

import pytest


class FakeResponse:
    """requests.Response stand-in."""

    def __init__(self, payload=None, status_code=200, json_error=False):
        self._payload = payload
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._json_error = json_error

    def json(self):
        if self._json_error:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def web_app_url():
    return "https://script.google.com/macros/s/test-deployment/exec"


@pytest.fixture
def sample_records():
    """Records as the sheet returns them: mixed casing and Korean headers."""
    return [
        {"Timestamp": "2024-03-01T01:00:00", "type": "math", "content": "셰이더", "mood": "높음", "reaction": "어려움"},
        {"Date": "2024-03-05", "Type": "english", "Content": "레이아웃", "Mood": "보통"},
        {"날짜": "2024. 2. 10.", "과목": "science", "공부 내용": "판형", "집중도": "낮음"},
        {"type": "etc", "content": "날짜 없음"},
    ]


@pytest.fixture(autouse=True)
def _restore_study_log_logger():
    """Undo logger state left by the app so pytest's capture handlers don't leak across tests."""
    import logging

    logger = logging.getLogger("study_log")
    saved = (list(logger.handlers), logger.propagate, logger.level)
    yield
    logger.handlers[:] = saved[0]
    logger.propagate = saved[1]
    logger.setLevel(saved[2])
