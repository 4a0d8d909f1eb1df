"""Pytest fixtures and configuration for nltask tests."""

import time
from datetime import date
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from nltask.models.remote import RemoteExtraction


class FakeExtractor:
    """In-process stand-in for the remote semantic extractor.

    Returns `result` (or raises `error`) and records every call. `delays` maps
    a text to a number of seconds to block before answering.
    """

    def __init__(
        self,
        result: Optional[RemoteExtraction] = None,
        error: Optional[Exception] = None,
        results: Optional[Dict[str, RemoteExtraction]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.result = result or RemoteExtraction()
        self.error = error
        self.results = results or {}
        self.delays = delays or {}
        self.calls: List[dict] = []

    def extract(self, text, *, is_live_typing=False, current_date=None):
        self.calls.append({"text": text, "is_live_typing": is_live_typing, "current_date": current_date})
        if text in self.delays:
            time.sleep(self.delays[text])
        if self.error is not None:
            raise self.error
        return self.results.get(text, self.result)


@pytest.fixture
def today():
    """Fixed reference date (a Wednesday)."""
    return date(2024, 5, 1)


@pytest.fixture
def fake_extractor():
    """Fake extractor returning an empty extraction."""
    return FakeExtractor()


@pytest.fixture
def remote_call_result():
    """Full-submission answer for "Call @Mom tomorrow #family high priority"."""
    return RemoteExtraction(
        people=["Mom"],
        tags=["family"],
        priority="high",
        due_date=date(2024, 5, 2),
        original_date_phrase="tomorrow",
        effort=None,
        task_title="Call high priority",
    )


@pytest.fixture
def test_client(fake_extractor):
    """Create a FastAPI test client with the semantic extractor overridden."""
    from nltask.api.app import app, get_semantic_extractor, people_store, tags_store

    def override_get_semantic_extractor():
        return fake_extractor

    app.dependency_overrides[get_semantic_extractor] = override_get_semantic_extractor
    tags_store.entities.clear()
    people_store.entities.clear()

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def make_extractor():
    """Factory for FakeExtractor instances."""
    return FakeExtractor
