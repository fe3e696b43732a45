"""Shared fixtures. No test talks to a network service."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import (
    get_analysis_config,
    get_record_store,
    get_text_generator,
    get_transcriber,
)
from src.api.main import app

from fakes import TEST_CONFIG, FakeGenerator, FakeStore, FakeTranscriber


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def client(
    generator: FakeGenerator,
    transcriber: FakeTranscriber,
    store: FakeStore,
) -> Iterator[TestClient]:
    app.dependency_overrides[get_text_generator] = lambda: generator
    app.dependency_overrides[get_transcriber] = lambda: transcriber
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_analysis_config] = lambda: TEST_CONFIG
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
