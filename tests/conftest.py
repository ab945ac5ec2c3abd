"""Shared test fixtures for hookgate."""

from __future__ import annotations

import pytest

from tests.doubles import RecordingDispatcher, RecordingSecretStore


@pytest.fixture
def secret_store() -> RecordingSecretStore:
    return RecordingSecretStore()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()
