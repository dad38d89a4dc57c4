"""Pytest configuration and fixtures for the test suite."""

import pytest

from anki_link.config import reset_config
from anki_link.sync.engine import SyncEngine
from tests.fixtures import FakeAnkiClient, FakeAnkiConnect, InMemoryDocumentStore


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep config from the developer's shell and working directory out of tests."""
    for name in (
        "ANKI_LINK_CONFIG",
        "ANKI_LINK_VAULT_PATH",
        "ANKI_LINK_DEFAULT_DECK",
        "ANKI_LINK_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_anki():
    """Provide an empty in-memory AnkiConnect."""
    return FakeAnkiConnect()


@pytest.fixture
def anki_client(fake_anki):
    """Provide an IAnkiClient over the fake AnkiConnect."""
    return FakeAnkiClient(fake_anki)


@pytest.fixture
def store():
    """Provide an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def engine(anki_client, store):
    """Provide a sync engine over the fake client and store."""
    return SyncEngine(anki_client, store)
