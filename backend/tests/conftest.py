import random

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.services.deck import DeckController
from app.services.storage import CardStorage, MemoryStore


def fake_render(text: str) -> str:
    return f"<r>{text}</r>"


@pytest.fixture
def render():
    return fake_render


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def storage(store):
    return CardStorage(store)


@pytest.fixture
def deck(storage):
    return DeckController(storage=storage, rng=random.Random(1234))


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    from app import create_app

    with TestClient(create_app()) as c:
        yield c
