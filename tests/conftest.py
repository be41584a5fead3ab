import itertools
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flashdeck.config import SettingsManager
from flashdeck.models import FlashcardFormData
from flashdeck.services import CardLifecycleController, CardStore, MemoryStorage


@pytest.fixture(autouse=True)
def settings(tmp_path, monkeypatch):
    """Fresh settings singleton backed by a throwaway file, no env overrides."""
    for key in SettingsManager.DEFAULTS:
        monkeypatch.delenv(key, raising=False)
    SettingsManager.reset_instance()
    manager = SettingsManager(str(tmp_path / "settings.json"))
    yield manager
    SettingsManager.reset_instance()


class FakeClock:
    """Epoch-millisecond clock that ticks once per call."""

    def __init__(self, start=1_700_000_000_000, step=1000):
        self._values = itertools.count(start, step)

    def __call__(self):
        return next(self._values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"card-{next(counter)}"


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(memory_storage, clock, id_factory):
    return CardStore(memory_storage, clock=clock, id_factory=id_factory)


@pytest.fixture
def controller(store):
    return CardLifecycleController(store)


@pytest.fixture
def cat_form():
    return FlashcardFormData(word="cat", translation="кот", transcription="/kæt/", category="Animals")


@pytest.fixture
def bread_form():
    return FlashcardFormData(word="bread", translation="хлеб", category="Food")
