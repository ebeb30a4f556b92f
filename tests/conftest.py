# tests/conftest.py
# shared fixtures: a controllable clock, an isolated data dir, a suggester
# that never scans PATH or spawns a shell
import logging

import pytest

from alman.core.alias_suggester import AliasSuggester
from alman.core.frecency_store import FrecencyStore
from alman.core.state import AppState
from alman.utils.logger_utils import ROOT_LOGGER

T0 = 1_700_000_000


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def assert_store_invariants(store: FrecencyStore):
    texts_in_map = set(store._by_text)
    texts_in_ranked = [t for _, t in store._ranked]
    assert texts_in_map == set(texts_in_ranked)
    assert len(texts_in_ranked) == len(set(texts_in_ranked))
    assert store._ranked == sorted(store._ranked)
    assert store.total_entry_count == len(store._by_text)
    assert store.total_score == sum(e.score for e in store._by_text.values())
    assert store.total_score == sum(-neg for neg, _ in store._ranked)
    for neg, text in store._ranked:
        assert store._by_text[text].score == -neg


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return FrecencyStore(clock=clock)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    d = tmp_path / "alman-data"
    monkeypatch.setenv("ALMAN_DATA_DIR", str(d))
    monkeypatch.delenv("ALMAN_ALIAS_FILE", raising=False)
    return d


@pytest.fixture
def system_commands():
    return {"ls", "git", "cd", "make"}


@pytest.fixture
def suggester_factory(system_commands):
    def factory(existing):
        return AliasSuggester(existing, system_commands)
    return factory


@pytest.fixture
def state(data_dir, clock, suggester_factory):
    return AppState(
        directory=str(data_dir),
        clock=clock,
        suggester_factory=suggester_factory,
        own_name="alman",
    ).load()


@pytest.fixture(autouse=True)
def reset_alman_logger():
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.propagate = True


@pytest.fixture
def check_invariants():
    return assert_store_invariants
