# tests/test_state.py
import os

import pytest

from alman.core.command_entry import DAY
from alman.core.state import AppState
from alman.errors import AliasNotFound
from alman.utils import model_store


def reopen(state, clock, suggester_factory):
    return AppState(
        directory=state.directory,
        clock=clock,
        suggester_factory=suggester_factory,
        own_name="alman",
    ).load()


def test_insert_save_reload(state, clock, suggester_factory):
    state.insert("git status")
    state.insert("git   status ")
    state.insert("cargo build --release")
    state.save()

    again = reopen(state, clock, suggester_factory)
    assert again.get_top(10) == state.get_top(10)
    assert again.store.get("git status").frequency == 2
    assert again.warnings == []


def test_get_top_uses_config_default(state):
    for cmd in ["aaaa bbbb", "cccc dddd", "eeee ffff", "gggg hhhh", "iiii jjjj", "kkkk llll"]:
        state.insert(cmd)
    assert len(state.get_top()) == 5
    state.config.set("top_commands", 2)
    assert len(state.get_top()) == 2


def test_get_top_refreshes_scores(state, clock):
    state.insert("aaaaaa bbbbbb")
    clock.advance(3 * DAY)
    state.insert("cccccc dddddd")
    assert [e.text for e in state.get_top(4)] == ["cccccc dddddd", "cccccc", "aaaaaa bbbbbb", "aaaaaa"]


def test_corrupt_database_falls_back_with_warning(data_dir, clock, suggester_factory):
    os.makedirs(data_dir)
    (data_dir / model_store.DB_FILE).write_text("{{{")
    (data_dir / model_store.DELETED_COMMANDS_FILE).write_text('{"deleted_commands": ["git push"]}')

    state = AppState(directory=str(data_dir), clock=clock, suggester_factory=suggester_factory).load()
    assert len(state.store) == 0
    assert "git push" in state.store.tombstones
    assert len(state.warnings) == 1
    assert "discarded" in state.warnings[0]


def test_corrupt_tombstones_fall_back_with_warning(data_dir, clock, suggester_factory):
    os.makedirs(data_dir)
    (data_dir / model_store.DELETED_COMMANDS_FILE).write_text("nope")
    state = AppState(directory=str(data_dir), clock=clock, suggester_factory=suggester_factory).load()
    assert len(state.store.tombstones) == 0
    assert len(state.warnings) == 1


def test_suggest_respects_existing_aliases(state):
    assert "gs" in [s.alias for s in state.suggest("git status")]
    state.add_alias("gs", "git status")
    assert "gs" not in [s.alias for s in state.suggest("git status")]


def test_add_alias_stops_tracking_command(state):
    state.insert("git status")
    assert state.add_alias("gs", "git status") is True
    assert "git status" not in state.store
    state.insert("git status")
    assert "git status" not in state.store


def test_remove_alias_makes_command_trackable_again(state):
    state.add_alias("gs", "git status")
    assert state.remove_alias("gs") == "git status"
    state.insert("git status")
    assert "git status" in state.store


def test_remove_missing_alias_raises(state):
    with pytest.raises(AliasNotFound):
        state.remove_alias("nope")


def test_alias_file_override(data_dir, clock, tmp_path):
    custom = tmp_path / "my_aliases"
    state = AppState(directory=str(data_dir), alias_file=str(custom), clock=clock)
    assert state.alias_paths[0] == str(custom)


def test_default_alias_file_lives_in_data_dir(state, data_dir):
    assert state.alias_paths == [os.path.join(str(data_dir), "aliases")]


def test_add_and_remove_pass_through(state):
    assert state.add("cargo build").frequency == 1
    assert state.remove("cargo build") is True
    assert state.remove("cargo build") is False
    assert state.add("cargo build") is None


def test_add_alias_with_extra_spaces_stops_tracking(state):
    state.insert("git status")
    assert state.add_alias("gst", "git  status") is True
    assert "git status" not in state.store
    assert "git status" not in [e.text for e in state.get_top(10)]
    state.insert("git status")
    assert "git status" not in state.store
