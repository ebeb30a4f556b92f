# tests/test_alias_ops.py
import pytest

from alman.core import alias_ops
from alman.errors import AliasExists, AliasNotFound
from alman.utils import alias_file


@pytest.fixture
def paths(tmp_path):
    return [str(tmp_path / "aliases")]


def test_add_tombstones_command(store, paths):
    store.add("git status")
    assert alias_ops.add_alias(store, paths, "gs", "git status") is True
    assert "git status" not in store
    assert "git status" in store.tombstones
    assert alias_ops.list_aliases(paths) == [("gs", "git status")]


def test_add_duplicate_name_is_refused(store, paths):
    alias_ops.add_alias(store, paths, "gs", "git status")
    assert alias_ops.add_alias(store, paths, "gs", "git show") is False
    assert "git show" not in store.tombstones


def test_change_alias_renames(store, paths):
    alias_ops.add_alias(store, paths, "gs", "git status")
    assert alias_ops.change_alias(store, paths, "gs", "gst") == "git status"
    assert alias_ops.list_aliases(paths) == [("gst", "git status")]
    assert "git status" in store.tombstones


def test_change_alias_with_new_command(store, paths):
    alias_ops.add_alias(store, paths, "gs", "git status")
    alias_ops.change_alias(store, paths, "gs", "gs2", "git status -sb")
    assert alias_ops.list_aliases(paths) == [("gs2", "git status -sb")]
    assert "git status" not in store.tombstones
    assert "git status -sb" in store.tombstones


def test_change_to_taken_name_restores_old_alias(store, paths):
    alias_ops.add_alias(store, paths, "gs", "git status")
    alias_ops.add_alias(store, paths, "gp", "git push")
    with pytest.raises(AliasExists):
        alias_ops.change_alias(store, paths, "gs", "gp")
    assert dict(alias_file.get_aliases_from_files(paths)) == {"gs": "git status", "gp": "git push"}
    assert "git status" in store.tombstones


def test_change_unknown_alias_raises(store, paths):
    with pytest.raises(AliasNotFound):
        alias_ops.change_alias(store, paths, "nope", "other")


def test_delete_suggestion(store, paths):
    store.add("cargo build")
    assert alias_ops.delete_suggestion(store, "cargo build") is True
    assert alias_ops.delete_suggestion(store, "cargo build") is False
    assert "cargo build" not in store


def test_add_matches_tracked_text_despite_spacing(store, paths):
    store.add("git status")
    assert alias_ops.add_alias(store, paths, "gst", "  git   status ") is True
    assert "git status" not in store
    assert "git status" in store.tombstones
    assert alias_ops.list_aliases(paths) == [("gst", "git status")]


def test_remove_untombstones_normalized_command(store, paths):
    alias_ops.add_alias(store, paths, "gst", "git  status")
    assert alias_ops.remove_alias(store, paths, "gst") == "git status"
    assert "git status" not in store.tombstones


def test_remove_keeps_tombstone_while_another_alias_remains(store, paths):
    alias_ops.add_alias(store, paths, "gs", "git status")
    alias_ops.add_alias(store, paths, "gst", "git status")
    alias_ops.remove_alias(store, paths, "gs")
    assert "git status" in store.tombstones
    alias_ops.remove_alias(store, paths, "gst")
    assert "git status" not in store.tombstones


def test_delete_suggestion_normalizes(store, paths):
    store.add("cargo build")
    assert alias_ops.delete_suggestion(store, "cargo   build") is True
    assert "cargo build" not in store
