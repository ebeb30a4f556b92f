# tests/test_ingestion.py
import pytest

from alman.core.frecency_store import FrecencyStore
from alman.core.ingestion import (
    command_prefixes,
    insert_command,
    is_self_invocation,
    normalize_command,
    program_name,
)


def test_normalize_collapses_whitespace():
    assert normalize_command("  git   add \t . ") == "git add ."
    assert normalize_command("   ") == ""
    assert normalize_command("") == ""


def test_prefixes_left_to_right():
    assert command_prefixes("git add .") == ["git", "git add", "git add ."]
    assert command_prefixes("htop") == ["htop"]


def test_three_inserts_give_frequency_three(clock, check_invariants):
    store = FrecencyStore(clock=clock, min_length=0)
    for _ in range(3):
        insert_command("git add .", store, own_name="alman")
    for text in ("git", "git add", "git add ."):
        assert store.get(text).frequency == 3
    assert len(store) == 3
    check_invariants(store)


def test_default_filter_skips_bare_tool(store):
    insert_command("git add .", store, own_name="alman")
    assert "git" not in store
    assert store.get("git add").frequency == 1
    assert store.get("git add .").frequency == 1


def test_self_invocation_is_ignored(store):
    assert insert_command("alman get-suggestions", store, own_name="alman") == []
    assert insert_command("/usr/local/bin/alman list", store, own_name="alman") == []
    assert len(store) == 0


def test_is_self_invocation():
    assert is_self_invocation("alman", "alman")
    assert is_self_invocation("./bin/alman", "alman")
    assert not is_self_invocation("almanac", "alman")
    assert not is_self_invocation("alman", "")


def test_empty_command_is_rejected(store):
    assert insert_command("   ", store, own_name="alman") == []
    assert len(store) == 0


def test_tombstoned_prefix_is_skipped(store):
    store.remove("git commit")
    insert_command("git commit -m fix", store, own_name="alman")
    assert "git commit" not in store
    assert "git commit -m" in store
    assert "git commit -m fix" in store


@pytest.mark.parametrize("argv0, expected", [
    ("/usr/local/bin/alman", "alman"),
    ("/home/me/src/alman/alman/__main__.py", "alman"),
    ("", ""),
])
def test_program_name(monkeypatch, argv0, expected):
    monkeypatch.setattr("sys.argv", [argv0])
    assert program_name() == expected


def test_module_run_excludes_own_commands(monkeypatch, store):
    monkeypatch.setattr("sys.argv", ["/site-packages/alman/__main__.py", "list"])
    assert insert_command("alman get-suggestions", store) == []
    assert len(store) == 0
