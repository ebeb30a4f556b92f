# tests/test_cli.py - CLI runs end to end against a temporary data dir
import json

import pytest

from alman.cli.cli import build_parser, main
from alman.utils import model_store


@pytest.fixture
def env(data_dir, tmp_path, monkeypatch):
    # empty PATH and no $SHELL: no conflicts from the host machine
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))
    monkeypatch.delenv("SHELL", raising=False)
    return data_dir


def test_no_command_prints_help(env, capsys):
    assert main([]) == 0
    assert "usage: alman" in capsys.readouterr().out


def test_hidden_commands_not_listed():
    help_text = build_parser().format_help()
    assert "get-suggestions" in help_text
    assert "custom" not in help_text
    assert "init" not in help_text


def test_add_list_remove(env, capsys):
    assert main(["add", "gs", "-c", "git status"]) == 0
    assert (env / "aliases").read_text() == "alias gs='git status'\n"

    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "gs" in out and "git status" in out

    assert main(["remove", "gs"]) == 0
    assert (env / "aliases").read_text() == ""


def test_add_existing_alias_fails(env, capsys):
    main(["add", "gs", "-c", "git status"])
    assert main(["add", "gs", "-c", "git show"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_remove_unknown_alias_fails(env, capsys):
    assert main(["remove", "nope"]) == 1
    assert "not found" in capsys.readouterr().err


def test_change(env):
    main(["add", "gs", "-c", "git status"])
    assert main(["change", "gs", "gst"]) == 0
    assert (env / "aliases").read_text() == "alias gst='git status'\n"


def test_custom_then_get_suggestions(env, capsys):
    for _ in range(3):
        assert main(["custom", "git status"]) == 0
    assert main(["custom", "cargo", "build"]) == 0

    db = json.loads((env / model_store.DB_FILE).read_text())
    assert db["reverse_command_map"]["git status"]["frequency"] == 3
    assert "cargo build" in db["reverse_command_map"]

    assert main(["get-suggestions", "-n", "1"]) == 0
    out = capsys.readouterr().out
    assert "git status" in out
    assert "gs" in out
    assert "cargo build" not in out


def test_delete_suggestion(env, capsys):
    main(["custom", "git status"])
    assert main(["delete-suggestion", "git", "status"]) == 0
    tomb = json.loads((env / model_store.DELETED_COMMANDS_FILE).read_text())
    assert tomb == {"deleted_commands": ["git status"]}

    capsys.readouterr()
    main(["get-suggestions"])
    assert "no commands tracked" in capsys.readouterr().out


def test_alias_file_option(env, tmp_path):
    target = tmp_path / "custom_aliases"
    assert main(["-a", str(target), "add", "gs", "-c", "git status"]) == 0
    assert target.read_text() == "alias gs='git status'\n"


def test_init_prints_script(env, capsys):
    assert main(["init", "bash"]) == 0
    out = capsys.readouterr().out
    assert "PROMPT_COMMAND" in out
    assert str(env) in out


def test_init_unknown_shell(env, capsys):
    assert main(["init", "powershell"]) == 1
    assert "unsupported shell" in capsys.readouterr().err


def test_config_show_and_set(env, capsys):
    assert main(["config", "rescale_threshold", "300"]) == 0
    assert json.loads((env / "config.json").read_text())["rescale_threshold"] == 300
    assert main(["config", "rescale_threshold"]) == 0
    assert "300" in capsys.readouterr().out
    assert main(["config"]) == 0
    assert "min_command_length" in capsys.readouterr().out


def test_config_unknown_key(env, capsys):
    assert main(["config", "nope", "1"]) == 1
    assert "Unknown config key" in capsys.readouterr().err


def test_import_history(env, tmp_path, capsys):
    hist = tmp_path / ".zsh_history"
    hist.write_text(": 1:0;git status\n: 2:0;git status\n")
    assert main(["import-history", str(hist)]) == 0
    assert "Imported" in capsys.readouterr().out
    db = json.loads((env / model_store.DB_FILE).read_text())
    assert db["reverse_command_map"]["git status"]["frequency"] == 2


def test_corrupt_state_warns_but_runs(env, capsys):
    env.mkdir(parents=True, exist_ok=True)
    (env / model_store.DB_FILE).write_text("garbage")
    assert main(["list"]) == 0
    assert "warning" in capsys.readouterr().err
