"""End-to-end tests for the cc-auto-commit command."""

import json
import warnings
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from git import Repo

from cc_auto_commit.cli.main import main
from cc_auto_commit.core.errors import GenerationError
from cc_auto_commit.core.generator import CommandBackend

DIFF = "diff --git a/app.py b/app.py\n+print('hello')\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_generate():
    with patch.object(CommandBackend, "generate", return_value="feat(app): print hello\n") as mock:
        yield mock


def test_standalone_prints_message_only(runner, fake_generate):
    result = runner.invoke(main, [], input=DIFF)

    assert result.exit_code == 0
    assert result.stdout == "feat(app): print hello\n"
    prompt = fake_generate.call_args.args[0]
    assert "print('hello')" in prompt


def test_reading_stdin_raises_no_deprecation_warning(runner, fake_generate):
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = runner.invoke(main, [], input=DIFF)

    assert result.exit_code == 0
    deprecations = [
        w for w in caught
        if issubclass(w.category, DeprecationWarning)
        and ("click" in str(w.message).lower() or "cc_auto_commit" in w.filename)
    ]
    assert deprecations == []


def test_language_flag_and_env(runner, fake_generate, monkeypatch):
    runner.invoke(main, ["--language", "English"], input=DIFF)
    assert "Write the message in English" in fake_generate.call_args.args[0]

    monkeypatch.setenv("CC_AUTO_COMMIT_LANGUAGE", "French")
    runner.invoke(main, [], input=DIFF)
    assert "Write the message in French" in fake_generate.call_args.args[0]

    runner.invoke(main, ["-l", "German"], input=DIFF)
    assert "Write the message in German" in fake_generate.call_args.args[0]


def test_config_file_language(runner, fake_generate, tmp_path):
    config_file = tmp_path / "commit-config.toml"
    config_file.write_text('language = "Spanish"\n')

    runner.invoke(main, ["--config", str(config_file)], input=DIFF)

    assert "Write the message in Spanish" in fake_generate.call_args.args[0]


def test_empty_stdin_exits_non_zero(runner, fake_generate):
    result = runner.invoke(main, [], input="  \n")

    assert result.exit_code == 1
    assert result.stdout == ""
    assert "nothing to summarize" in result.stderr
    fake_generate.assert_not_called()


def test_generation_failure_exits_non_zero_without_output(runner):
    with patch.object(CommandBackend, "generate", side_effect=GenerationError("offline")):
        result = runner.invoke(main, [], input=DIFF)

    assert result.exit_code == 1
    assert result.stdout == ""
    assert "offline" in result.stderr


def test_malformed_payload_is_silent(runner, fake_generate):
    result = runner.invoke(main, [], input=json.dumps({"hook_event_name": "Nope"}))

    assert result.exit_code == 0
    assert result.output == ""
    fake_generate.assert_not_called()


def test_recursion_guard(runner, fake_generate, monkeypatch):
    monkeypatch.setenv("CLAUDE_AUTO_COMMIT_RUNNING", "1")

    result = runner.invoke(main, [], input=DIFF)

    assert result.exit_code == 0
    assert result.output == ""
    fake_generate.assert_not_called()


def test_post_tool_use_hook_commits(runner, fake_generate, temp_git_project):
    (temp_git_project / "a.txt").write_text("alpha\n")
    payload = {
        "hook_event_name": "PostToolUse",
        "session_id": "abc123",
        "cwd": str(temp_git_project),
        "tool_name": "Write",
        "tool_input": {"file_path": str(temp_git_project / "a.txt"), "content": "alpha\n"},
        "tool_response": {"success": True},
    }

    result = runner.invoke(main, [], input=json.dumps(payload))

    repo = Repo(temp_git_project)
    assert result.exit_code == 0
    assert result.stdout == ""
    assert repo.head.commit.message == "feat(app): print hello"
    assert set(repo.head.commit.stats.files) == {"a.txt"}


def test_session_start_clear_hook(runner, fake_generate, temp_git_project):
    (temp_git_project / "main.py").write_text("changed\n")
    payload = {
        "hook_event_name": "SessionStart",
        "session_id": "abc123",
        "cwd": str(temp_git_project),
        "source": "clear",
    }

    result = runner.invoke(main, [], input=json.dumps(payload))

    repo = Repo(temp_git_project)
    assert result.exit_code == 0
    assert repo.active_branch.name.startswith("session-")
    assert repo.active_branch.name.endswith("-abc123")
    assert repo.head.commit.message == "feat(app): print hello"


def test_hook_generation_failure_leaves_no_commit(runner, temp_git_project):
    (temp_git_project / "main.py").write_text("changed\n")
    head = Repo(temp_git_project).head.commit.hexsha
    payload = {
        "hook_event_name": "PostToolUse",
        "session_id": "abc123",
        "cwd": str(temp_git_project),
        "tool_name": "Edit",
        "tool_input": {"file_path": "main.py"},
    }

    with patch.object(CommandBackend, "generate", side_effect=GenerationError("offline")):
        result = runner.invoke(main, [], input=json.dumps(payload))

    assert result.exit_code == 1
    assert Repo(temp_git_project).head.commit.hexsha == head


def test_hook_outside_repository_is_silent(runner, fake_generate, tmp_path):
    payload = {
        "hook_event_name": "SessionStart",
        "session_id": "abc123",
        "cwd": str(tmp_path),
        "source": "clear",
    }

    result = runner.invoke(main, [], input=json.dumps(payload))

    assert result.exit_code == 0
    assert result.output == ""


def test_unreadable_file_is_non_fatal(runner, fake_generate, temp_git_project):
    payload = {
        "hook_event_name": "PostToolUse",
        "session_id": "abc123",
        "cwd": str(temp_git_project),
        "tool_name": "Edit",
        "tool_input": {"file_path": "gone.txt"},
    }

    result = runner.invoke(main, [], input=json.dumps(payload))

    assert result.exit_code == 0
    fake_generate.assert_not_called()


def test_debug_log_written(runner, fake_generate, isolated_env):
    runner.invoke(main, [], input=DIFF)

    log_file = isolated_env / ".claude" / "cc-auto-commit-debug.log"
    assert log_file.exists()
    assert "Generating" in log_file.read_text()


def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "version" in result.output
