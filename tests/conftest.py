"""Shared fixtures for cc-auto-commit tests."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from git import Repo

from cc_auto_commit.core.config import load_default_config
from cc_auto_commit.core.generator import TextBackend

FIXED_NOW = datetime(2026, 10, 19, 12, 30, 45)


class StubBackend(TextBackend):
    """Returns a canned response and records every prompt."""

    def __init__(self, response="feat(app): add greeting", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the debug log and user config out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "CC_AUTO_COMMIT_LANGUAGE",
        "CC_AUTO_COMMIT_CONFIG",
        "CLAUDE_AUTO_COMMIT_RUNNING",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


def init_repo(path: Path, branch: str = "main") -> Repo:
    repo = Repo.init(path)
    repo.git.symbolic_ref("HEAD", f"refs/heads/{branch}")
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
        config.set_value("commit", "gpgsign", "false")
    return repo


@pytest.fixture
def temp_git_project():
    """A git project on ``main`` with one committed file."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir).resolve()
        repo = init_repo(project_path)

        (project_path / "main.py").write_text("def main():\n    pass\n")
        repo.index.add(["main.py"])
        repo.index.commit("Initial commit")

        yield project_path


@pytest.fixture
def empty_git_project():
    """A freshly initialized project with no commits yet."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir).resolve()
        init_repo(project_path)
        yield project_path


@pytest.fixture
def config():
    return load_default_config()


@pytest.fixture
def backend():
    return StubBackend()
