"""Git repository access for auto-commits."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from git import GitError, Head, Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from cc_auto_commit.core.errors import (
    CommitError,
    NotARepositoryError,
    RepoWriteError,
    SourceReadError,
)
from cc_auto_commit.models.commit import CommitMessage
from cc_auto_commit.models.repository import RepoState

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


class GitRepository:
    """Inspects and writes to the git repository containing ``start_path``.

    Branch and commit writes go through GitPython's index and reference
    objects; status and diff queries use GitPython's git command wrapper.
    """

    def __init__(self, start_path: Optional[Union[str, Path]] = None):
        self.start_path = Path(start_path or Path.cwd()).resolve()
        try:
            self.repo = Repo(self.start_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepositoryError(f"Not a git repository: {self.start_path}") from e

        if self.repo.bare or self.repo.working_tree_dir is None:
            raise NotARepositoryError(f"Bare repository at {self.repo.git_dir}")

        self.project_root = Path(self.repo.working_tree_dir).resolve()

    def current_branch(self) -> str:
        """Name of the checked-out branch, or ``HEAD`` when detached."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return DETACHED_HEAD

    def has_changes(self, path: Optional[str] = None) -> bool:
        """Check for staged, unstaged or untracked changes, optionally under ``path``."""
        return self.repo.is_dirty(
            index=True, working_tree=True, untracked_files=True, path=path
        )

    def state(self, path: Optional[str] = None) -> RepoState:
        return RepoState(
            current_branch=self.current_branch(), has_changes=self.has_changes(path)
        )

    def relative_path(self, file_path: Union[str, Path]) -> str:
        """Express ``file_path`` relative to the work tree, as git expects it."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.start_path / path
        path = path.resolve()
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError as e:
            raise SourceReadError(
                f"{file_path} is outside the repository at {self.project_root}"
            ) from e

    def absolute_path(self, relative: str) -> Path:
        return self.project_root / relative

    def create_branch(self, name: str) -> str:
        """Create ``name`` at HEAD and switch to it without touching the work tree."""
        if name in self.repo.heads:
            raise RepoWriteError(f"Branch already exists: {name}")

        try:
            if self.repo.head.is_valid():
                new_head = self.repo.create_head(name)
            else:
                # Unborn HEAD: nothing to point at yet, just repoint the symbolic ref.
                new_head = Head(self.repo, f"refs/heads/{name}")
            self.repo.head.reference = new_head
        except (GitError, OSError, ValueError) as e:
            raise RepoWriteError(f"Failed to create branch {name}: {e}") from e

        logger.info("Switched to new branch %s", name)
        return name

    def stage(self, paths: List[str]) -> None:
        try:
            self.repo.index.add(paths)
        except (GitError, OSError, ValueError) as e:
            raise RepoWriteError(f"Failed to stage {', '.join(paths)}: {e}") from e

    def stage_all(self) -> None:
        """Stage every change in the work tree, including deletions and new files."""
        try:
            self.repo.git.add(all=True)
        except (GitError, OSError) as e:
            raise RepoWriteError(f"Failed to stage changes: {e}") from e

    def staged_diff(self, paths: Optional[List[str]] = None) -> str:
        """Patch text of the index against HEAD (or the empty tree when unborn)."""
        args = ["--cached", "--no-color", "--no-ext-diff"]
        if paths:
            args.append("--")
            args.extend(paths)
        try:
            return self.repo.git.diff(*args)
        except GitError as e:
            raise RepoWriteError(f"Failed to read staged diff: {e}") from e

    def commit(self, message: CommitMessage) -> str:
        """Commit the current index and return the new commit's hexsha."""
        try:
            commit = self.repo.index.commit(message.text)
        except (GitError, OSError, ValueError) as e:
            raise CommitError(f"Failed to create commit: {e}") from e

        logger.info("Created commit %s on %s", commit.hexsha[:8], self.current_branch())
        return commit.hexsha
