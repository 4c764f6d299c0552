"""Where the text to summarize comes from."""

import logging
from typing import IO

from cc_auto_commit.core.errors import EmptyInputError, SourceReadError
from cc_auto_commit.core.repository import GitRepository

logger = logging.getLogger(__name__)


def read_standalone_input(stream: IO[str]) -> str:
    """Read piped diff text to end-of-stream."""
    content = stream.read()
    if not content or not content.strip():
        raise EmptyInputError("No diff on standard input, nothing to summarize")
    return content


def ensure_readable(repo: GitRepository, relative: str) -> None:
    """Raise if the file cannot be opened; its content comes from the staged diff."""
    path = repo.absolute_path(relative)
    try:
        with open(path, "rb"):
            pass
    except OSError as e:
        raise SourceReadError(f"Cannot read {relative}: {e}") from e


def resolve_staged_changes(repo: GitRepository) -> str:
    """Patch text of what the next commit will contain; empty when nothing is staged."""
    diff = repo.staged_diff()
    if not diff.strip():
        logger.debug("Nothing staged in %s", repo.project_root)
        return ""
    return diff
