"""Branch and commit decisions for hook events.

Each handler walks the same short sequence: optionally move off a protected
branch onto a fresh session branch, check for changes, stage, describe the
staged diff, commit. Nothing is committed unless a message was generated.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Optional

from cc_auto_commit.core.diff_source import ensure_readable, resolve_staged_changes
from cc_auto_commit.core.generator import CommitMessageGenerator
from cc_auto_commit.core.repository import GitRepository
from cc_auto_commit.models.commit import CommitOutcome
from cc_auto_commit.models.repository import BranchDecision, RepoState

logger = logging.getLogger(__name__)

PROTECTED_BRANCHES = frozenset({"main", "master", "develop"})
BRANCH_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

# Characters git refuses in branch names, plus whitespace.
_INVALID_REF_CHARS = re.compile(r"[\s~^:?*\[\\]+|\.\.|@\{")


def session_branch_name(session_id: str, now: datetime) -> str:
    """``session-<local timestamp>-<session id>``."""
    safe_id = _INVALID_REF_CHARS.sub("-", session_id).strip("-./") or "unknown"
    return f"session-{now.strftime(BRANCH_TIMESTAMP_FORMAT)}-{safe_id}"


def decide_branch(state: RepoState, session_id: str, now: datetime) -> BranchDecision:
    """Branch only when sitting on a protected branch."""
    if state.current_branch not in PROTECTED_BRANCHES:
        return BranchDecision(should_branch=False)
    return BranchDecision(
        should_branch=True, new_branch_name=session_branch_name(session_id, now)
    )


class AutoCommitter:
    """Applies branch and commit decisions to one repository."""

    def __init__(
        self,
        repo: GitRepository,
        generator: CommitMessageGenerator,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.repo = repo
        self.generator = generator
        self.clock = clock

    def handle_session_boundary(self, session_id: str) -> CommitOutcome:
        """Close out the previous session: branch if needed, then commit everything."""
        state = self.repo.state()
        decision = decide_branch(state, session_id, self.clock())

        branch_created = None
        if decision.should_branch:
            branch_created = self.repo.create_branch(decision.new_branch_name)
        else:
            logger.debug("Staying on %s", state.current_branch)

        if not state.has_changes:
            logger.info("No changes to commit at session boundary")
            return CommitOutcome(branch_created=branch_created)

        self.repo.stage_all()
        return self._commit_staged(branch_created)

    def handle_file_change(self, file_path: str) -> CommitOutcome:
        """Commit a single file that Claude just wrote or edited.

        Raises:
            SourceReadError: if the file is outside the repository or unreadable
        """
        relative = self.repo.relative_path(file_path)
        ensure_readable(self.repo, relative)

        if not self.repo.has_changes(relative):
            logger.info("No changes in %s", relative)
            return CommitOutcome()

        self.repo.stage([relative])
        return self._commit_staged()

    def _commit_staged(self, branch_created: Optional[str] = None) -> CommitOutcome:
        diff = resolve_staged_changes(self.repo)
        if not diff:
            return CommitOutcome(branch_created=branch_created)

        # Generation must succeed before anything is committed.
        message = self.generator.generate(diff)
        sha = self.repo.commit(message)
        return CommitOutcome(branch_created=branch_created, commit_sha=sha, message=message)
