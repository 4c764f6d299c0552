"""Routes Claude Code hook payloads to the auto-committer.

Claude Code never delivers SessionEnd to command hooks, so the end of a
session is detected from the SessionStart that follows it: ``/clear`` and
auto-compaction start a new session with ``source`` set to ``clear`` or
``compact``. That workaround is confined to ``ends_previous_session``.
"""

import json
import logging
from datetime import datetime
from typing import Callable, Optional, Union

from pydantic import TypeAdapter, ValidationError

from cc_auto_commit.core.committer import AutoCommitter
from cc_auto_commit.core.config import AutoCommitConfig
from cc_auto_commit.core.errors import ParseError
from cc_auto_commit.core.generator import CommitMessageGenerator, TextBackend
from cc_auto_commit.core.repository import GitRepository
from cc_auto_commit.models.commit import CommitMessage, CommitOutcome
from cc_auto_commit.models.event import (
    HookEvent,
    PostToolUseEvent,
    SessionStartEvent,
    SessionStartSource,
    StandaloneInput,
    ToolInput,
)

logger = logging.getLogger(__name__)

SESSION_END_SOURCES = frozenset({SessionStartSource.CLEAR, SessionStartSource.COMPACT})
COMMIT_TOOLS = frozenset({"Write", "Edit", "MultiEdit"})

_hook_event_adapter = TypeAdapter(HookEvent)

ParsedInput = Union[SessionStartEvent, PostToolUseEvent, StandaloneInput]


def parse_input(raw: str) -> ParsedInput:
    """Classify stdin as a hook payload or as standalone diff text.

    Anything that is not a JSON object is diff text. A JSON object that is
    not a known hook event is a malformed payload.

    Raises:
        ParseError: for JSON that does not validate as a hook event
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return StandaloneInput(content=raw)

    if not isinstance(data, dict):
        return StandaloneInput(content=raw)

    try:
        return _hook_event_adapter.validate_python(data)
    except ValidationError as e:
        raise ParseError(f"Unrecognized hook payload: {e.error_count()} validation error(s)") from e


def ends_previous_session(event: SessionStartEvent) -> bool:
    return event.source in SESSION_END_SOURCES


def is_commit_worthy(event: PostToolUseEvent) -> bool:
    return (
        event.tool_name in COMMIT_TOOLS
        and event.tool_response.success
        and bool(event.tool_input.file_path)
    )


class HookDispatcher:
    """Sends each parsed input to the right handler."""

    def __init__(
        self,
        config: AutoCommitConfig,
        language: Optional[str] = None,
        backend: Optional[TextBackend] = None,
        clock: Callable[[], datetime] = datetime.now,
        repo_factory: Callable[[Optional[str]], GitRepository] = GitRepository,
    ):
        self.config = config
        self.language = language
        self.backend = backend
        self.clock = clock
        self.repo_factory = repo_factory

    def make_generator(self, timeout: Optional[float] = None) -> CommitMessageGenerator:
        return CommitMessageGenerator(self.config, self.language, self.backend, timeout)

    def make_committer(self, cwd: Optional[str], timeout: Optional[float] = None) -> AutoCommitter:
        return AutoCommitter(self.repo_factory(cwd), self.make_generator(timeout), self.clock)

    def dispatch(self, parsed: ParsedInput) -> Union[CommitMessage, CommitOutcome]:
        match parsed:
            case StandaloneInput(content=content):
                return self.make_generator().generate(content)

            case SessionStartEvent() if not ends_previous_session(parsed):
                logger.debug("SessionStart source=%s, nothing to do", parsed.source)
                return CommitOutcome()

            case SessionStartEvent(session_id=session_id, cwd=cwd):
                logger.info("Session %s follows a %s", session_id, parsed.source.value)
                # Must finish inside the SessionStart hook timeout.
                committer = self.make_committer(cwd, self.config.generator.session_timeout)
                return committer.handle_session_boundary(session_id)

            case PostToolUseEvent() if not is_commit_worthy(parsed):
                logger.debug("PostToolUse for %s ignored", parsed.tool_name)
                return CommitOutcome()

            case PostToolUseEvent(cwd=cwd, tool_input=ToolInput(file_path=file_path)):
                logger.info("%s on %s", parsed.tool_name, file_path)
                return self.make_committer(cwd).handle_file_change(file_path)

            case _:
                raise ParseError(f"Unsupported input type: {type(parsed).__name__}")
