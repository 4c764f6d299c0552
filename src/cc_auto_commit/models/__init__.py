"""Data models for cc-auto-commit."""

from .commit import CommitMessage, CommitOutcome, GenerationRequest
from .event import (
    HookEvent,
    PostToolUseEvent,
    SessionStartEvent,
    SessionStartSource,
    StandaloneInput,
    ToolInput,
    ToolResponse,
)
from .repository import BranchDecision, RepoState

__all__ = [
    "BranchDecision",
    "CommitMessage",
    "CommitOutcome",
    "GenerationRequest",
    "HookEvent",
    "PostToolUseEvent",
    "RepoState",
    "SessionStartEvent",
    "SessionStartSource",
    "StandaloneInput",
    "ToolInput",
    "ToolResponse",
]
