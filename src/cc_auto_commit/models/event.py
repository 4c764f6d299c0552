"""Hook event models for Claude Code payloads."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class SessionStartSource(str, Enum):
    """Why Claude Code started a session."""

    STARTUP = "startup"
    RESUME = "resume"
    CLEAR = "clear"
    COMPACT = "compact"
    OTHER = "other"


class ToolInput(BaseModel):
    """Tool parameters; only the edited file matters here."""

    file_path: Optional[str] = None

    model_config = {"extra": "ignore", "frozen": True}


class ToolResponse(BaseModel):
    """Tool result; a missing success flag counts as success."""

    success: bool = True

    model_config = {"extra": "ignore", "frozen": True}


class SessionStartEvent(BaseModel):
    """SessionStart hook payload."""

    hook_event_name: Literal["SessionStart"]
    session_id: str
    cwd: Optional[str] = None
    transcript_path: Optional[str] = None
    source: Optional[SessionStartSource] = None

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("source", mode="before")
    @classmethod
    def _normalize_source(cls, value):
        if value is None or isinstance(value, SessionStartSource):
            return value
        try:
            return SessionStartSource(str(value).lower())
        except ValueError:
            return SessionStartSource.OTHER


class PostToolUseEvent(BaseModel):
    """PostToolUse hook payload."""

    hook_event_name: Literal["PostToolUse"]
    session_id: str
    cwd: Optional[str] = None
    transcript_path: Optional[str] = None
    tool_name: str
    tool_input: ToolInput = ToolInput()
    tool_response: ToolResponse = ToolResponse()

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("tool_response", mode="before")
    @classmethod
    def _tolerate_non_object_response(cls, value):
        # Some tools report a bare string or list instead of an object.
        if value is None or not isinstance(value, dict):
            return {}
        return value


HookEvent = Annotated[
    Union[SessionStartEvent, PostToolUseEvent], Field(discriminator="hook_event_name")
]


class StandaloneInput(BaseModel):
    """Raw diff text piped in outside of any hook."""

    content: str

    model_config = {"frozen": True}
