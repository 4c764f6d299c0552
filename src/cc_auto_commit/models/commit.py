"""Commit message models."""

from typing import Optional

from pydantic import BaseModel

from cc_auto_commit.core.config import StyleConfig


class GenerationRequest(BaseModel):
    """Everything the prompt is built from."""

    content: str
    language: str
    style: StyleConfig

    model_config = {"frozen": True}


class CommitMessage(BaseModel):
    """A generated commit message, subject first."""

    text: str

    model_config = {"frozen": True}

    @property
    def subject(self) -> str:
        return self.text.split("\n", 1)[0].strip()

    @property
    def body(self) -> Optional[str]:
        """Everything after the subject line, or None for one-line messages."""
        parts = self.text.split("\n", 1)
        if len(parts) == 1:
            return None
        body = parts[1].strip()
        return body or None

    def __str__(self) -> str:
        return self.text


class CommitOutcome(BaseModel):
    """What a single invocation did to the repository."""

    branch_created: Optional[str] = None
    commit_sha: Optional[str] = None
    message: Optional[CommitMessage] = None

    model_config = {"frozen": True}

    @property
    def committed(self) -> bool:
        return self.commit_sha is not None
