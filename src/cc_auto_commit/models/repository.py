"""Repository state and branch decision models."""

from typing import Optional

from pydantic import BaseModel, model_validator


class RepoState(BaseModel):
    """Snapshot of the repository taken at the start of an invocation."""

    current_branch: str
    has_changes: bool

    model_config = {"frozen": True}


class BranchDecision(BaseModel):
    """Whether to move onto a new session branch before committing."""

    should_branch: bool = False
    new_branch_name: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _name_required_when_branching(self):
        if self.should_branch and not self.new_branch_name:
            raise ValueError("new_branch_name is required when should_branch is set")
        return self
