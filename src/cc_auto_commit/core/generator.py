"""Commit message generation through an external text generator."""

import logging
import os
import re
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from cc_auto_commit.core.config import AutoCommitConfig, GeneratorConfig
from cc_auto_commit.core.errors import GenerationError
from cc_auto_commit.models.commit import CommitMessage, GenerationRequest

logger = logging.getLogger(__name__)

# Set in the generator's environment so hooks it triggers exit immediately.
RECURSION_GUARD_ENV = "CLAUDE_AUTO_COMMIT_RUNNING"

CONVENTIONAL_SUBJECT_RE = re.compile(r"^[a-z]+(\([^)]*\))?!?:\s+\S")
CODE_FENCE_RE = re.compile(r"^\s*```")
TRUNCATION_MARKER = "\n\n[... truncated ...]"


class TextBackend(ABC):
    """Anything that turns a prompt into text."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        pass


class CommandBackend(TextBackend):
    """Runs a CLI such as ``claude -p`` with the prompt as its last argument."""

    def __init__(self, command: str, args: Optional[List[str]] = None, timeout: float = 25.0):
        self.command = command
        self.args = list(args or [])
        self.timeout = timeout

    @classmethod
    def from_config(
        cls, config: GeneratorConfig, timeout: Optional[float] = None
    ) -> "CommandBackend":
        return cls(config.command, config.args, timeout or config.timeout)

    def generate(self, prompt: str) -> str:
        env = dict(os.environ)
        env[RECURSION_GUARD_ENV] = "1"
        cmd = [self.command, *self.args, prompt]

        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except FileNotFoundError as e:
            raise GenerationError(f"Generator command not found: {self.command}") from e
        except subprocess.TimeoutExpired as e:
            raise GenerationError(
                f"Generator timed out after {self.timeout:g}s"
            ) from e
        except OSError as e:
            raise GenerationError(f"Could not run {self.command}: {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise GenerationError(
                f"{self.command} exited with status {result.returncode}"
                + (f": {detail}" if detail else "")
            )

        return result.stdout


def truncate_content(content: str, max_chars: int) -> str:
    content = content.strip()
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + TRUNCATION_MARKER


def build_prompt(request: GenerationRequest, template: str) -> str:
    """Fill the prompt template from a generation request.

    Placeholders are substituted literally, so braces inside the diff need no
    escaping.
    """
    style = request.style
    replacements = {
        "{language}": request.language,
        "{language_hints}": style.hint_for(request.language),
        "{types}": "\n".join(
            f"  - {name}: {description}" for name, description in style.types.items()
        ),
        "{scope_hints}": "\n".join(f"  - {hint}" for hint in style.scope_hints)
        or "  - Optional",
        "{max_subject_length}": str(style.max_subject_length),
    }
    prompt = template
    for placeholder, value in replacements.items():
        prompt = prompt.replace(placeholder, value)
    # Diff last: its text must never be scanned for placeholders.
    return prompt.replace("{diff_content}", request.content).strip()


def clean_generated_text(text: str) -> str:
    """Drop markdown code fences and surrounding blank lines."""
    lines = [line.rstrip() for line in text.strip().split("\n")]
    lines = [line for line in lines if not CODE_FENCE_RE.match(line)]
    return "\n".join(lines).strip()


class CommitMessageGenerator:
    """Turns diff text into a conventional-commit message."""

    def __init__(
        self,
        config: AutoCommitConfig,
        language: Optional[str] = None,
        backend: Optional[TextBackend] = None,
        timeout: Optional[float] = None,
    ):
        self.config = config
        self.language = language or config.language
        self.backend = backend or CommandBackend.from_config(config.generator, timeout)

    def build_request(self, content: str) -> GenerationRequest:
        return GenerationRequest(
            content=truncate_content(content, self.config.generator.max_diff_chars),
            language=self.language,
            style=self.config.style,
        )

    def generate(self, content: str) -> CommitMessage:
        """Generate a message for ``content``.

        Raises:
            GenerationError: if the backend fails or returns nothing usable
        """
        if not content.strip():
            raise GenerationError("Nothing to describe: empty diff")

        request = self.build_request(content)
        prompt = build_prompt(request, self.config.prompt.template)
        logger.debug(
            "Generating %s commit message from %d chars of changes",
            request.language,
            len(request.content),
        )

        text = clean_generated_text(self.backend.generate(prompt))
        if not text:
            raise GenerationError("Generator returned an empty message")

        subject = text.split("\n", 1)[0].strip()
        if not CONVENTIONAL_SUBJECT_RE.match(subject):
            logger.warning("Generated subject is not conventional: %r", subject[:80])
            text = f"{self.config.generator.default_commit_message}\n\n{text}"

        return CommitMessage(text=text)
