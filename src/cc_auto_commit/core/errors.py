"""Error types raised while turning hook events into commits."""


class AutoCommitError(Exception):
    """Base class for all cc-auto-commit errors."""


class ParseError(AutoCommitError):
    """Hook payload could not be parsed into a known event."""


class NotARepositoryError(AutoCommitError):
    """The working directory is not inside a git repository."""


class SourceReadError(AutoCommitError, IOError):
    """The edited file could not be read."""


class EmptyInputError(AutoCommitError):
    """Standalone mode received nothing to summarize."""


class GenerationError(AutoCommitError):
    """The text generation backend failed or returned nothing usable."""


class RepoWriteError(AutoCommitError):
    """A branch, stage or commit operation failed."""


class CommitError(RepoWriteError):
    """Changes were staged but the commit itself failed."""


class ConfigError(AutoCommitError):
    """The commit-config file is malformed."""


class SettingsError(AutoCommitError):
    """Claude Code settings file could not be updated."""
