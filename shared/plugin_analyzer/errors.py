"""Exceptions raised while building snapshots and generating diffs."""

from typing import Optional

from shared.models import SkipReason


class PluginDiffError(Exception):
    """Base class for all plugin diff errors."""


class ArchiveReadError(PluginDiffError):
    """The distribution archive itself cannot be opened or read. Fatal."""


class ScmCommandError(PluginDiffError):
    """A git command failed or timed out."""


class DiffGenerationError(PluginDiffError):
    """No diff body could be produced for a plugin."""


class PluginSkipped(PluginDiffError):
    """A single plugin cannot be tracked; the run continues without it."""

    reason: SkipReason = SkipReason.PARSE_ERROR

    def __init__(self, message: str, reason: Optional[SkipReason] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class DescriptorParseError(PluginSkipped):
    reason = SkipReason.PARSE_ERROR


class MissingVersionError(PluginSkipped):
    reason = SkipReason.MISSING_VERSION


class MissingScmError(PluginSkipped):
    reason = SkipReason.MISSING_SCM


class RepositoryUnavailableError(PluginSkipped):
    reason = SkipReason.REPOSITORY_UNAVAILABLE


class CommitNotFoundError(PluginSkipped):
    reason = SkipReason.COMMIT_NOT_FOUND
