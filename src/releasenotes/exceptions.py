"""Exception types raised by releasenotes."""

from enum import Enum


class ReleaseNotesError(Exception):
    """Base class for all releasenotes failures."""


class ConfigurationError(ReleaseNotesError):
    """Missing credential, model name or system prompt file."""


class GitHubApiError(ReleaseNotesError):
    """The GitHub API could not be reached or returned an unusable response."""


class CompletionError(ReleaseNotesError):
    """The completion service failed to produce release notes."""


class DiffFailure(str, Enum):
    """How a diff fetch failed."""

    LAUNCH = "launch"
    STATUS = "status"
    DECODE = "decode"


class DiffFetchError(ReleaseNotesError):
    """The compare diff could not be retrieved or decoded."""

    def __init__(self, kind: DiffFailure, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"{kind.value} failure: {reason}")
