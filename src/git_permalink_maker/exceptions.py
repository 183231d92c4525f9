"""Errors raised while building a permalink.

Every fatal condition is a ``PermalinkError``; the orchestrator reports it
once and stops. ``RemoteSyncWarning`` is never raised, only reported.
"""


class PermalinkError(Exception):
    """Base class for conditions that abort link generation."""


class ContextError(PermalinkError):
    """No file to link, or the file is not inside a git working tree."""


class RemoteError(PermalinkError):
    """No usable remote could be determined."""


class RemoteParseError(RemoteError):
    """The remote's URL has a shape we don't understand."""

    def __init__(self, message: str, remote_url: str = ""):
        super().__init__(message)
        self.remote_url = remote_url


class RevisionError(PermalinkError):
    """The checked-out commit could not be determined."""


class FileNotInRemoteError(PermalinkError, LookupError):
    """The file does not exist at the resolved revision."""


class HostError(PermalinkError):
    """No registered formatter matches the remote's host."""

    def __init__(self, message: str, host: str = ""):
        super().__init__(message)
        self.host = host


class RemoteSyncWarning(UserWarning):
    """The link may point at something the remote doesn't show yet."""
