"""Picks the remote and the commit a permalink should point at.

Queries run one at a time, in a fixed order, because each one needs the
answer of the previous: remote name, remote URL, HEAD, then the checks on
that commit.
"""
import logging
from typing import Callable, List, Optional

from .constants import (
    DEFAULT_REMOTE,
    MSG_COMMIT_NOT_PUSHED,
    MSG_FILE_NOT_IN_REMOTE,
    MSG_NO_COMMIT,
    MSG_NO_REMOTE,
    MSG_UNCOMMITTED,
)
from .exceptions import FileNotInRemoteError, RemoteError, RemoteSyncWarning, RevisionError
from .git_utils import GitRepo
from .permalink_info import LinkRequest, RemoteDescriptor
from .url_utils import parse_remote_url

logger = logging.getLogger(__name__)

WarnCallback = Callable[[RemoteSyncWarning], None]


def _log_warning(warning: RemoteSyncWarning) -> None:
    logger.warning(f"⚠️ {warning}")


def branch_on_remote(branch: str, remote: str) -> bool:
    """True if `branch` (e.g. `origin/feature/x`) is a tracking branch of `remote`.

    Symbolic lines (`origin/HEAD -> origin/main`) are matched on their left side.
    Remote names may themselves contain `/`.
    """
    name = branch.split("->", 1)[0].strip()
    return name.startswith(remote + "/")


class RemoteResolver:
    def __init__(
        self,
        git: GitRepo,
        forced_remote: Optional[str] = None,
        warn: Optional[WarnCallback] = None,
    ):
        self.git = git
        self.forced_remote = forced_remote
        self.warn = warn or _log_warning

    def resolve_remote_name(self) -> str:
        if self.forced_remote:
            logger.debug(f"Using configured remote '{self.forced_remote}'")
            return self.forced_remote

        remotes = self.git.list_remotes()
        if not remotes:
            raise RemoteError(MSG_NO_REMOTE)
        if len(remotes) == 1:
            return remotes[0]

        upstream = self.git.upstream_ref()
        owners = [name for name in remotes if upstream and branch_on_remote(upstream, name)]
        if owners:
            remote = max(owners, key=len)
        elif upstream and "/" in upstream:
            remote = upstream.split("/", 1)[0]
        else:
            remote = None
        if remote:
            logger.debug(f"Several remotes; using '{remote}' from upstream '{upstream}'")
            return remote
        logger.debug(f"Several remotes and no upstream; falling back to '{DEFAULT_REMOTE}'")
        return DEFAULT_REMOTE

    def resolve_remote(self, remote: str) -> RemoteDescriptor:
        remote_url = self.git.remote_url(remote)
        if not remote_url:
            raise RemoteError(MSG_NO_REMOTE)
        return parse_remote_url(remote_url)

    def resolve_revision(self) -> str:
        revision = self.git.head_commit()
        if not revision:
            raise RevisionError(MSG_NO_COMMIT)
        return revision

    def is_commit_in_remote(self, remote: str, revision: str) -> bool:
        branches: List[str] = self.git.remote_branches_containing(revision) or []
        return any(branch_on_remote(branch, remote) for branch in branches)

    def check_commit_in_remote(self, remote: str, revision: str) -> None:
        if not self.is_commit_in_remote(remote, revision):
            self.warn(RemoteSyncWarning(MSG_COMMIT_NOT_PUSHED.format(remote=remote)))

    def check_file_in_remote(self, remote: str, revision: str, file_path: str) -> None:
        if not self.git.path_exists_at(revision, file_path):
            raise FileNotInRemoteError(MSG_FILE_NOT_IN_REMOTE.format(path=file_path, remote=remote))

    def check_uncommitted_changes(self, revision: str, file_path: str) -> None:
        if self.git.is_modified_since(revision, file_path):
            self.warn(RemoteSyncWarning(MSG_UNCOMMITTED.format(path=file_path)))

    def resolve_repository(self) -> RemoteDescriptor:
        """Only the remote; no revision or file lookups."""
        return self.resolve_remote(self.resolve_remote_name())

    def resolve(
        self,
        file_path: str,
        line_start: Optional[int] = None,
        line_end: Optional[int] = None,
    ) -> LinkRequest:
        remote = self.resolve_remote_name()
        descriptor = self.resolve_remote(remote)
        revision = self.resolve_revision()
        logger.debug(f"Remote '{remote}' -> {descriptor.host}/{descriptor.repository} @ {revision[:8]}")

        self.check_commit_in_remote(remote, revision)
        self.check_file_in_remote(remote, revision, file_path)
        # Line numbers only matter if we're going to put them in the URL
        if line_start is not None:
            self.check_uncommitted_changes(revision, file_path)

        return LinkRequest.for_remote(
            descriptor,
            revision=revision,
            file_path=file_path,
            line_start=line_start,
            line_end=line_end,
        )
