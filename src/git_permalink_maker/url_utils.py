from __future__ import annotations

import re
from typing import Optional

from .constants import HTTPS_PORT_REMOTE_RE, HTTPS_REMOTE_RE, MSG_PARSE_REMOTE, SSH_REMOTE_RE
from .exceptions import RemoteParseError
from .permalink_info import RemoteDescriptor

_REMOTE_FORMS = (
    SSH_REMOTE_RE,
    HTTPS_PORT_REMOTE_RE,
    HTTPS_REMOTE_RE,
)


def strip_git_suffix(repository: str) -> str:
    """Drop a trailing `.git` (and any trailing slash before checking for it)."""
    repository = repository.rstrip("/")
    while repository.endswith(".git"):
        repository = repository[: -len(".git")].rstrip("/")
    return repository


def match_remote_url(remote_url: str) -> Optional[re.Match]:
    """Returns the match for the first remote URL form that fits, if any."""
    for pattern in _REMOTE_FORMS:
        match = pattern.match(remote_url)
        if match:
            return match
    return None


def parse_remote_url(remote_url: str) -> RemoteDescriptor:
    """
    Parses a git remote URL into host, port and repository.

    Supported forms (first match wins):
        - `user@host:owner/repo.git`
        - `https://host:port/owner/repo.git`
        - `https://host/owner/repo.git`

    The host is kept exactly as written.
    Raises RemoteParseError for anything else.
    """
    cleaned = remote_url.strip()
    match = match_remote_url(cleaned)
    if not match:
        raise RemoteParseError(f"{MSG_PARSE_REMOTE}: {cleaned}", remote_url=remote_url)

    groups = match.groupdict()
    repository = strip_git_suffix(groups["repository"])
    if not repository:
        raise RemoteParseError(f"{MSG_PARSE_REMOTE}: {cleaned}", remote_url=remote_url)
    return RemoteDescriptor(host=groups["host"], repository=repository, port=groups.get("port"))


def repository_url(remote: RemoteDescriptor) -> str:
    """Plain web URL of a repository, for hosts without a formatter."""
    return remote.base_url + remote.repository
