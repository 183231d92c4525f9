import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from . import global_prefs
from .constants import MSG_NO_FILE, MSG_NOT_IN_REPO
from .exceptions import ContextError, PermalinkError, RemoteSyncWarning
from .git_utils import GitRepo
from .global_prefs import GlobalPreferences
from .permalink_info import LinkRequest
from .resolver import RemoteResolver
from .selection import Selection
from .url_utils import repository_url

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]
GitFactory = Callable[[Path], GitRepo]


def log_notify(level: str, message: str) -> None:
    """Default diagnostics sink: the `logging` module."""
    if level == "error":
        logger.error(f"❌ {message}")
    elif level == "warning":
        logger.warning(f"⚠️ {message}")
    else:
        logger.info(message)


class PermalinkApp:
    """Turns a file (and maybe some lines) into a permalink on its remote host.

    Failures are reported through `notify` and the method returns None;
    the action only runs once a complete URL exists.
    """

    def __init__(
        self,
        prefs: Optional[GlobalPreferences] = None,
        git_factory: Optional[GitFactory] = None,
        notify: Optional[Notify] = None,
    ):
        self.prefs = prefs
        self.git_factory = git_factory or GitRepo
        self.notify = notify or log_notify

    def _snapshot(self, overrides: Optional[Mapping[str, Any]]) -> GlobalPreferences:
        base = self.prefs if self.prefs is not None else global_prefs.current()
        return base.merged(overrides)

    def _warn(self, warning: RemoteSyncWarning) -> None:
        self.notify("warning", str(warning))

    def _locate(self, path: Union[str, Path, None], must_be_file: bool) -> Tuple[Path, Optional[str]]:
        """Returns (repo root, path relative to it in posix form)."""
        if not path or not str(path).strip():
            raise ContextError(MSG_NO_FILE)
        path = Path(path).expanduser().resolve()
        if must_be_file and path.is_dir():
            raise ContextError(MSG_NO_FILE)
        start_dir = path if path.is_dir() and not must_be_file else path.parent

        toplevel = self.git_factory(start_dir).show_toplevel()
        if not toplevel:
            raise ContextError(MSG_NOT_IN_REPO)
        repo_root = Path(toplevel).resolve()
        if not must_be_file:
            return repo_root, None
        try:
            rel_path = path.relative_to(repo_root).as_posix()
        except ValueError:
            raise ContextError(MSG_NOT_IN_REPO) from None
        return repo_root, rel_path

    def build_range_link(self, selection: Selection, prefs: GlobalPreferences) -> str:
        """Like generate_range_link, but raises PermalinkError and runs no action."""
        # Capture lines before talking to git
        line_start, line_end = selection.line_range(prefs.include_line_in_point_mode)

        repo_root, rel_path = self._locate(selection.file_path, must_be_file=True)
        resolver = RemoteResolver(self.git_factory(repo_root), prefs.forced_remote, warn=self._warn)
        request = resolver.resolve(rel_path, line_start, line_end)
        return prefs.hosts.format(request)

    def build_repo_link(self, path: Union[str, Path, None], prefs: GlobalPreferences) -> str:
        repo_root, _ = self._locate(path if path is not None else Path.cwd(), must_be_file=False)
        resolver = RemoteResolver(self.git_factory(repo_root), prefs.forced_remote, warn=self._warn)
        remote = resolver.resolve_repository()

        formatter = prefs.hosts.find(remote.host)
        if formatter is None:
            return repository_url(remote)
        return formatter(LinkRequest.for_remote(remote))

    def generate_range_link(
        self,
        selection: Selection,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        prefs = self._snapshot(overrides)
        try:
            url = self.build_range_link(selection, prefs)
        except PermalinkError as e:
            self.notify("error", str(e))
            return None
        prefs.action(url)
        return url

    def generate_repo_link(
        self,
        path: Union[str, Path, None] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        prefs = self._snapshot(overrides)
        try:
            url = self.build_repo_link(path, prefs)
        except PermalinkError as e:
            self.notify("error", str(e))
            return None
        prefs.action(url)
        return url


def generate_range_link(selection: Selection, overrides: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    return PermalinkApp().generate_range_link(selection, overrides)


def generate_repo_link(
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    return PermalinkApp().generate_repo_link(path, overrides)
