from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from git_permalink_maker import global_prefs
from git_permalink_maker.git_utils import GitRepo, GitResult

HEAD = "0123456789abcdef0123456789abcdef01234567"


class FakeGitRepo(GitRepo):
    """Answers git commands from a table instead of running git."""

    def __init__(
        self,
        cwd="/repo",
        *,
        toplevel: Optional[str] = "/repo",
        remotes: Optional[Dict[str, str]] = None,
        upstream: Optional[str] = None,
        head: Optional[str] = HEAD,
        containing: Optional[List[str]] = None,
        files: Tuple[str, ...] = ("src/app.py",),
        diffs: Optional[Dict[str, str]] = None,
        history: Optional[List[List[str]]] = None,
    ):
        super().__init__(cwd)
        self.toplevel = toplevel
        self.remotes = {"origin": "git@github.com:owner/repo.git"} if remotes is None else remotes
        self.upstream = upstream
        self.head = head
        self.containing = ["origin/HEAD -> origin/main", "origin/main"] if containing is None else containing
        self.files = files
        self.diffs = diffs or {}
        self.history = [] if history is None else history

    @staticmethod
    def _ok(command, stdout=""):
        return GitResult(command=command, returncode=0, stdout=stdout, stderr="")

    @staticmethod
    def _fail(command, stderr="fatal"):
        return GitResult(command=command, returncode=128, stdout="", stderr=stderr)

    def run(self, *args):
        command = ["git", *args]
        self.history.append(list(args))
        if args[:2] == ("rev-parse", "--show-toplevel"):
            return self._ok(command, f"{self.toplevel}\n") if self.toplevel else self._fail(command)
        if args == ("remote",):
            return self._ok(command, "".join(f"{name}\n" for name in self.remotes))
        if args[:2] == ("remote", "get-url"):
            url = self.remotes.get(args[2])
            return self._ok(command, f"{url}\n") if url else self._fail(command, "error: No such remote")
        if args == ("rev-parse", "--abbrev-ref", "@{u}"):
            return self._ok(command, f"{self.upstream}\n") if self.upstream else self._fail(command)
        if args == ("rev-parse", "HEAD"):
            return self._ok(command, f"{self.head}\n") if self.head else self._fail(command)
        if args[:3] == ("branch", "-r", "--contains"):
            return self._ok(command, "".join(f"  {line}\n" for line in self.containing))
        if args[0] == "cat-file":
            path = args[2].split(":", 1)[1]
            return self._ok(command) if path in self.files else self._fail(command)
        if args[:2] == ("diff", "--quiet"):
            if self.diffs.get(args[4]):
                return GitResult(command=command, returncode=1, stdout="", stderr="")
            return self._ok(command)
        return self._fail(command, f"unexpected command: {command}")

    def commands(self) -> List[str]:
        return [" ".join(args) for args in self.history]


@pytest.fixture
def fake_git_factory():
    """Returns a factory building FakeGitRepo objects that share one history."""

    def make(**kwargs):
        history: List[List[str]] = []

        def factory(cwd: Path) -> FakeGitRepo:
            return FakeGitRepo(cwd, history=history, **kwargs)

        factory.history = history
        return factory

    return make


@pytest.fixture(autouse=True)
def reset_prefs():
    global_prefs.reset()
    yield
    global_prefs.reset()
