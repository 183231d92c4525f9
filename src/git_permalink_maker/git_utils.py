import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitResult:
    command: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRepo:
    """Read-only git queries against one working directory.

    Each helper runs a single git command and returns None (or False) when
    the command fails. Nothing here writes to the repository.
    """

    def __init__(self, cwd: Union[str, Path]):
        self.cwd = Path(cwd)

    def run(self, *args: str) -> GitResult:
        command = ["git", *args]
        logger.debug(f"  $ {subprocess.list2cmdline(command)}  (in {self.cwd})")
        try:
            result = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (FileNotFoundError, NotADirectoryError) as e:
            # Either git isn't installed or cwd doesn't exist
            logger.debug(f"  Could not run '{subprocess.list2cmdline(command)}': {e}")
            return GitResult(command=command, returncode=127, stdout="", stderr=str(e))

        if result.returncode != 0:
            stderr_output = result.stderr.strip() if result.stderr else "N/A"
            logger.debug(
                f"  Command '{subprocess.list2cmdline(command)}' failed (rc={result.returncode}). Stderr: '{stderr_output}'"
            )
        return GitResult(command=command, returncode=result.returncode, stdout=result.stdout, stderr=result.stderr)

    def _stdout_or_none(self, *args: str) -> Optional[str]:
        result = self.run(*args)
        if not result.ok:
            return None
        output = result.stdout.strip()
        return output or None

    def show_toplevel(self) -> Optional[str]:
        """Returns the root of the working tree containing cwd."""
        return self._stdout_or_none("rev-parse", "--show-toplevel")

    def list_remotes(self) -> Optional[List[str]]:
        result = self.run("remote")
        if not result.ok:
            return None
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def upstream_ref(self) -> Optional[str]:
        """Returns e.g. `origin/main` for the current branch, if it tracks one."""
        return self._stdout_or_none("rev-parse", "--abbrev-ref", "@{u}")

    def remote_url(self, remote: str) -> Optional[str]:
        return self._stdout_or_none("remote", "get-url", remote)

    def head_commit(self) -> Optional[str]:
        return self._stdout_or_none("rev-parse", "HEAD")

    def remote_branches_containing(self, revision: str) -> Optional[List[str]]:
        """Lists remote-tracking branches (`remote/branch`) that contain `revision`."""
        result = self.run("branch", "-r", "--contains", revision)
        if not result.ok:
            return None
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def path_exists_at(self, revision: str, path: str) -> bool:
        return self.run("cat-file", "-e", f"{revision}:{path}").ok

    def is_modified_since(self, revision: str, path: str) -> bool:
        """True if `path` in the working tree differs from `revision`."""
        # --quiet exits 1 when there are differences, 0 when there are none
        return self.run("diff", "--quiet", revision, "--", path).returncode == 1
