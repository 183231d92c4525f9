#!/usr/bin/env python3
"""
Git Permalink Maker
===================

Prints (or copies, or opens) a permalink to a file in a git repository, as
seen on the repository's hosting provider, pinned to the checked-out commit.


Usage
-----

git-permalink path/to/file.py               # whole file
git-permalink path/to/file.py -l 42         # one line
git-permalink path/to/file.py -r 10-20      # a range of lines
git-permalink path/to/file.py:10-20         # same thing
git-permalink --repo                        # the repository itself

Help: to see all flags, run with `-h`


Supported
---------

- GitHub: `https://github.com/org/project/blob/commit_hash/path#L10-L20`
- GitLab: `https://gitlab.com/org/project/-/blob/commit_hash/path#L10-20`
- Gitea/Forgejo (Codeberg): `https://codeberg.org/org/project/src/commit/commit_hash/path#L10-L20`
- BitBucket: `https://bitbucket.org/org/project/src/commit_hash/path#lines-10:20`
- cgit (kernel.org, savannah): `https://git.kernel.org/org/project.git/tree/path?id=commit_hash#n10`

Self-hosted instances can be mapped to one of these with `--host`.
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .app import PermalinkApp, generate_range_link, generate_repo_link
from .exceptions import (
    ContextError,
    FileNotInRemoteError,
    HostError,
    PermalinkError,
    RemoteError,
    RemoteParseError,
    RemoteSyncWarning,
    RevisionError,
)
from .global_prefs import GlobalPreferences, configure
from .hosts import BUILTIN_HOSTS, STYLES, HostRegistry, HostRule
from .permalink_info import LinkRequest, RemoteDescriptor
from .selection import Selection
from .url_utils import parse_remote_url

__all__ = [
    "BUILTIN_HOSTS",
    "ContextError",
    "FileNotInRemoteError",
    "GlobalPreferences",
    "HostError",
    "HostRegistry",
    "HostRule",
    "LinkRequest",
    "PermalinkApp",
    "PermalinkError",
    "RemoteDescriptor",
    "RemoteError",
    "RemoteParseError",
    "RemoteSyncWarning",
    "RevisionError",
    "Selection",
    "configure",
    "generate_range_link",
    "generate_repo_link",
    "main",
    "parse_remote_url",
]

PATH_WITH_LINES_RE = re.compile(r"^(?P<path>.+?):(?P<start>\d+)(?:[-,](?P<end>\d+))?$")
LINE_RANGE_RE = re.compile(r"^(?P<start>\d+)(?:[-,:](?P<end>\d+))?$")


def line_range_arg(value: str) -> Tuple[int, int]:
    """Parses `10-20`, `10,20` or `10` into (anchor, cursor)."""
    match = LINE_RANGE_RE.match(value.strip())
    if not match:
        raise argparse.ArgumentTypeError(f"Invalid line range '{value}', expected START-END")
    start = int(match.group("start"))
    end = int(match.group("end")) if match.group("end") else start
    if start < 1 or end < 1:
        raise argparse.ArgumentTypeError("Line numbers start at 1")
    return start, end


def positive_int_arg(value: str) -> int:
    try:
        line = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid line number '{value}'") from None
    if line < 1:
        raise argparse.ArgumentTypeError("Line numbers start at 1")
    return line


def host_entry_arg(value: str) -> Tuple[str, str]:
    pattern, sep, style = value.partition("=")
    if not sep or not pattern or style not in STYLES:
        raise argparse.ArgumentTypeError(
            f"Invalid host mapping '{value}', expected PATTERN=STYLE with STYLE one of: {', '.join(sorted(STYLES))}"
        )
    try:
        re.compile(pattern)
    except re.error as e:
        raise argparse.ArgumentTypeError(f"Invalid host pattern '{pattern}': {e}") from None
    return pattern, style


def split_path_and_lines(path: str) -> Tuple[str, Optional[Tuple[int, int]]]:
    """`file.py:10-20` -> (`file.py`, (10, 20)), unless `file.py:10-20` is itself a file."""
    if Path(path).exists():
        return path, None
    match = PATH_WITH_LINES_RE.match(path)
    if not match:
        return path, None
    start = int(match.group("start"))
    end = int(match.group("end")) if match.group("end") else None
    if start < 1 or (end is not None and end < 1):
        return path, None
    return match.group("path"), (start, end if end is not None else start)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-permalink",
        description="Generates a permalink to a file (and lines) on the repository's hosting provider.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="File to link to. Accepts a `:LINE` or `:START-END` suffix.\n"
        "With --repo, any path inside the repository (default: current directory).",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "-l",
        "--line",
        type=positive_int_arg,
        default=None,
        help="Link to a single line (the cursor line).",
    )
    target.add_argument(
        "-r",
        "--range",
        dest="line_range",
        type=line_range_arg,
        default=None,
        help="Link to a range of lines, e.g. '10-20'. Either order is accepted.",
    )
    target.add_argument(
        "--repo",
        action="store_true",
        help="Link to the repository itself instead of a file.",
    )
    parser.add_argument(
        "--remote",
        default=None,
        help="Use this remote instead of picking one (single remote, then upstream, then 'origin').",
    )
    parser.add_argument(
        "--action",
        choices=["copy", "open", "print"],
        default=None,
        help="What to do with the URL (default: copy to clipboard).",
    )
    parser.add_argument(
        "--no-line-in-point-mode",
        action="store_false",
        dest="line_in_point_mode",
        help="With --line, link to the whole file anyway.",
    )
    parser.add_argument(
        "--host",
        dest="hosts",
        default=[],
        action="append",
        type=host_entry_arg,
        help="Map a host regex to a URL style, e.g. 'git\\.corp\\.example=gitlab'.\n"
        f"Styles: {', '.join(sorted(STYLES))}. Checked before the built-in hosts.\n"
        "This flag can be used multiple times.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output, including every git command run.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        prefs = GlobalPreferences.from_args(args)
        app = PermalinkApp(prefs)

        if args.repo:
            url = app.generate_repo_link(args.path)
        else:
            if not args.path:
                parser.error("a file path is required unless --repo is given")
            path, suffix_lines = split_path_and_lines(args.path)
            if args.line_range or (suffix_lines and suffix_lines[0] != suffix_lines[1]):
                anchor, cursor = args.line_range or suffix_lines
                selection = Selection(path, mode="range", anchor_line=anchor, cursor_line=cursor)
            else:
                cursor = args.line if args.line is not None else (suffix_lines[0] if suffix_lines else None)
                selection = Selection(path, mode="point", cursor_line=cursor)
            url = app.generate_range_link(selection)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 1

    return 0 if url else 1


if __name__ == "__main__":
    sys.exit(main())
