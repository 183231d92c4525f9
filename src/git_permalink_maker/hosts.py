"""
Host link formatters
====================

Each formatter turns a `LinkRequest` into a URL for one family of hosting
providers. Formatters are pure: no I/O, no git.

| Style     | Path                                  | Line     | Range             |
|-----------|---------------------------------------|----------|-------------------|
| github    | `{repo}/blob/{rev}/{file}`            | `#L10`   | `#L10-L20`        |
| gitlab    | `{repo}/-/blob/{rev}/{file}`          | `#L10`   | `#L10-20`         |
| gitea     | `{repo}/src/commit/{rev}/{file}`      | `#L10`   | `#L10-L20`        |
| bitbucket | `{repo}/src/{rev}/{file}`             | `#lines-10` | `#lines-10:20` |
| cgit      | `{repo}.git/tree/{file}?id={rev}`     | `#n10`   | (same as line)    |

The registry maps host regexes to formatters. It is ordered and the first
pattern found in the host wins.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .constants import BUILTIN_HOST_PATTERNS, MSG_NO_HOST
from .exceptions import HostError
from .permalink_info import LinkRequest

Formatter = Callable[[LinkRequest], str]
HostEntries = Union[Mapping[str, Union[str, Formatter]], Iterable[Tuple[str, Union[str, Formatter]]]]


def _line_anchor(request: LinkRequest, single: str, range_sep: str) -> str:
    if request.line_start is None:
        return ""
    anchor = f"#{single}{request.line_start}"
    if request.is_range:
        anchor += f"{range_sep}{request.line_end}"
    return anchor


def github(request: LinkRequest) -> str:
    url = request.base_url + request.repository
    if request.is_repository_only:
        return url
    url += f"/blob/{request.revision}/{request.file_path}"
    return url + _line_anchor(request, "L", "-L")


def gitlab(request: LinkRequest) -> str:
    url = request.base_url + request.repository
    if request.is_repository_only:
        return url
    url += f"/-/blob/{request.revision}/{request.file_path}"
    return url + _line_anchor(request, "L", "-")


def gitea(request: LinkRequest) -> str:
    """Gitea and Forgejo (Codeberg)."""
    url = request.base_url + request.repository
    if request.is_repository_only:
        return url
    url += f"/src/commit/{request.revision}/{request.file_path}"
    return url + _line_anchor(request, "L", "-L")


def bitbucket(request: LinkRequest) -> str:
    url = request.base_url + request.repository
    if request.is_repository_only:
        return url
    url += f"/src/{request.revision}/{request.file_path}"
    return url + _line_anchor(request, "lines-", ":")


def cgit(request: LinkRequest) -> str:
    """cgit needs the `.git` suffix back and has no syntax for line ranges."""
    repository = request.repository
    if not repository.endswith(".git"):
        repository += ".git"
    url = request.base_url + repository + "/"
    if request.is_repository_only:
        return url
    url += f"tree/{request.file_path}?id={request.revision}"
    if request.line_start is not None:
        url += f"#n{request.line_start}"
    return url


STYLES: Dict[str, Formatter] = {
    "github": github,
    "gitlab": gitlab,
    "gitea": gitea,
    "forgejo": gitea,
    "bitbucket": bitbucket,
    "cgit": cgit,
}


def resolve_formatter(formatter: Union[str, Formatter]) -> Formatter:
    """Accepts a formatter or the name of a built-in style."""
    if callable(formatter):
        return formatter
    try:
        return STYLES[formatter]
    except KeyError:
        raise ValueError(
            f"Unknown host style '{formatter}'. Known styles: {', '.join(sorted(STYLES))}"
        ) from None


@dataclass(frozen=True)
class HostRule:
    pattern: str
    formatter: Formatter
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    def matches(self, host: str) -> bool:
        return self._regex.search(host) is not None


@dataclass(frozen=True)
class HostRegistry:
    """Ordered, immutable list of host rules. First match wins."""
    rules: Tuple[HostRule, ...] = ()

    @classmethod
    def from_entries(cls, entries: HostEntries) -> HostRegistry:
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        return cls(tuple(HostRule(pattern, resolve_formatter(fmt)) for pattern, fmt in pairs))

    def __iter__(self) -> Iterator[HostRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def patterns(self) -> Tuple[str, ...]:
        return tuple(rule.pattern for rule in self.rules)

    def find(self, host: str) -> Optional[Formatter]:
        for rule in self.rules:
            if rule.matches(host):
                return rule.formatter
        return None

    def match(self, host: str) -> Formatter:
        formatter = self.find(host)
        if formatter is None:
            raise HostError(MSG_NO_HOST.format(host=host), host=host)
        return formatter

    def with_overrides(self, entries: Union[HostEntries, HostRegistry]) -> HostRegistry:
        """
        Returns a new registry with `entries` checked before the current rules.
        A current rule whose pattern is re-registered is replaced, not duplicated.
        """
        overrides = entries if isinstance(entries, HostRegistry) else HostRegistry.from_entries(entries)
        if not overrides.rules:
            return self
        overridden = set(overrides.patterns)
        kept = tuple(rule for rule in self.rules if rule.pattern not in overridden)
        return HostRegistry(overrides.rules + kept)

    def format(self, request: LinkRequest) -> str:
        return self.match(request.host)(request)


BUILTIN_HOSTS = HostRegistry.from_entries(BUILTIN_HOST_PATTERNS)
