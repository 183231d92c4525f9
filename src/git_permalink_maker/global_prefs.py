import argparse
import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .hosts import BUILTIN_HOSTS, HostRegistry
from .web_utils import ACTIONS, copy_to_clipboard


def resolve_action(action):
    """Accepts a callable or the name of a built-in action."""
    if callable(action):
        return action
    try:
        return ACTIONS[action]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown action {action!r}. Known actions: {', '.join(sorted(ACTIONS))}"
        ) from None


@dataclass(frozen=True)
class GlobalPreferences:
    """Preferences for link generation. Never mutated; merge to change."""
    forced_remote: Optional[str] = None  # None: pick the remote automatically
    include_line_in_point_mode: bool = True
    action: Callable[[str], None] = copy_to_clipboard
    hosts: HostRegistry = BUILTIN_HOSTS

    def merged(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "GlobalPreferences":
        """
        Returns a copy with only the given fields replaced.
        Host entries are checked before the existing ones, which stay in place.
        """
        changes: Dict[str, Any] = dict(overrides or {})
        changes.update(kwargs)
        if not changes:
            return self

        known = {f.name for f in dataclasses.fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

        if "hosts" in changes:
            hosts = changes["hosts"]
            changes["hosts"] = self.hosts.with_overrides(hosts) if hosts is not None else self.hosts
        if "action" in changes:
            changes["action"] = resolve_action(changes["action"])
        return dataclasses.replace(self, **changes)

    @classmethod
    def overrides_from_args(cls, args: argparse.Namespace) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        if args.remote:
            overrides["forced_remote"] = args.remote
        if not args.line_in_point_mode:
            overrides["include_line_in_point_mode"] = False
        if args.action:
            overrides["action"] = ACTIONS[args.action]
        if args.hosts:
            overrides["hosts"] = list(args.hosts)
        return overrides

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "GlobalPreferences":
        return current().merged(cls.overrides_from_args(args))


_DEFAULTS = GlobalPreferences()
_current = _DEFAULTS


def current() -> GlobalPreferences:
    """The process-wide preferences. Callers keep the returned snapshot."""
    return _current


def configure(overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> GlobalPreferences:
    """Merges into the process-wide preferences, replacing them wholesale."""
    global _current
    _current = _current.merged(overrides, **kwargs)
    return _current


def reset() -> GlobalPreferences:
    global _current
    _current = _DEFAULTS
    return _current
