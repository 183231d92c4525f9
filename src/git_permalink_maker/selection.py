from dataclasses import dataclass
from typing import Literal, Optional, Tuple

SelectionMode = Literal["point", "range"]


@dataclass(frozen=True)
class Selection:
    """What the caller is pointing at when a link is requested.

    In "point" mode only `cursor_line` matters (and may be absent).
    In "range" mode the selection spans `anchor_line` to `cursor_line`,
    in either order.
    """
    file_path: str
    mode: SelectionMode = "point"
    cursor_line: Optional[int] = None
    anchor_line: Optional[int] = None

    def __post_init__(self):
        if self.mode not in ("point", "range"):
            raise ValueError(f"Unknown selection mode: {self.mode!r}")
        if self.mode == "range" and (self.cursor_line is None or self.anchor_line is None):
            raise ValueError("Range selection needs both anchor_line and cursor_line")
        for line in (self.cursor_line, self.anchor_line):
            if line is not None and line < 1:
                raise ValueError(f"Line numbers start at 1, got {line}")

    def line_range(self, include_line_in_point_mode: bool = True) -> Tuple[Optional[int], Optional[int]]:
        """Returns (line_start, line_end) to put in the link."""
        if self.mode == "range":
            return min(self.anchor_line, self.cursor_line), max(self.anchor_line, self.cursor_line)
        if include_line_in_point_mode and self.cursor_line is not None:
            return self.cursor_line, None
        return None, None
