from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RemoteDescriptor:
    """Where a remote lives: host, optional port, and the repository path."""
    host: str
    repository: str
    port: Optional[str] = None

    def __post_init__(self):
        if self.repository.endswith(".git"):
            raise ValueError(f"Repository must not end with '.git': {self.repository}")

    @property
    def base_url(self) -> str:
        if self.port:
            return f"https://{self.host}:{self.port}/"
        return f"https://{self.host}/"


@dataclass(frozen=True)
class LinkRequest:
    """Everything a host formatter needs to build one URL.

    `revision` or `file_path` set to None asks for the bare repository URL.
    `line_start` set to None asks for the whole file.
    """
    host: str
    repository: str
    port: Optional[str] = None
    revision: Optional[str] = None
    file_path: Optional[str] = None
    line_start: Optional[int] = None
    line_end: Optional[int] = None

    def __post_init__(self):
        if self.line_start is None:
            if self.line_end is not None:
                raise ValueError("line_end given without line_start")
            return
        if self.line_start < 1:
            raise ValueError(f"line_start must be >= 1, got {self.line_start}")
        if self.line_end is not None and self.line_end < self.line_start:
            raise ValueError(f"line_end ({self.line_end}) is before line_start ({self.line_start})")

    @classmethod
    def for_remote(cls, remote: RemoteDescriptor, **kwargs) -> "LinkRequest":
        return cls(host=remote.host, repository=remote.repository, port=remote.port, **kwargs)

    @property
    def base_url(self) -> str:
        if self.port:
            return f"https://{self.host}:{self.port}/"
        return f"https://{self.host}/"

    @property
    def is_repository_only(self) -> bool:
        return not self.file_path or not self.revision

    @property
    def is_range(self) -> bool:
        return self.line_start is not None and self.line_end is not None and self.line_end != self.line_start
