"""Data classes for DownGit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AddressKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "dir"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


class Phase(Enum):
    VALIDATE = "validate"
    TRAVERSE = "traverse"
    PACKAGE = "package"
    DONE = "done"


@dataclass(frozen=True)
class RepoAddress:
    owner: str
    repo: str
    branch: str = "main"
    path: str = ""
    kind: AddressKind = AddressKind.DIRECTORY

    @property
    def display_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def last_segment(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class TreeEntry:
    name: str
    path: str
    sha: str = ""
    size: int = 0
    kind: EntryKind = EntryKind.FILE
    download_url: str | None = None  # None when the file is too large for /contents


@dataclass
class ProgressEvent:
    phase: Phase
    percent: int
    message: str


@dataclass
class DownloadResult:
    filename: str
    data: bytes
    entry_count: int = 0
    errors: list[str] = field(default_factory=list)
