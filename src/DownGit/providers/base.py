"""Abstract base class for repository content providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from DownGit.models import RepoAddress, TreeEntry


class ContentProvider(ABC):
    """Base class for services that serve repository contents."""

    @abstractmethod
    def list_directory(self, address: RepoAddress, path: str) -> list[TreeEntry]:
        """List the immediate entries of *path*, in listing order."""

    @abstractmethod
    def fetch_entry(self, address: RepoAddress) -> TreeEntry:
        """Return metadata for the single file at ``address.path``."""

    @abstractmethod
    def fetch_file_bytes(self, address: RepoAddress, entry: TreeEntry) -> bytes:
        """Fetch the raw content of a single file."""
