"""Recursive directory expansion into an archive."""

from __future__ import annotations

import logging
from typing import Generator

from DownGit.archive import ArchiveWriter
from DownGit.errors import NotFoundError
from DownGit.models import EntryKind, Phase, ProgressEvent, RepoAddress, TreeEntry
from DownGit.providers.base import ContentProvider

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = (
    "Error: Could not download this file. It might be too large or inaccessible."
)


def placeholder_for(path: str, exc: Exception) -> str:
    """Text stored in place of a file that could not be downloaded."""
    return f"{PLACEHOLDER_TEXT}\n\nFile: {path}\nReason: {exc}\n"


class TreeWalker:
    """Walks a repository folder depth-first and fills an ArchiveWriter.

    Children are fetched one at a time, in listing order. ``walk`` is a
    generator of progress events; the percentage of entry ``i`` of ``n``
    inside a slot ``[low, high)`` is ``low + i / n * (high - low)`` and its
    subtree is given the slot up to entry ``i + 1``. Progress therefore
    never goes backwards, however deep the tree is.
    """

    START_PERCENT = 30
    END_PERCENT = 70

    def __init__(
        self,
        provider: ContentProvider,
        address: RepoAddress,
        archive: ArchiveWriter,
    ):
        self.provider = provider
        self.address = address
        self.archive = archive
        self.errors: list[str] = []

    def walk(
        self, path: str | None = None, zip_prefix: str = ""
    ) -> Generator[ProgressEvent, None, None]:
        """Add everything under *path* to the archive below *zip_prefix*.

        A failure listing *path* itself propagates, including a 404.
        """
        if path is None:
            path = self.address.path
        entries = self.provider.list_directory(self.address, path)
        yield from self._walk_entries(
            entries, zip_prefix, self.START_PERCENT, self.END_PERCENT
        )

    def _walk_subdirectory(
        self, entry: TreeEntry, zip_path: str, low: float, high: float
    ) -> Generator[ProgressEvent, None, None]:
        self.archive.add_empty_directory(zip_path)
        try:
            entries = self.provider.list_directory(self.address, entry.path)
        except NotFoundError:
            logger.warning("Folder %s not found; keeping it as empty", entry.path)
            return
        yield from self._walk_entries(entries, zip_path, low, high)

    def _walk_entries(
        self,
        entries: list[TreeEntry],
        zip_prefix: str,
        low: float,
        high: float,
    ) -> Generator[ProgressEvent, None, None]:
        count = len(entries)
        span = high - low
        for i, entry in enumerate(entries):
            zip_path = f"{zip_prefix}/{entry.name}" if zip_prefix else entry.name
            slot_low = low + i / count * span
            slot_high = low + (i + 1) / count * span

            yield ProgressEvent(
                Phase.TRAVERSE, int(slot_low), f"Processing {entry.path}..."
            )

            if entry.kind is EntryKind.DIRECTORY:
                yield from self._walk_subdirectory(entry, zip_path, slot_low, slot_high)
            elif entry.kind is EntryKind.FILE:
                self.add_file(entry, zip_path)
            else:
                # The contents API does not expose symlink or submodule targets
                logger.debug("Skipping %s entry %s", entry.kind.value, entry.path)

    def add_file(self, entry: TreeEntry, zip_path: str) -> None:
        """Download *entry* into the archive, or a placeholder if that fails."""
        try:
            data = self.provider.fetch_file_bytes(self.address, entry)
        except Exception as exc:
            logger.warning("Could not download %s: %s", entry.path, exc)
            self.errors.append(f"{entry.path}: {exc}")
            data = placeholder_for(entry.path, exc).encode("utf-8")
        self.archive.add_file(zip_path, data)
