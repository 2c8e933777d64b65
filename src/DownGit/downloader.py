"""Turns a GitHub URL into a ZIP archive of the folder or file it points at."""

from __future__ import annotations

import logging
from typing import Callable

from DownGit.archive import ArchiveWriter
from DownGit.errors import DownGitError, URLParseError
from DownGit.models import (
    AddressKind,
    DownloadResult,
    Phase,
    ProgressEvent,
    RepoAddress,
)
from DownGit.providers.base import ContentProvider
from DownGit.providers.github import GitHubProvider
from DownGit.tree_walker import TreeWalker
from DownGit.url_parser import parse_github_url

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]
SaveCallback = Callable[[bytes, str], None]


def zip_filename(address: RepoAddress) -> str:
    """``repo.zip`` for a whole repository, ``repo-<last segment>.zip`` otherwise."""
    if not address.path:
        return f"{address.repo}.zip"
    return f"{address.repo}-{address.last_segment}.zip"


def download_repository(
    url: str,
    on_progress: ProgressCallback | None = None,
    save: SaveCallback | None = None,
    provider: ContentProvider | None = None,
) -> DownloadResult:
    """Download the file or folder behind *url* as a single ZIP archive.

    Progress is reported in three phases: 0-30 while validating the URL,
    30-70 while walking the tree and 70-100 while packaging. 100 is only
    reported once the archive has been built and handed to *save*.

    Raises:
        DownGitError: the URL is invalid, or the repository, folder or file
            could not be listed. Single files that fail to download do not
            raise; they are replaced by a placeholder and listed in
            ``DownloadResult.errors``.
    """

    def report(phase: Phase, percent: int, message: str) -> None:
        if on_progress is not None:
            on_progress(ProgressEvent(phase, percent, message))

    report(Phase.VALIDATE, 10, "Validating URL...")
    try:
        address = parse_github_url(url)
    except URLParseError as exc:
        raise URLParseError(
            f"Invalid GitHub URL. Please enter a valid GitHub repository URL. ({exc})"
        ) from exc

    where = f" at {address.path}" if address.path else ""
    report(Phase.TRAVERSE, 30, f"Fetching contents from {address.display_name}{where}...")
    logger.info(
        "Downloading %s %s@%s:%s",
        address.kind.value,
        address.display_name,
        address.branch,
        address.path or "/",
    )

    provider = provider or GitHubProvider()
    archive = ArchiveWriter()
    walker = TreeWalker(provider, address, archive)

    try:
        if address.kind is AddressKind.FILE:
            entry = provider.fetch_entry(address)
            walker.add_file(entry, entry.name)
        else:
            for event in walker.walk():
                report(event.phase, event.percent, event.message)
    except DownGitError as exc:
        logger.error("Download of %s failed: %s", url, exc)
        raise

    report(Phase.PACKAGE, 70, "Creating ZIP file...")
    entry_count = len(archive.names())
    report(Phase.PACKAGE, 80, "Generating ZIP file...")
    data = archive.build()
    filename = zip_filename(address)

    report(Phase.PACKAGE, 90, "Starting download...")
    if save is not None:
        save(data, filename)

    logger.info(
        "Built %s (%d entries, %d failed files)",
        filename,
        entry_count,
        len(walker.errors),
    )
    report(Phase.DONE, 100, "Download complete!")
    return DownloadResult(
        filename=filename,
        data=data,
        entry_count=entry_count,
        errors=list(walker.errors),
    )
