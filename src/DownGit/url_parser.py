"""GitHub URL parsing."""

from __future__ import annotations

from DownGit.errors import URLParseError
from DownGit.models import AddressKind, RepoAddress

__all__ = ["URLParseError", "parse_github_url"]

_HOST_MARKER = "github.com/"
DEFAULT_BRANCH = "main"


def parse_github_url(url: str) -> RepoAddress:
    """Parse a GitHub web URL and return the address it points at.

    Supported formats:
      - https://github.com/owner/repo
      - https://github.com/owner/repo/tree/branch
      - https://github.com/owner/repo/tree/branch/folder/subfolder
      - https://github.com/owner/repo/blob/branch/path/to/file.txt
    """
    url = url.strip()
    if not url:
        raise URLParseError("URL is empty.")
    if url.endswith("/"):
        url = url[:-1]

    start = url.find(_HOST_MARKER)
    if start == -1:
        raise URLParseError(f"Not a GitHub URL: {url}")

    parts = url[start + len(_HOST_MARKER):].split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise URLParseError(f"GitHub URL must include owner/repo: {url}")

    owner, repo = parts[0], parts[1]

    if len(parts) >= 4 and parts[2] in ("tree", "blob"):
        # /owner/repo/tree|blob/branch[/path...]
        branch = parts[3]
        if not branch:
            raise URLParseError(f"GitHub URL has an empty branch: {url}")
        kind = AddressKind.DIRECTORY if parts[2] == "tree" else AddressKind.FILE
        path = "/".join(parts[4:])
        if kind is AddressKind.FILE and not path:
            raise URLParseError(f"GitHub blob URL must include a file path: {url}")
        return RepoAddress(owner=owner, repo=repo, branch=branch, path=path, kind=kind)

    return RepoAddress(owner=owner, repo=repo, branch=DEFAULT_BRANCH)
