"""GitHub REST API provider."""

from __future__ import annotations

import base64
import logging
from urllib.parse import quote

import requests

from DownGit.errors import (
    AuthRequiredError,
    GitHubError,
    NotFoundError,
    RateLimitError,
    UnsupportedEncodingError,
)
from DownGit.models import EntryKind, RepoAddress, TreeEntry
from DownGit.providers.base import ContentProvider

logger = logging.getLogger(__name__)


class GitHubProvider(ContentProvider):
    """Provider for public GitHub repositories using the REST API."""

    API_BASE = "https://api.github.com"
    DEFAULT_TIMEOUT = 30

    def __init__(self, api_base: str | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.api_base = (api_base or self.API_BASE).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/vnd.github+json"
        self.session.headers["User-Agent"] = "DownGit/1.0"

    def _get(self, url: str, path: str, params: dict | None = None) -> requests.Response:
        logger.debug("GET %s %s", url, params or "")
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GitHubError(f"Network error while fetching {path or '/'}: {exc}") from exc

        if resp.status_code == 404:
            raise NotFoundError(path)
        if resp.status_code == 401:
            raise AuthRequiredError()
        if resp.status_code in (403, 429):
            reset_at = int(resp.headers.get("X-RateLimit-Reset", 0) or 0)
            raise RateLimitError(reset_at, status=resp.status_code)
        if not resp.ok:
            raise GitHubError(
                f"GitHub API error {resp.status_code} for {path or '/'}: "
                f"{_error_message(resp)}",
                status=resp.status_code,
            )
        return resp

    def _contents_url(self, address: RepoAddress, path: str) -> str:
        url = f"{self.api_base}/repos/{address.owner}/{address.repo}/contents"
        if path:
            url += "/" + quote(path)
        return url

    def _api_get(self, address: RepoAddress, path: str) -> dict | list:
        resp = self._get(
            self._contents_url(address, path), path, params={"ref": address.branch}
        )
        return resp.json()

    def list_directory(self, address: RepoAddress, path: str) -> list[TreeEntry]:
        data = self._api_get(address, path)
        if not isinstance(data, list):
            raise GitHubError(f"Expected a folder but found a file: {path}")
        return [_to_entry(item) for item in data]

    def fetch_entry(self, address: RepoAddress) -> TreeEntry:
        data = self._api_get(address, address.path)
        if isinstance(data, list):
            raise GitHubError(f"Expected a file but found a folder: {address.path}")
        entry = _to_entry(data)
        if entry.kind is not EntryKind.FILE:
            raise GitHubError(f"Not a regular file ({entry.kind.value}): {address.path}")
        return entry

    def fetch_file_bytes(self, address: RepoAddress, entry: TreeEntry) -> bytes:
        if entry.download_url:
            return self._get(entry.download_url, entry.path).content

        # Too large for /contents: go through the Git Data API by SHA
        url = f"{self.api_base}/repos/{address.owner}/{address.repo}/git/blobs/{entry.sha}"
        data = self._get(url, entry.path).json()
        encoding = data.get("encoding")
        if encoding != "base64":
            raise UnsupportedEncodingError(str(encoding), entry.path)
        return base64.b64decode(data.get("content", ""))


def _to_entry(item: dict) -> TreeEntry:
    return TreeEntry(
        name=item["name"],
        path=item["path"],
        sha=item.get("sha", ""),
        size=item.get("size", 0),
        kind=EntryKind(item["type"]),
        download_url=item.get("download_url"),
    )


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.reason or ""
    if isinstance(data, dict) and data.get("message"):
        return data["message"]
    return resp.reason or ""
