"""Tests for downloader module."""

import base64
import io
import zipfile
from unittest import mock

import pytest
import responses

from fakes import FakeProvider, dir_entry, file_entry

from DownGit.downloader import download_repository, zip_filename
from DownGit.errors import (
    AuthRequiredError,
    ErrorCategory,
    GitHubError,
    NotFoundError,
    RateLimitError,
    URLParseError,
)
from DownGit.models import AddressKind, Phase, RepoAddress

CONTENTS = "https://api.github.com/repos/owner/repo/contents"
RAW = "https://raw.githubusercontent.com/owner/repo/main"


def _names(data: bytes) -> list[str]:
    return zipfile.ZipFile(io.BytesIO(data)).namelist()


def _read(data: bytes, name: str) -> bytes:
    return zipfile.ZipFile(io.BytesIO(data)).read(name)


def _sample_provider():
    return FakeProvider(
        listings={
            "": [file_entry("a.txt"), dir_entry("sub"), dir_entry("empty")],
            "sub": [file_entry("sub/b.txt")],
            "empty": [],
        },
        files={"a.txt": b"A", "sub/b.txt": b"B"},
    )


class TestZipFilename:
    def test_repository_root(self):
        assert zip_filename(RepoAddress(owner="o", repo="r")) == "r.zip"

    def test_folder(self):
        address = RepoAddress(owner="o", repo="r", path="src/components")
        assert zip_filename(address) == "r-components.zip"

    def test_file(self):
        address = RepoAddress(owner="o", repo="r", path="docs/guide.md", kind=AddressKind.FILE)
        assert zip_filename(address) == "r-guide.md.zip"


class TestDirectoryDownload:
    def test_archive_contents(self):
        result = download_repository(
            "https://github.com/owner/repo", provider=_sample_provider()
        )
        assert result.filename == "repo.zip"
        assert _names(result.data) == ["a.txt", "sub/b.txt", "empty/"]
        assert result.entry_count == 3
        assert result.errors == []

    def test_folder_filename(self):
        provider = FakeProvider(
            listings={"src/lib": [file_entry("src/lib/x.py")]},
            files={"src/lib/x.py": b"x"},
        )
        result = download_repository(
            "https://github.com/owner/repo/tree/dev/src/lib", provider=provider
        )
        assert result.filename == "repo-lib.zip"
        assert _names(result.data) == ["x.py"]

    def test_failing_file_keeps_entry_count(self):
        provider = _sample_provider()
        provider.files["sub/b.txt"] = GitHubError("Network error while fetching sub/b.txt")
        result = download_repository("https://github.com/owner/repo", provider=provider)
        assert result.entry_count == 3
        assert _names(result.data) == ["a.txt", "sub/b.txt", "empty/"]
        assert b"Could not download" in _read(result.data, "sub/b.txt")
        assert len(result.errors) == 1

    def test_save_receives_archive(self):
        save = mock.Mock()
        result = download_repository(
            "https://github.com/owner/repo", provider=_sample_provider(), save=save
        )
        save.assert_called_once_with(result.data, "repo.zip")


class TestFileDownload:
    def test_single_file_at_archive_root(self):
        provider = FakeProvider(listings={}, files={"docs/guide.md": b"# Guide"})
        result = download_repository(
            "https://github.com/owner/repo/blob/main/docs/guide.md", provider=provider
        )
        assert result.filename == "repo-guide.md.zip"
        assert _names(result.data) == ["guide.md"]
        assert _read(result.data, "guide.md") == b"# Guide"

    def test_root_level_file(self):
        provider = FakeProvider(listings={}, files={"README.md": b"hi"})
        result = download_repository(
            "https://github.com/owner/repo/blob/main/README.md", provider=provider
        )
        assert result.filename == "repo-README.md.zip"
        assert _names(result.data) == ["README.md"]

    def test_missing_file_raises(self):
        provider = FakeProvider(listings={}, files={})
        with pytest.raises(NotFoundError):
            download_repository(
                "https://github.com/owner/repo/blob/main/nope.txt", provider=provider
            )

    def test_failing_bytes_become_placeholder(self):
        provider = FakeProvider(
            listings={}, files={"a.txt": GitHubError("Network error while fetching a.txt")}
        )
        result = download_repository(
            "https://github.com/owner/repo/blob/main/a.txt", provider=provider
        )
        assert _names(result.data) == ["a.txt"]
        assert result.errors


class TestErrors:
    def test_invalid_url(self):
        provider = _sample_provider()
        with pytest.raises(URLParseError, match="Invalid GitHub URL") as excinfo:
            download_repository("https://example.com/owner/repo", provider=provider)
        assert excinfo.value.category == ErrorCategory.INVALID_URL
        assert provider.calls == []

    def test_missing_root_folder_is_not_found(self):
        with pytest.raises(NotFoundError):
            download_repository(
                "https://github.com/owner/repo/tree/main/missing",
                provider=FakeProvider(listings={}),
            )

    def test_save_not_called_on_failure(self):
        save = mock.Mock()
        with pytest.raises(NotFoundError):
            download_repository(
                "https://github.com/owner/repo", provider=FakeProvider(listings={}), save=save
            )
        save.assert_not_called()


class TestProgress:
    def test_non_decreasing_and_ends_at_100(self):
        events = []
        download_repository(
            "https://github.com/owner/repo",
            on_progress=events.append,
            provider=_sample_provider(),
        )
        percents = [e.percent for e in events]
        assert percents == sorted(percents)
        assert percents[0] == 10
        assert percents[-1] == 100
        assert events[-1].phase == Phase.DONE
        assert [e.phase for e in events].count(Phase.DONE) == 1

    def test_no_100_on_failure(self):
        events = []
        with pytest.raises(NotFoundError):
            download_repository(
                "https://github.com/owner/repo",
                on_progress=events.append,
                provider=FakeProvider(listings={}),
            )
        assert events
        assert all(e.percent < 100 for e in events)

    def test_phases_in_order(self):
        events = []
        download_repository(
            "https://github.com/owner/repo",
            on_progress=events.append,
            provider=_sample_provider(),
        )
        phases = [e.phase for e in events]
        order = [Phase.VALIDATE, Phase.TRAVERSE, Phase.PACKAGE, Phase.DONE]
        assert [p for i, p in enumerate(phases) if i == 0 or phases[i - 1] != p] == order


class TestWithGitHubAPI:
    @responses.activate
    def test_end_to_end(self):
        responses.add(
            responses.GET,
            CONTENTS,
            json=[
                {"name": "a.txt", "path": "a.txt", "sha": "s1", "size": 1,
                 "type": "file", "download_url": f"{RAW}/a.txt"},
                {"name": "big.bin", "path": "big.bin", "sha": "s2", "size": 5,
                 "type": "file", "download_url": None},
                {"name": "odd.bin", "path": "odd.bin", "sha": "s3", "size": 5,
                 "type": "file", "download_url": None},
                {"name": "empty", "path": "empty", "sha": "s4", "size": 0,
                 "type": "dir", "download_url": None},
            ],
        )
        responses.add(responses.GET, f"{RAW}/a.txt", body=b"A")
        responses.add(
            responses.GET,
            "https://api.github.com/repos/owner/repo/git/blobs/s2",
            json={"content": base64.b64encode(b"BIG").decode(), "encoding": "base64"},
        )
        responses.add(
            responses.GET,
            "https://api.github.com/repos/owner/repo/git/blobs/s3",
            json={"content": "xx", "encoding": "utf-16"},
        )
        responses.add(responses.GET, f"{CONTENTS}/empty", json={"message": "Not Found"}, status=404)

        result = download_repository("https://github.com/owner/repo")
        assert _names(result.data) == ["a.txt", "big.bin", "odd.bin", "empty/"]
        assert _read(result.data, "big.bin") == b"BIG"
        assert b"Unsupported encoding: utf-16" in _read(result.data, "odd.bin")
        assert len(result.errors) == 1

    @responses.activate
    def test_rate_limit_aborts(self):
        responses.add(responses.GET, CONTENTS, json={"message": "rate limit"}, status=403)
        with pytest.raises(RateLimitError, match="rate limit exceeded"):
            download_repository("https://github.com/owner/repo")

    @responses.activate
    def test_auth_required_aborts(self):
        responses.add(responses.GET, CONTENTS, json={"message": "Requires authentication"}, status=401)
        with pytest.raises(AuthRequiredError):
            download_repository("https://github.com/owner/repo")

    @responses.activate
    def test_repository_not_found(self):
        responses.add(responses.GET, CONTENTS, json={"message": "Not Found"}, status=404)
        with pytest.raises(NotFoundError, match="not found"):
            download_repository("https://github.com/owner/repo")
