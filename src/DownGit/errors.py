"""Error taxonomy shared by the parser, the providers and the downloader."""

from __future__ import annotations

import time
from enum import Enum


class ErrorCategory(Enum):
    INVALID_URL = "invalid_url"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    AUTH_REQUIRED = "auth_required"
    UNSUPPORTED_ENCODING = "unsupported_encoding"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class DownGitError(Exception):
    """Base class for every error DownGit reports to the user."""

    category = ErrorCategory.INTERNAL


class URLParseError(DownGitError):
    """Raised when a URL cannot be parsed."""

    category = ErrorCategory.INVALID_URL


class GitHubError(DownGitError):
    """Raised for GitHub API errors."""

    category = ErrorCategory.UPSTREAM

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class NotFoundError(GitHubError):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, path: str = ""):
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(
            "Repository, folder, or file not found"
            f"{where}. Please check the URL and try again.",
            status=404,
        )


class AuthRequiredError(GitHubError):
    category = ErrorCategory.AUTH_REQUIRED

    def __init__(self):
        super().__init__(
            "Authentication required. Private repositories are not supported "
            "without authentication.",
            status=401,
        )


class RateLimitError(GitHubError):
    """Raised when GitHub rate limit is exceeded."""

    category = ErrorCategory.RATE_LIMITED

    def __init__(self, reset_at: int = 0, status: int = 403):
        self.reset_at = reset_at
        message = "GitHub API rate limit exceeded. Please try again later."
        if reset_at:
            wait = max(0, reset_at - int(time.time()))
            message += f" Resets in {wait} seconds."
        super().__init__(message, status=status)


class UnsupportedEncodingError(GitHubError):
    category = ErrorCategory.UNSUPPORTED_ENCODING

    def __init__(self, encoding: str, path: str = ""):
        self.encoding = encoding
        self.path = path
        super().__init__(f"Unsupported encoding: {encoding}")


class ArchiveClosedError(DownGitError):
    """Raised when an archive is modified or built after build()."""
