"""
Error types raised by the refine-backlog client.

Library modules raise these; the CLI entry point catches `RefinerError`
once, prints a single `Error: ...` line on stderr and exits with status 1.
"""

from __future__ import annotations

from typing import Optional


# Maximum number of characters of a response body echoed back when the
# server returns something that is not valid JSON.
BODY_EXCERPT_CHARS = 200


class RefinerError(Exception):
    """Base class for every error surfaced to the user."""


class UsageError(RefinerError):
    """Missing or invalid command-line input."""


class NoItemsError(UsageError):
    def __init__(self) -> None:
        super().__init__(
            "No items provided. Pass items as arguments, use --file, or pipe via stdin."
        )


class FileAccessError(RefinerError):
    """A file named by the user could not be read."""


class InputFileNotFoundError(FileAccessError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not found: {path}")


class NetworkError(RefinerError):
    """Transport-level failure (DNS, connection refused, TLS, timeout)."""


class APIError(RefinerError):
    """The remote service answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RateLimitError(APIError):
    def __init__(self, body: str = "") -> None:
        super().__init__(
            "Rate limit hit. Upgrade at refinebacklog.com/pricing or pass --key",
            status_code=429,
            body=body,
        )


class TierLimitError(APIError):
    def __init__(self, body: str = "") -> None:
        super().__init__(
            "Too many items for free tier. Upgrade at refinebacklog.com/pricing",
            status_code=402,
            body=body,
        )


class IssueNotFoundError(APIError):
    def __init__(self, repo: str, number: int, body: str = "") -> None:
        super().__init__(
            f"Issue #{number} not found in {repo}. Check the number, the repository "
            "name, and that your token can read private repositories.",
            status_code=404,
            body=body,
        )


class ResponseFormatError(RefinerError):
    """A response body arrived but could not be decoded as JSON."""

    def __init__(self, raw_body: str) -> None:
        self.excerpt = (raw_body or "")[:BODY_EXCERPT_CHARS]
        super().__init__(f"Invalid JSON response: {self.excerpt}")
