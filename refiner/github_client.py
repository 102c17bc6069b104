"""
GitHub integration helpers for the `enforce` subcommand.

Fetches a single issue over the REST API.  A token is optional; without
one, only public repositories can be read.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .api_client import decode_json, send
from .config import DEFAULT_GITHUB_API_URL, USER_AGENT
from .errors import APIError, IssueNotFoundError, ResponseFormatError
from .models import IssueRecord


logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"


class GitHubClient:
    def __init__(
        self,
        http_client: httpx.Client,
        token: Optional[str] = None,
        api_url: str = DEFAULT_GITHUB_API_URL,
    ) -> None:
        self.client = http_client
        self.token = token
        self.api_url = api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": GITHUB_ACCEPT, "User-Agent": USER_AGENT}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_issue(self, repo: str, number: int) -> IssueRecord:
        """Return the title, body and labels of issue `number` in `repo`."""
        url = f"{self.api_url}/repos/{repo}/issues/{number}"
        logger.debug("Fetching %s (authenticated=%s)", url, bool(self.token))
        response = send(self.client, "GET", url, headers=self._headers())
        if response.status_code == 404:
            raise IssueNotFoundError(repo, number, response.text)
        if response.status_code >= 400:
            raise APIError(
                f"GitHub API error {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        data: Any = decode_json(response)
        if not isinstance(data, dict):
            raise ResponseFormatError(response.text)
        return IssueRecord.from_payload(number, data)
