"""Tests for refiner.github_client module."""

import httpx
import pytest

from refiner.errors import APIError, IssueNotFoundError, NetworkError, ResponseFormatError
from refiner.github_client import GitHubClient


ISSUE = {
    "number": 12,
    "title": "Checkout fails on Safari",
    "body": "Steps to reproduce...",
    "labels": [{"name": "bug"}, {"name": "frontend"}],
}


class TestFetchIssue:
    """GET /repos/{repo}/issues/{number}."""

    def test_anonymous_fetch(self, http_client, recorder):
        rec = recorder(lambda r: httpx.Response(200, json=ISSUE))
        gh = GitHubClient(http_client(rec), api_url="https://github.test/")

        issue = gh.fetch_issue("acme/webapp", 12)

        request = rec.requests[0]
        assert request.method == "GET"
        assert str(request.url) == "https://github.test/repos/acme/webapp/issues/12"
        assert "Authorization" not in request.headers
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert issue.number == 12
        assert issue.title == "Checkout fails on Safari"
        assert issue.labels == ["bug", "frontend"]

    def test_token_is_sent_as_bearer(self, http_client, recorder):
        rec = recorder(lambda r: httpx.Response(200, json=ISSUE))
        GitHubClient(http_client(rec), token="ghp_abc").fetch_issue("acme/webapp", 12)
        assert rec.requests[0].headers["Authorization"] == "Bearer ghp_abc"

    def test_404_is_issue_not_found(self, http_client):
        gh = GitHubClient(http_client(lambda r: httpx.Response(404, json={"message": "Not Found"})))
        with pytest.raises(IssueNotFoundError) as exc_info:
            gh.fetch_issue("acme/webapp", 999)
        assert "#999" in str(exc_info.value)
        assert "acme/webapp" in str(exc_info.value)

    def test_other_error_status(self, http_client):
        gh = GitHubClient(http_client(lambda r: httpx.Response(403, text="rate limited")))
        with pytest.raises(APIError) as exc_info:
            gh.fetch_issue("acme/webapp", 1)
        assert not isinstance(exc_info.value, IssueNotFoundError)
        assert exc_info.value.status_code == 403
        assert "403" in str(exc_info.value)

    def test_invalid_json(self, http_client):
        gh = GitHubClient(http_client(lambda r: httpx.Response(200, text="<html>")))
        with pytest.raises(ResponseFormatError):
            gh.fetch_issue("acme/webapp", 1)

    def test_non_object_json(self, http_client):
        gh = GitHubClient(http_client(lambda r: httpx.Response(200, json=[1, 2])))
        with pytest.raises(ResponseFormatError):
            gh.fetch_issue("acme/webapp", 1)

    def test_non_list_labels(self, http_client):
        gh = GitHubClient(http_client(lambda r: httpx.Response(200, json={"title": "T", "labels": 3})))
        assert gh.fetch_issue("acme/webapp", 1).labels == []

    def test_transport_error(self, http_client):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(NetworkError):
            GitHubClient(http_client(handler)).fetch_issue("acme/webapp", 1)
