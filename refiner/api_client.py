"""
HTTP client for the refinebacklog.com API.

This module encapsulates the two calls made to the service: refining a
list of backlog items and scoring a single issue for completeness.  It
centralizes request construction, status-code mapping and JSON decoding
so that the CLI only ever sees `RefineResponse`/`LintResult` values or a
`RefinerError`.

Every call is a single POST; nothing is retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .config import USER_AGENT, RefinerConfig
from .errors import APIError, NetworkError, RateLimitError, ResponseFormatError, TierLimitError
from .models import IssueRecord, LintResult, RefineResponse


logger = logging.getLogger(__name__)


@dataclass
class RefineOptions:
    context: Optional[str] = None
    use_user_stories: bool = False
    use_gherkin: bool = False
    license_key: Optional[str] = None


def build_refine_payload(items: List[str], options: RefineOptions) -> Dict[str, Any]:
    """Return the request body, leaving out options that are not set."""
    payload: Dict[str, Any] = {"items": list(items)}
    if options.context:
        payload["context"] = options.context
    if options.use_user_stories:
        payload["useUserStories"] = True
    if options.use_gherkin:
        payload["useGherkin"] = True
    return payload


def build_headers(body: bytes, license_key: Optional[str] = None) -> Dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "Content-Length": str(len(body)),
        "User-Agent": USER_AGENT,
    }
    if license_key:
        headers["x-license-key"] = license_key
    return headers


def decode_json(response: httpx.Response) -> Any:
    text = response.text
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ResponseFormatError(text) from exc


def is_refine_body(data: Any) -> bool:
    """A refine body is an item list or an object whose `items` is a list."""
    if isinstance(data, list):
        return True
    return isinstance(data, dict) and isinstance(data.get("items", []), list)


def check_status(response: httpx.Response) -> None:
    """Map error statuses to domain errors; 429 and 402 get tier guidance."""
    status = response.status_code
    if status == 429:
        raise RateLimitError(response.text)
    if status == 402:
        raise TierLimitError(response.text)
    if not status or status >= 400:
        raise APIError(f"API error {status}: {response.text}", status_code=status, body=response.text)


def send(client: httpx.Client, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Issue one request, converting transport failures into `NetworkError`."""
    try:
        response = client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        raise NetworkError(f"Request to {url} failed: {exc}") from exc
    logger.debug("%s %s -> %s (%d bytes)", method, url, response.status_code, len(response.content))
    return response


class RefineClient:
    """Wrapper around the refine and lint endpoints."""

    def __init__(self, config: RefinerConfig, http_client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=config.timeout)

    def __enter__(self) -> "RefineClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _post_json(self, url: str, payload: Dict[str, Any], license_key: Optional[str]) -> httpx.Response:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        response = send(
            self.client,
            "POST",
            url,
            content=body,
            headers=build_headers(body, license_key),
        )
        check_status(response)
        return response

    def refine(self, items: List[str], options: RefineOptions) -> RefineResponse:
        """Send `items` to the refine endpoint and return the decoded response."""
        payload = build_refine_payload(items, options)
        logger.debug(
            "Refining %d item(s): context=%s user_stories=%s gherkin=%s key=%s",
            len(items),
            bool(options.context),
            options.use_user_stories,
            options.use_gherkin,
            bool(options.license_key),
        )
        response = self._post_json(self.config.api_url, payload, options.license_key)
        data = decode_json(response)
        if not is_refine_body(data):
            raise ResponseFormatError(response.text)
        result = RefineResponse.from_payload(data)
        if result.meta is not None:
            logger.debug(
                "Refine meta: tier=%s processed=%d tokens=%s",
                result.meta.tier,
                result.meta.items_processed,
                result.meta.tokens,
            )
        return result

    def score_issue(self, issue: IssueRecord, license_key: Optional[str] = None) -> LintResult:
        """Submit one issue to the lint endpoint and normalize the result."""
        payload = {"issues": [issue.to_payload()], "preserve_structure": True}
        response = self._post_json(self.config.lint_url, payload, license_key)
        return LintResult.from_payload(decode_json(response))
