"""
Request-scoped data types for the refine-backlog client.

Every value here is built from one HTTP response (or one local file),
consumed once and discarded.  The `from_payload` constructors are the
only place where wire shapes are interpreted; everything downstream works
with the normalized dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_text(v) for v in value if v is not None]


@dataclass(frozen=True)
class RefinedItem:
    """One structured work item produced by the refine service."""

    title: str
    problem_statement: str = ""
    acceptance_criteria: List[str] = field(default_factory=list)
    estimate: str = ""
    priority: str = ""
    rationale: str = ""
    tags: List[str] = field(default_factory=list)
    user_story: Optional[str] = None

    @staticmethod
    def from_payload(data: Dict[str, Any]) -> "RefinedItem":
        return RefinedItem(
            title=_text(data.get("title")),
            problem_statement=_text(data.get("problemStatement")),
            acceptance_criteria=_string_list(data.get("acceptanceCriteria")),
            estimate=_text(data.get("estimate")),
            priority=_text(data.get("priority")),
            rationale=_text(data.get("rationale")),
            tags=_string_list(data.get("tags")),
            user_story=_text(data.get("userStory")) or None,
        )


@dataclass(frozen=True)
class ResponseMeta:
    tier: str = ""
    items_processed: int = 0
    tokens: Optional[int] = None


@dataclass(frozen=True)
class RefineResponse:
    """Decoded body of a refine call.

    Attributes
    ----------
    items: List[RefinedItem]
        Refined items in the order returned by the service.

    meta: ResponseMeta | None
        Tier and usage information from the `_meta` block, when present.

    raw: Any
        The decoded JSON exactly as received.  JSON output re-serializes
        this value so nothing the service sent is lost.
    """

    items: List[RefinedItem]
    meta: Optional[ResponseMeta] = None
    raw: Any = None

    @staticmethod
    def from_payload(payload: Any) -> "RefineResponse":
        # The service normally wraps items in an object, but a bare list is
        # accepted as the item list itself.
        if isinstance(payload, list):
            entries = payload
            meta_data = None
        elif isinstance(payload, dict):
            entries = payload.get("items")
            if not isinstance(entries, list):
                entries = []
            meta_data = payload.get("_meta")
        else:
            entries, meta_data = [], None

        items = [RefinedItem.from_payload(e) for e in entries if isinstance(e, dict)]
        meta = None
        if isinstance(meta_data, dict):
            processed = meta_data.get("itemsProcessed")
            tokens = meta_data.get("tokens")
            meta = ResponseMeta(
                tier=_text(meta_data.get("tier")),
                items_processed=int(processed) if isinstance(processed, (int, float)) else 0,
                tokens=int(tokens) if isinstance(tokens, (int, float)) else None,
            )
        return RefineResponse(items=items, meta=meta, raw=payload)


@dataclass(frozen=True)
class ContextSnippet:
    """Truncated text extracted from one project file."""

    source: str
    text: str


CONTEXT_SEPARATOR = " | "


@dataclass(frozen=True)
class DetectedContext:
    snippets: Tuple[ContextSnippet, ...]

    @property
    def text(self) -> str:
        return CONTEXT_SEPARATOR.join(s.text for s in self.snippets)

    @property
    def sources(self) -> List[str]:
        return [s.source for s in self.snippets]

    @property
    def total_chars(self) -> int:
        return sum(len(s.text) for s in self.snippets)


@dataclass(frozen=True)
class IssueRecord:
    """A GitHub issue as submitted for scoring."""

    number: int
    title: str
    body: str = ""
    labels: List[str] = field(default_factory=list)

    @staticmethod
    def from_payload(number: int, data: Dict[str, Any]) -> "IssueRecord":
        labels: List[str] = []
        raw_labels = data.get("labels")
        for label in raw_labels if isinstance(raw_labels, list) else []:
            # GitHub returns label objects; plain strings are tolerated too.
            if isinstance(label, dict):
                name = label.get("name")
            else:
                name = label
            if name:
                labels.append(_text(name))
        return IssueRecord(
            number=number,
            title=_text(data.get("title")),
            body=_text(data.get("body")),
            labels=labels,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"title": self.title, "body": self.body, "labels": list(self.labels)}


@dataclass(frozen=True)
class LintCheck:
    passed: bool
    message: Optional[str] = None


@dataclass(frozen=True)
class LintResult:
    """Normalized completeness score for one issue.

    The scoring service answers either with a flat result object or with
    `{"issues": [result, ...]}`; both are folded into this type by
    `from_payload` and every field is optional.
    """

    score: float = 0
    agent_ready: bool = False
    lint_id: Optional[str] = None
    checks: Dict[str, LintCheck] = field(default_factory=dict)

    @staticmethod
    def from_payload(payload: Any) -> "LintResult":
        data: Any = payload
        if isinstance(data, dict) and isinstance(data.get("issues"), list):
            data = data["issues"][0] if data["issues"] else {}
        elif isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            data = {}

        score = data.get("completeness_score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            score = 0

        checks: Dict[str, LintCheck] = {}
        raw_checks = data.get("checks")
        if isinstance(raw_checks, dict):
            for name, check in raw_checks.items():
                if isinstance(check, dict):
                    message = check.get("message")
                    checks[name] = LintCheck(
                        passed=bool(check.get("pass")),
                        message=_text(message) if message else None,
                    )
                else:
                    checks[name] = LintCheck(passed=bool(check))

        lint_id = data.get("lint_id")
        return LintResult(
            score=score,
            agent_ready=bool(data.get("agent_ready")),
            lint_id=_text(lint_id) if lint_id else None,
            checks=checks,
        )

    def failing_checks(self) -> List[Tuple[str, LintCheck]]:
        return [(name, check) for name, check in self.checks.items() if not check.passed]
