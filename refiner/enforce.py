"""
Issue completeness gate (`refine-backlog enforce`).

Fetches a GitHub issue, scores it with the lint endpoint and compares the
score with a minimum.  The two requests run strictly one after the other;
any error aborts the run before the comparison.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .api_client import RefineClient
from .errors import UsageError
from .formatter import format_lint_report
from .github_client import GitHubClient
from .models import IssueRecord, LintResult


logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 80

_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

ENFORCE_USAGE = (
    "Usage: refine-backlog enforce --issue <number> --repo <owner/name> "
    "[--min-score 80] [--key <license>] [--github-token <token>]\n"
    "Example: refine-backlog enforce --issue 42 --repo acme/webapp --min-score 70"
)


@dataclass(frozen=True)
class EnforceOutcome:
    issue: IssueRecord
    result: LintResult
    threshold: int
    passed: bool
    report: str

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1


def validate_target(issue: Optional[str], repo: Optional[str]) -> int:
    """Check `--issue`/`--repo` before any request is made; return the issue number."""
    if not issue or not repo:
        raise UsageError(f"--issue and --repo are required.\n{ENFORCE_USAGE}")
    try:
        number = int(str(issue).lstrip("#"))
    except ValueError:
        raise UsageError(f"--issue must be an issue number, got {issue!r}.\n{ENFORCE_USAGE}") from None
    if number <= 0:
        raise UsageError(f"--issue must be a positive number, got {issue!r}.\n{ENFORCE_USAGE}")
    if not _REPO_RE.match(repo):
        raise UsageError(f"--repo must look like owner/name, got {repo!r}.\n{ENFORCE_USAGE}")
    return number


def run_enforce(
    github: GitHubClient,
    refine: RefineClient,
    repo: str,
    number: int,
    threshold: int = DEFAULT_MIN_SCORE,
    license_key: Optional[str] = None,
) -> EnforceOutcome:
    issue = github.fetch_issue(repo, number)
    logger.info("Scoring issue #%d in %s: %s", number, repo, issue.title)
    result = refine.score_issue(issue, license_key=license_key)
    logger.debug(
        "Lint result: score=%s ready=%s checks=%d failing=%d",
        result.score,
        result.agent_ready,
        len(result.checks),
        len(result.failing_checks()),
    )
    passed = result.score >= threshold
    report = format_lint_report(issue, repo, result, threshold, passed)
    return EnforceOutcome(issue=issue, result=result, threshold=threshold, passed=passed, report=report)
