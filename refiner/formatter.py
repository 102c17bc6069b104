"""
Output rendering for refine results and enforcement reports.

All functions here are pure: they take decoded values and return the text
to print.
"""

from __future__ import annotations

import json
from typing import List

from .models import IssueRecord, LintResult, RefinedItem, RefineResponse


ITEM_SEPARATOR = "\n\n---\n\n"
OUTPUT_FORMATS = ("markdown", "json")


def format_json(response: RefineResponse) -> str:
    return json.dumps(response.raw, indent=2, ensure_ascii=False)


def format_item(item: RefinedItem) -> str:
    """Render one item; sections without data are left out entirely."""
    lines: List[str] = [f"## {item.title}"]
    if item.user_story:
        lines.append(f"\n> {item.user_story}")
    if item.problem_statement:
        lines.append(f"\n**Problem:** {item.problem_statement}")
    summary: List[str] = []
    if item.estimate:
        summary.append(f"**Estimate:** {item.estimate}")
    if item.priority:
        summary.append(f"**Priority:** {item.priority}")
    if summary:
        lines.append("\n" + " | ".join(summary))
    if item.rationale:
        lines.append(f"**Rationale:** {item.rationale}")
    if item.acceptance_criteria:
        lines.append("\n**Acceptance Criteria:**")
        lines.extend(f"- {criterion}" for criterion in item.acceptance_criteria)
    if item.tags:
        lines.append(f"\n**Tags:** {', '.join(item.tags)}")
    return "\n".join(lines)


def format_markdown(items: List[RefinedItem]) -> str:
    return ITEM_SEPARATOR.join(format_item(item) for item in items)


def render(response: RefineResponse, output_format: str) -> str:
    if output_format == "json":
        return format_json(response)
    return format_markdown(response.items)


def _score(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


def format_lint_report(
    issue: IssueRecord,
    repo: str,
    result: LintResult,
    threshold: int,
    passed: bool,
) -> str:
    """Summarize an enforcement run.

    `passed` is the gate decision made by the caller.  A passing run
    prints the score, readiness and title.  A failing run additionally
    lists every failing check and how to re-run the gate.
    """
    ready = "yes" if result.agent_ready else "no"
    lines: List[str] = []
    if passed:
        lines.append(
            f"PASS: issue #{issue.number} scored {_score(result.score)}/100 "
            f"(minimum {threshold})"
        )
    else:
        lines.append(
            f"FAIL: issue #{issue.number} scored {_score(result.score)}/100, "
            f"below the minimum of {threshold}"
        )
    lines.append(f"  Title: {issue.title}")
    lines.append(f"  Agent ready: {ready}")
    if result.lint_id:
        lines.append(f"  Lint ID: {result.lint_id}")
    if passed:
        return "\n".join(lines)

    failing = result.failing_checks()
    if failing:
        lines.append("")
        lines.append("Failing checks:")
        for name, check in failing:
            if check.message:
                lines.append(f"  - {name}: {check.message}")
            else:
                lines.append(f"  - {name}")
    lines.append("")
    lines.append(
        f"Update the issue at https://github.com/{repo}/issues/{issue.number} "
        "to address the checks above, then re-run:"
    )
    lines.append(f"  refine-backlog enforce --issue {issue.number} --repo {repo} --min-score {threshold}")
    return "\n".join(lines)
