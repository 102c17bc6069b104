"""
Entry point for the refine-backlog command-line interface (exposed as
`refine-backlog`).

The default command collects free-text backlog items, optionally adds a
short description of the current project, sends everything to the
refinebacklog.com API and prints the structured result as Markdown or
JSON.  The `enforce` subcommand scores a GitHub issue and exits non-zero
when it falls below a minimum score, so it can gate CI.

Usage examples::

    refine-backlog "Fix login bug" "Add dark mode"
    refine-backlog --file backlog.txt --gherkin
    cat items.txt | refine-backlog --user-stories --format json
    refine-backlog enforce --issue 42 --repo acme/webapp --min-score 70

During development the CLI can also be run from the project root with::

    python -m refiner.cli

Results go to stdout; logging and errors go to stderr.  The exit status is
0 on success and 1 on any error or failed gate.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from . import __version__
from .api_client import RefineClient, RefineOptions
from .config import RefinerConfig
from .context_builder import detect_project_context
from .enforce import DEFAULT_MIN_SCORE, run_enforce, validate_target
from .errors import NoItemsError, RefinerError
from .formatter import OUTPUT_FORMATS, render
from .github_client import GitHubClient
from .inputs import collect_items


logger = logging.getLogger("refiner.cli")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

REFINE_EPILOG = """\
examples:
  refine-backlog "Fix login bug"
  refine-backlog "Fix login" "Add dark mode" "Improve perf"
  refine-backlog --file backlog.txt --gherkin
  cat items.txt | refine-backlog --user-stories --format json
  refine-backlog enforce --issue 42 --repo acme/webapp

auto-detection:
  When run from a project directory, the CLI reads context from files like
  AGENTS.md, CLAUDE.md, README.md, package.json and prisma/schema.prisma to
  give the AI more relevant context.  Pass --no-auto-context to disable, or
  --context to override with your own.

tiers:
  Free    Up to 5 items/request, no key needed
  Pro     Up to 25 items/request, $9/mo at refinebacklog.com/pricing
  Team    Up to 50 items/request, $29/mo at refinebacklog.com/pricing
"""


class _CLIArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _add_log_level(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.environ.get("REFINER_LOGLEVEL", "INFO").upper(),
        help="Logging verbosity (default from env REFINER_LOGLEVEL or INFO).",
    )


def build_refine_parser() -> argparse.ArgumentParser:
    parser = _CLIArgumentParser(
        prog="refine-backlog",
        description="Transform messy backlog items into structured, actionable work items.",
        epilog=REFINE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("items", nargs="*", help="Backlog items, one per argument.")
    parser.add_argument("--file", "-f", type=Path, default=None, help="Read items from file (one per line).")
    parser.add_argument(
        "--user-stories",
        action="store_true",
        help='Format titles as "As a [user], I want [goal]...".',
    )
    parser.add_argument("--gherkin", action="store_true", help="Format acceptance criteria as Given/When/Then.")
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="markdown",
        help="Output format: markdown (default) or json.",
    )
    parser.add_argument("--context", "-c", default=None, help="Project context (overrides auto-detection).")
    parser.add_argument(
        "--no-auto-context",
        action="store_true",
        help="Disable auto-detection of project context.",
    )
    parser.add_argument("--key", "-k", default=None, help="License key for Pro/Team tier (env REFINE_BACKLOG_KEY).")
    parser.add_argument("--version", "-v", action="version", version=f"refine-backlog-cli v{__version__}")
    _add_log_level(parser)
    return parser


def build_enforce_parser() -> argparse.ArgumentParser:
    parser = _CLIArgumentParser(
        prog="refine-backlog enforce",
        description="Score a GitHub issue for completeness and fail below a minimum score.",
    )
    parser.add_argument("--issue", default=None, help="Issue number (required).")
    parser.add_argument("--repo", default=None, help="Repository as owner/name (required).")
    parser.add_argument(
        "--min-score",
        type=int,
        default=DEFAULT_MIN_SCORE,
        help=f"Minimum completeness score required to pass (default: {DEFAULT_MIN_SCORE}).",
    )
    parser.add_argument("--key", "-k", default=None, help="License key (env REFINE_BACKLOG_KEY).")
    parser.add_argument(
        "--github-token",
        default=None,
        help="GitHub token for private repositories (default: env GITHUB_TOKEN).",
    )
    _add_log_level(parser)
    return parser


def configure_logging(log_level: str) -> None:
    """Send all logging to stderr and align httpx with the chosen level."""
    level = getattr(logging, (log_level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="[%(levelname)s] %(name)s - %(message)s",
    )
    logging.getLogger().setLevel(level)
    logging.getLogger("httpx").setLevel(level)
    # httpcore logs connection-level detail; only wanted at DEBUG
    if level <= logging.DEBUG:
        logging.getLogger("httpcore").setLevel(level)


def refine_main(argv: List[str], config: Optional[RefinerConfig] = None) -> int:
    parser = build_refine_parser()
    args = parser.parse_intermixed_args(argv)
    configure_logging(args.log_level)
    config = config or RefinerConfig.load()

    try:
        items = collect_items(args.items, args.file, sys.stdin)
    except NoItemsError as exc:
        logger.error("Error: %s", exc)
        parser.print_help(sys.stderr)
        return 1
    except RefinerError as exc:
        logger.error("Error: %s", exc)
        return 1

    # An explicit --context (even empty) always wins over detection.
    context = args.context
    if context is None and not args.no_auto_context:
        context = detect_project_context(Path.cwd())

    options = RefineOptions(
        context=context,
        use_user_stories=args.user_stories,
        use_gherkin=args.gherkin,
        license_key=args.key or config.license_key,
    )
    logger.debug(
        "Execution context: cwd=%s | items=%d | format=%s | api=%s",
        Path.cwd(),
        len(items),
        args.format,
        config.api_url,
    )

    try:
        with RefineClient(config) as client:
            result = client.refine(items, options)
    except RefinerError as exc:
        logger.error("Error: %s", exc)
        return 1

    print(render(result, args.format))
    return 0


def enforce_main(argv: List[str], config: Optional[RefinerConfig] = None) -> int:
    parser = build_enforce_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    config = config or RefinerConfig.load()

    try:
        number = validate_target(args.issue, args.repo)
    except RefinerError as exc:
        logger.error("Error: %s", exc)
        return 1

    token = args.github_token or config.github_token
    if not token:
        logger.info("No GitHub token supplied; fetching anonymously (public repositories only).")

    try:
        with httpx.Client(timeout=config.timeout) as http:
            github = GitHubClient(http, token=token, api_url=config.github_api_url)
            refine = RefineClient(config, http_client=http)
            outcome = run_enforce(
                github,
                refine,
                args.repo,
                number,
                threshold=args.min_score,
                license_key=args.key or config.license_key,
            )
    except RefinerError as exc:
        logger.error("Error: %s", exc)
        return 1

    print(outcome.report)
    return outcome.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Primary CLI entry point.

    Dispatches to the `enforce` subcommand or the default refine flow and
    returns an exit code.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "enforce":
        return enforce_main(argv[1:])
    return refine_main(argv)


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
