"""
Refine-backlog CLI package.

This package provides a command-line interface (CLI) that turns messy,
free-text backlog items into structured work items by sending them to the
refinebacklog.com API.  A run:

* Collects items from arguments, a file (one per line) and piped stdin.
* Optionally auto-detects a short project description from well-known
  files in the working directory (AGENTS.md, README.md, package.json...).
* Renders the refined items as Markdown or raw JSON.

The `enforce` subcommand scores a GitHub issue for completeness and fails
the process when the score is below a threshold, for use as a CI gate.

See `cli.py` for the entry point.
"""

__version__ = "1.0.2"

__all__ = [
    "cli",
    "__version__",
]
