"""
Project context auto-detection for the refine-backlog CLI.

This module reads a short description of the current project from a fixed,
priority-ordered list of well-known files (agent instruction files, the
README, the npm manifest, a Prisma schema) and combines them into a single
string that is sent along with the backlog items.  The combined text is
capped at `MAX_CONTEXT_CHARS`; files visited after the budget is spent are
ignored and a file's extract is truncated to whatever budget remains.

Detection is best-effort: a missing, unreadable or malformed file is
skipped and never aborts the run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .models import CONTEXT_SEPARATOR, ContextSnippet, DetectedContext


logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 700
PLAIN_EXTRACT_CHARS = 300
MAX_MANIFEST_DEPS = 8


def extract_plain(content: str) -> str:
    return content[:PLAIN_EXTRACT_CHARS]


def extract_manifest(content: str) -> str:
    """Summarize a package.json as `name: | description: | deps:`."""
    try:
        pkg = json.loads(content)
    except ValueError:
        return ""
    if not isinstance(pkg, dict):
        return ""

    parts: List[str] = []
    if pkg.get("name"):
        parts.append(f"name: {pkg['name']}")
    if pkg.get("description"):
        parts.append(f"description: {pkg['description']}")
    deps: List[str] = []
    for key in ("dependencies", "devDependencies"):
        group = pkg.get(key)
        if isinstance(group, dict):
            deps.extend(group.keys())
    deps = deps[:MAX_MANIFEST_DEPS]
    if deps:
        parts.append(f"deps: {', '.join(deps)}")
    return " | ".join(parts)


# Visited in order; earlier files win the budget.
CONTEXT_SOURCES: Tuple[Tuple[str, Callable[[str], str]], ...] = (
    ("AGENTS.md", extract_plain),
    ("CLAUDE.md", extract_plain),
    ("CODEX.md", extract_plain),
    ("GEMINI.md", extract_plain),
    (".github/copilot-instructions.md", extract_plain),
    (".windsurfrules", extract_plain),
    ("llms.txt", extract_plain),
    ("README.md", extract_plain),
    ("package.json", extract_manifest),
    ("prisma/schema.prisma", extract_plain),
)


class ContextBuilder:
    """Collects project context snippets from a base directory."""

    def __init__(
        self,
        base_dir: Path,
        sources: Tuple[Tuple[str, Callable[[str], str]], ...] = CONTEXT_SOURCES,
        max_chars: int = MAX_CONTEXT_CHARS,
    ) -> None:
        self.base_dir = base_dir
        self.sources = sources
        self.max_chars = max_chars

    def _read(self, rel_path: str) -> Optional[str]:
        """Return the stripped contents of `rel_path`, or None when unusable."""
        abs_path = self.base_dir / rel_path
        if not abs_path.is_file():
            return None
        try:
            with abs_path.open("r", encoding="utf-8") as f:
                return f.read().strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable context file %s: %s", abs_path, exc)
            return None

    def collect(self) -> DetectedContext:
        """Visit every source in order and accumulate snippets up to the budget.

        `total_chars` is the length of the joined string, separators
        included, so the combined context never exceeds `max_chars`.
        """
        snippets: List[ContextSnippet] = []
        total_chars = 0
        for rel_path, extractor in self.sources:
            if total_chars >= self.max_chars:
                break
            content = self._read(rel_path)
            if not content:
                continue
            extracted = extractor(content).strip()
            if not extracted:
                continue
            overhead = len(CONTEXT_SEPARATOR) if snippets else 0
            remaining = self.max_chars - total_chars - overhead
            chunk = extracted[:remaining].rstrip() if remaining > 0 else ""
            if not chunk:
                break
            snippets.append(ContextSnippet(source=rel_path, text=chunk))
            total_chars += overhead + len(chunk)
        return DetectedContext(snippets=tuple(snippets))

    def detect(self) -> Optional[str]:
        """Return the combined context string, or None if nothing was found."""
        found = self.collect()
        if not found.snippets:
            logger.debug("No project context files found in %s", self.base_dir)
            return None
        combined = found.text
        logger.info(
            "Auto-detected project context from: %s (%d chars)",
            ", ".join(found.sources),
            len(combined),
        )
        return combined


def detect_project_context(base_dir: Optional[Path] = None) -> Optional[str]:
    return ContextBuilder(base_dir or Path.cwd()).detect()
