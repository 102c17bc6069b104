"""
Backlog item collection.

Items are merged from three sources in a fixed order: positional
arguments, then the lines of `--file`, then lines piped on stdin.  Blank
entries are dropped and every item is trimmed.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .errors import FileAccessError, InputFileNotFoundError, NoItemsError


logger = logging.getLogger(__name__)


def clean_lines(lines: Iterable[str]) -> List[str]:
    """Trim each line and drop the blank ones."""
    return [line.strip() for line in lines if line.strip()]


def read_item_file(path: Path) -> List[str]:
    if not path.is_file():
        raise InputFileNotFoundError(str(path))
    try:
        with path.open("r", encoding="utf-8") as f:
            return clean_lines(f)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"Cannot read {path}: {exc}") from exc


def read_stdin_items(stream: Optional[TextIO] = None) -> List[str]:
    """Read items from a piped stdin.  Interactive terminals are not read."""
    stream = sys.stdin if stream is None else stream
    if stream is None or stream.isatty():
        return []
    buffer = getattr(stream, "buffer", None)
    try:
        if buffer is not None:
            # Decode the raw bytes strictly; the text layer may use surrogateescape.
            lines = buffer.read().decode("utf-8").splitlines()
        else:
            lines = list(stream)
            for line in lines:
                line.encode("utf-8")  # rejects lone surrogates
    except (OSError, UnicodeError) as exc:
        raise FileAccessError(f"Cannot read stdin: {exc}") from exc
    return clean_lines(lines)


def collect_items(
    args: Iterable[str],
    file_path: Optional[Path] = None,
    stdin: Optional[TextIO] = None,
) -> List[str]:
    """Merge items from arguments, an item file and stdin, in that order.

    Raises
    ------
    InputFileNotFoundError
        `file_path` was given but does not exist.
    NoItemsError
        None of the sources produced an item.
    """
    items = clean_lines(args)
    if file_path is not None:
        from_file = read_item_file(file_path)
        logger.debug("Read %d item(s) from %s", len(from_file), file_path)
        items.extend(from_file)
    from_stdin = read_stdin_items(stdin)
    if from_stdin:
        logger.debug("Read %d item(s) from stdin", len(from_stdin))
    items.extend(from_stdin)
    if not items:
        raise NoItemsError()
    return items
