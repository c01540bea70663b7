"""Recursive source traversal and file reading for the extractors."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".gradle",
    ".idea",
    ".venv",
    "node_modules",
    "target",
    "__pycache__",
}

_logger = get_logger("scanner")


@dataclass(frozen=True)
class SourceFile:
    """A readable source file handed to an extractor."""

    path: Path
    content: bytes


class SourceScanner:
    """Walks a source root and yields files whose suffix matches the grammar."""

    def iter_sources(self, root: Path, extensions: Sequence[str]) -> Iterator[SourceFile]:
        """Yield readable files under ``root`` in a stable, sorted order."""
        root = Path(root).expanduser()
        if not root.is_dir():
            return
        suffixes = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}
        for path in _iter_files(root):
            if path.suffix.lower() not in suffixes:
                continue
            try:
                content = path.read_bytes()
            except OSError as exc:
                _logger.debug("Skipping unreadable file %s: %s", path, exc)
                continue
            yield SourceFile(path=path, content=content)


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # os.walk honours in-place edits, so sorting here fixes the descent order too.
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        current = Path(dirpath)
        for filename in sorted(filenames):
            yield current / filename


__all__ = ["SourceFile", "SourceScanner"]
