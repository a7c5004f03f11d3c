#!/usr/bin/env python3
"""
SYMWIZARD LOCATOR - Glob Discovery
----------------------------------
Resolves glob patterns to project files and answers "does any matching
file contain X" without touching the files. Scans run in a worker thread
so the event loop stays free for other platform units.

Author: SymWizard Team
Date: 2026-10-19
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Set, Union

from symwizard.core.constants import IGNORED_DIRS
from symwizard.core.errors import LocateError

logger = logging.getLogger("symwizard.locator")

PathLike = Union[str, Path]


def _is_ignored(path: Path, root: Path) -> bool:
    parts = path.relative_to(root).parts
    return any(part in IGNORED_DIRS for part in parts)


def scan(pattern: str, roots: Optional[Iterable[PathLike]] = None) -> Set[Path]:
    """Synchronous glob over every root; symlinks and ignored trees are skipped."""
    found: Set[Path] = set()
    for root in roots or [Path.cwd()]:
        root = Path(root)
        if not root.is_dir():
            logger.debug(f"Skipping missing root {root}")
            continue
        try:
            candidates = list(root.glob(pattern))
        except OSError as e:
            logger.warning(str(LocateError(str(root), str(e))))
            continue
        for candidate in candidates:
            if candidate.is_symlink() or not candidate.is_file():
                continue
            if _is_ignored(candidate, root):
                continue
            found.add(candidate)
    return found


async def locate(pattern: str, roots: Optional[Iterable[PathLike]] = None) -> Set[Path]:
    """Returns every file matching `pattern`; an empty set is not an error."""
    roots = list(roots) if roots is not None else None
    return await asyncio.to_thread(scan, pattern, roots)


def _matches(paths: List[Path], regex: Pattern) -> bool:
    for path in sorted(paths):
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(str(LocateError(str(path), e.strerror or str(e))))
            continue
        if regex.search(content):
            return True
    return False


async def content_matches(pattern: str, regex: Pattern, roots: Optional[Iterable[PathLike]] = None) -> bool:
    """True if any file matching `pattern` has content matching `regex`."""
    paths = await locate(pattern, roots)
    return await asyncio.to_thread(_matches, list(paths), regex)


def exists(path: PathLike) -> bool:
    return Path(path).exists()
