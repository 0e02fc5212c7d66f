"""parabatch.scanner

Enumerate candidate test source files.

Rules
-----
- A directory root is walked recursively and every file whose *full path*
  matches the pattern is kept (default: ``TEST_PATTERN``, ``...Test.py``).
- A :class:`~parabatch.models.SuitePath` root carries its own pattern.
- An explicit file root is matched against ``FILE_PATTERN`` (any ``.py``) and
  is never recursed.
- Directory listings are sorted so the result order is stable across
  machines.
- Duplicates are dropped, keeping the first occurrence.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Iterable, List, Optional, Pattern

from parabatch.errors import NoTestsDiscovered, PathNotFound
from parabatch.models import FILE_PATTERN, TEST_PATTERN, PathLike, SuitePath

logger = logging.getLogger(__name__)

_DOT_ENTRIES = {os.curdir, os.pardir}


def _is_dot_entry(name: str) -> bool:
    return name in _DOT_ENTRIES


def _scan_dir(path: str, pattern: Pattern[str], out: List[str]) -> None:
    for name in sorted(os.listdir(path)):
        if _is_dot_entry(name):
            continue
        full = os.path.join(path, name)
        if os.path.isdir(full):
            _scan_dir(full, pattern, out)
        elif pattern.search(full):
            out.append(full)


def scan_path(path: PathLike, pattern: Optional[str] = None) -> List[str]:
    """Return matching files below ``path`` (a file, directory or SuitePath)."""

    if isinstance(path, SuitePath):
        pattern = path.pattern
        path = path.path

    path = os.path.expanduser(str(path))
    if not os.path.exists(path):
        raise PathNotFound(f"{path} is not a valid directory or file")

    found: List[str] = []
    if os.path.isdir(path):
        _scan_dir(path, re.compile(pattern or TEST_PATTERN), found)
    elif re.search(FILE_PATTERN, path):
        found.append(path)

    logger.debug("Scanned %s: %d file(s)", path, len(found))
    return found


def dedupe(paths: Iterable[str]) -> List[str]:
    """Drop duplicates, keeping first occurrence order."""
    seen: set[str] = set()
    out: List[str] = []
    for p in paths:
        if p in seen:
            continue
        seen.add(p)
        out.append(p)
    return out


def scan_paths(roots: Iterable[PathLike]) -> List[str]:
    """Scan every root and return the deduplicated file list.

    Raises NoTestsDiscovered when nothing matched at all.
    """

    files: List[str] = []
    for root in roots:
        files.extend(scan_path(root))

    if not files:
        raise NoTestsDiscovered("No path or configuration provided (tests must end with Test.py)")

    return dedupe(files)
