# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Set semantics over ``PATH``-style search path strings.

A search path is treated as an ordered set of directory *identities*. The
identity of a segment is its canonical, symlink-resolved form when the
segment names an existing filesystem entry, falling back to the segment with
trailing separators removed. Comparisons are best-effort and must never be
relied upon as a security boundary.

Every function except :func:`inherited_search_path` and
:func:`ensure_on_process_path` is pure: the inherited search path is passed in
explicitly and a new value is returned.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, MutableMapping
from pathlib import Path
from typing import Final

LOGGER = logging.getLogger(__name__)

PATH_VARIABLE: Final[str] = "PATH"
_TRAILING: Final[str] = os.sep + (os.altsep or "")


def _segments(search_path: str) -> Iterator[str]:
    """Yield the non-empty segments of *search_path* in order."""

    for segment in search_path.split(os.pathsep):
        if segment:
            yield segment


def normalize_segment(segment: str) -> str:
    """Return the identity used to compare *segment* against other entries.

    Args:
        segment: Raw directory text taken from a search path.

    Returns:
        str: Canonical absolute path when *segment* exists, otherwise the
        segment without trailing separators. Empty input yields ``""``.
    """

    if not segment:
        return ""
    # The filesystem root keeps its single separator.
    trimmed = segment.rstrip(_TRAILING) or segment[0]
    try:
        return str(Path(trimmed).resolve(strict=True))
    except (OSError, RuntimeError):  # RuntimeError covers symlink loops
        return trimmed


def contains_directory(search_path: str, directory: str) -> bool:
    """Return ``True`` when *directory* is already present in *search_path*."""

    if not search_path:
        return False
    target = normalize_segment(directory)
    if not target:
        return False
    return any(normalize_segment(segment) == target for segment in _segments(search_path))


def add_if_missing(search_path: str, directory: str) -> str:
    """Prepend *directory* to *search_path* unless it is already present.

    Repeated calls with the same directory return the input unchanged once the
    directory is present, so callers may apply this on every process launch.
    Existing duplicates in *search_path* are preserved untouched and an empty
    *directory* leaves it unchanged.

    Args:
        search_path: Current search path value, possibly empty.
        directory: Directory to make available.

    Returns:
        str: The updated search path.
    """

    if not normalize_segment(directory):
        return search_path
    if contains_directory(search_path, directory):
        LOGGER.debug("Directory %s already in PATH, skipping", directory)
        return search_path
    LOGGER.info("Added %s to PATH", directory)
    if not any(_segments(search_path)):
        return directory
    return f"{directory}{os.pathsep}{search_path}"


def deduplicate(search_path: str) -> str:
    """Return *search_path* keeping only the first entry of each identity.

    Empty segments are dropped, so the result never starts or ends with a
    separator and never contains doubled separators. The original text of
    each retained segment is kept.
    """

    seen: set[str] = set()
    unique: list[str] = []
    for segment in _segments(search_path):
        identity = normalize_segment(segment)
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(segment)
    return os.pathsep.join(unique)


def enhance_for_common_locations(
    candidate_dirs: Iterable[str | Path],
    search_path: str,
) -> str | None:
    """Prepend existing candidate directories missing from *search_path*.

    Args:
        candidate_dirs: Ordered directories worth adding when present.
        search_path: Inherited search path the candidates are checked against.

    Returns:
        str | None: Deduplicated search path with the qualifying candidates
        prepended in input order, or ``None`` when no candidate qualifies.
        ``None`` means callers must leave their current value untouched.
    """

    additions: list[str] = []
    for candidate in candidate_dirs:
        text = str(candidate)
        if not text or not os.path.exists(text):
            continue
        if contains_directory(search_path, text):
            continue
        additions.append(text)
    if not additions:
        return None
    if search_path:
        additions.append(search_path)
    return deduplicate(os.pathsep.join(additions))


def inherited_search_path(environ: MutableMapping[str, str] | None = None) -> str:
    """Read the inherited search path, treating an unset variable as empty."""

    source = os.environ if environ is None else environ
    return source.get(PATH_VARIABLE, "")


def ensure_on_process_path(
    directory: str,
    environ: MutableMapping[str, str] | None = None,
) -> str:
    """Add *directory* to the process ``PATH`` and write the result back.

    This is the only helper that mutates process-wide state. It is a no-op
    once the directory is present. Concurrent writers must be serialised by
    the caller.

    Returns:
        str: The value now stored in the environment.
    """

    target = os.environ if environ is None else environ
    current = target.get(PATH_VARIABLE, "")
    updated = add_if_missing(current, directory)
    if updated != current:
        target[PATH_VARIABLE] = updated
    return updated


__all__ = [
    "PATH_VARIABLE",
    "add_if_missing",
    "contains_directory",
    "deduplicate",
    "enhance_for_common_locations",
    "ensure_on_process_path",
    "inherited_search_path",
    "normalize_segment",
]
