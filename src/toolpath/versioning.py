# SPDX-License-Identifier: MIT
"""Helpers for capturing, parsing and comparing tool versions."""

from __future__ import annotations

import logging
import re
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Final

from packaging.version import InvalidVersion
from packaging.version import Version as PackagingVersion

from .process import run_command

LOGGER = logging.getLogger(__name__)

VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"version:\s*([0-9]+)\.([0-9]+)\.([0-9]+)(?:-[0-9A-Za-z][0-9A-Za-z.-]*)?",
    re.IGNORECASE | re.ASCII,
)


@dataclass(frozen=True, order=True)
class Version:
    """Semantic release number ordered by ``(major, minor, patch)``."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(f"version components must be non-negative: {self.major}.{self.minor}.{self.patch}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str | None) -> Version | None:
    """Extract the first ``version: X.Y.Z`` occurrence from *text*.

    Any ``-label`` suffix is accepted and discarded. Returns ``None`` when no
    well-formed version is present.
    """

    if not text:
        return None
    match = VERSION_PATTERN.search(text)
    if match is None:
        return None
    major, minor, patch = (int(group) for group in match.groups())
    return Version(major, minor, patch)


class VersionResolver:
    """Capture and compare tool versions using standardized semantics."""

    def __init__(self, *, timeout: float = 5.0) -> None:
        self.timeout = timeout

    def capture(
        self,
        executable: str,
        args: Sequence[str] = ("--version",),
        *,
        env: Mapping[str, str] | None = None,
    ) -> Version | None:
        """Run *executable* with *args* and parse the reported version.

        A timeout, an empty or unparsable output and a non-zero exit without a
        parsable version all yield ``None``.

        Raises:
            OSError: The executable could not be spawned at all.
        """

        try:
            completed = run_command([executable, *args], env=env, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            LOGGER.warning("Version query for %s timed out after %.1fs", executable, self.timeout)
            return None
        version = parse_version(completed.stdout) or parse_version(completed.stderr)
        if version is None:
            LOGGER.debug(
                "No version reported by %s (exit status %s)",
                executable,
                completed.returncode,
            )
        return version

    def is_compatible(self, actual: Version | None, expected: str | None) -> bool:
        if expected is None:
            return True
        if actual is None:
            return False
        try:
            return PackagingVersion(str(actual)) >= PackagingVersion(expected)
        except InvalidVersion:
            return False


__all__ = ["VERSION_PATTERN", "Version", "VersionResolver", "parse_version"]
