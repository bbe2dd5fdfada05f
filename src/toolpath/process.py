# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution for version queries."""

from __future__ import annotations

# Bandit: subprocess usage is intentional; candidates are invoked with an
# argument list and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if not head_path.is_absolute():
        msg = f"Executable '{head}' must be given as an absolute path"
        raise ValueError(msg)
    return [str(head_path), *rest]


def run_command(
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute *args* with captured text output and stdin closed.

    The exit status is returned as-is and never raises.

    Raises:
        ValueError: The executable is not an absolute path.
        OSError: The executable could not be spawned.
        subprocess.TimeoutExpired: The process outlived *timeout*; it has
            been killed by the time the exception propagates.
    """
    normalized = _normalize_args(args)

    return subprocess.run(  # nosec B603
        normalized,
        env=dict(env) if env is not None else None,
        check=False,
        capture_output=True,
        text=True,
        timeout=timeout,
        stdin=subprocess.DEVNULL,
    )


__all__ = ["run_command"]
