# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from toolpath.config import ResolverSettings


FakeTool = Callable[..., Path]


@pytest.fixture
def make_tool() -> FakeTool:
    """Return a factory writing executable ``#!/bin/sh`` scripts."""

    def _make(path: Path, body: str = "echo 'claude version: 1.0.0'", *, mode: int = 0o755) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        path.chmod(mode)
        return path

    return _make


@pytest.fixture
def layout(tmp_path: Path) -> dict[str, Path]:
    """Return an isolated filesystem layout with a fake home directory."""

    home = tmp_path / "home"
    home.mkdir()
    return {
        "root": tmp_path,
        "home": home,
        "system": tmp_path / "usr" / "local" / "bin",
        "homebrew": tmp_path / "opt" / "homebrew" / "bin",
    }


@pytest.fixture
def settings(layout: dict[str, Path]) -> ResolverSettings:
    """Return settings confined to the temporary layout."""

    return ResolverSettings(
        system_dirs=(str(layout["system"]),),
        package_manager_dirs=(str(layout["homebrew"]),),
        include_path_lookup=False,
        version_timeout=5.0,
    )


@pytest.fixture
def environ(layout: dict[str, Path]) -> dict[str, str]:
    """Return a minimal inherited environment for the fake home."""

    return {
        "PATH": os.pathsep.join(["/usr/bin", "/bin"]),
        "HOME": str(layout["home"]),
        "LANG": "C.UTF-8",
    }
