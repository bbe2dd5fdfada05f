# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for launch environment preparation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from toolpath.config import ResolverSettings
from toolpath.models import ExecutionEnvironment
from toolpath.resolver import BinaryResolver

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX search path separators")

NVM_CLAUDE = "/Users/test/.nvm/versions/node/v20.0.0/bin/claude"
NVM_BIN = "/Users/test/.nvm/versions/node/v20.0.0/bin"


def _resolver(environ: dict[str, str]) -> BinaryResolver:
    return BinaryResolver(ResolverSettings(include_path_lookup=False), environ=environ)


def test_adds_version_manager_directory() -> None:
    prepared = _resolver({"PATH": "/usr/bin:/usr/local/bin"}).build_execution_environment(NVM_CLAUDE)

    assert isinstance(prepared, ExecutionEnvironment)
    assert prepared.executable_path == NVM_CLAUDE
    assert prepared.env["PATH"] == f"{NVM_BIN}:/usr/bin:/usr/local/bin"
    assert prepared.argv("--print", "hi") == [NVM_CLAUDE, "--print", "hi"]


def test_leaves_path_alone_when_directory_present() -> None:
    environ = {"PATH": f"/usr/bin:{NVM_BIN}/"}

    prepared = _resolver(environ).build_execution_environment(NVM_CLAUDE)

    assert prepared.search_path == f"/usr/bin:{NVM_BIN}/"


def test_deduplicates_inherited_path() -> None:
    environ = {"PATH": "/usr/bin:/usr/local/bin:/usr/bin:/opt/bin"}

    prepared = _resolver(environ).build_execution_environment("/opt/bin/claude")

    assert prepared.search_path == "/usr/bin:/usr/local/bin:/opt/bin"


def test_other_variables_are_inherited_untouched() -> None:
    environ = {"PATH": "/usr/bin", "HOME": "/test/home", "LANG": "en_US.UTF-8", "NVM_DIR": "/test/.nvm"}

    prepared = _resolver(environ).build_execution_environment(NVM_CLAUDE)

    assert {key: value for key, value in prepared.env.items() if key != "PATH"} == {
        "HOME": "/test/home",
        "LANG": "en_US.UTF-8",
        "NVM_DIR": "/test/.nvm",
    }
    assert environ["PATH"] == "/usr/bin"


def test_empty_or_unset_path() -> None:
    assert _resolver({}).build_execution_environment("/usr/bin/claude").search_path == "/usr/bin"
    assert _resolver({"PATH": ":::"}).build_execution_environment(NVM_CLAUDE).search_path == NVM_BIN


def test_rejects_empty_executable() -> None:
    with pytest.raises(ValueError):
        _resolver({"PATH": "/usr/bin"}).build_execution_environment("")


def test_repeated_preparation_never_grows_path(monkeypatch: pytest.MonkeyPatch) -> None:
    initial = ":".join(
        [
            "/usr/bin",
            "/usr/local/bin",
            "/opt/homebrew/bin",
            "/Users/test/.nvm/versions/node/v18.0.0/bin",
        ]
    )
    monkeypatch.setenv("PATH", initial)
    resolver = BinaryResolver(ResolverSettings(include_path_lookup=False))

    for _ in range(10):
        prepared = resolver.build_execution_environment(NVM_CLAUDE)
        os.environ["PATH"] = prepared.search_path
        segments = os.environ["PATH"].split(":")
        assert sum(1 for segment in segments if segment.rstrip("/") == NVM_BIN) == 1
        assert len(segments) == 5


def test_symlinked_executable_gets_version_manager_runtime(tmp_path: Path, make_tool) -> None:  # noqa: ANN001
    node_root = tmp_path / "home" / ".nvm" / "versions" / "node" / "v20.0.0"
    make_tool(node_root / "bin" / "node", "exit 0")
    script = make_tool(node_root / "lib" / "node_modules" / "claude" / "cli.js", "exit 0")
    link = tmp_path / "usr" / "local" / "bin" / "claude"
    link.parent.mkdir(parents=True)
    link.symlink_to(script)

    prepared = _resolver({"PATH": "/usr/bin"}).build_execution_environment(link)

    segments = prepared.search_path.split(":")
    assert segments[0] == str(link.parent)
    assert Path(segments[1]).resolve() == (node_root / "bin").resolve()
    assert segments[2:] == ["/usr/bin"]


def test_bare_name_is_located_on_inherited_path(tmp_path: Path, make_tool) -> None:  # noqa: ANN001
    tool = make_tool(tmp_path / "tools" / "claude", "exit 0")
    environ = {"PATH": f"/usr/bin:{tool.parent}"}

    prepared = _resolver(environ).build_execution_environment("claude")

    assert prepared.executable_path == str(tool)
    assert prepared.search_path == f"/usr/bin:{tool.parent}"


def test_unknown_bare_name_adds_no_relative_segment() -> None:
    prepared = _resolver({"PATH": "/usr/bin"}).build_execution_environment("toolpath-missing-claude")

    assert prepared.search_path == "/usr/bin"
    assert prepared.executable_path == "toolpath-missing-claude"


def test_relative_path_is_made_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    prepared = _resolver({"PATH": "/usr/bin"}).build_execution_environment(os.path.join("bin", "claude"))

    segments = prepared.search_path.split(":")
    assert segments == [str(Path.cwd() / "bin"), "/usr/bin"]
    assert "." not in segments
    assert Path(prepared.executable_path).is_absolute()


def test_package_manager_prefix_adds_its_bin() -> None:
    settings = ResolverSettings(include_path_lookup=False, package_manager_dirs=("/toolpath-brew/bin",))
    resolver = BinaryResolver(settings, environ={"PATH": "/usr/bin"})

    prepared = resolver.build_execution_environment("/toolpath-brew/lib/node_modules/claude/cli.js")

    assert prepared.search_path == "/toolpath-brew/lib/node_modules/claude:/toolpath-brew/bin:/usr/bin"
