# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for resolver configuration."""

from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from toolpath.config import DEFAULT_SYSTEM_DIRS, ConfigError, ResolverSettings, settings_from_environ


def test_defaults() -> None:
    settings = ResolverSettings()

    assert settings.binary_name == "claude"
    assert settings.version_args == ("--version",)
    assert settings.version_timeout == 5.0
    assert settings.system_dirs == DEFAULT_SYSTEM_DIRS
    assert settings.explicit_path is None
    assert settings.include_path_lookup


def test_settings_from_environ_overlays_variables() -> None:
    environ = {
        "TOOLPATH_BINARY": " mytool ",
        "TOOLPATH_VERSION_TIMEOUT": "2.5",
        "TOOLPATH_EXTRA_DIRS": os.pathsep.join(["/srv/a", "", "/srv/b"]),
        "TOOLPATH_EXPLICIT_PATH": "/opt/mytool/bin/mytool",
        "TOOLPATH_MINIMUM_VERSION": "1.2",
        "UNRELATED": "ignored",
    }

    settings = settings_from_environ(environ)

    assert settings.binary_name == "mytool"
    assert settings.version_timeout == 2.5
    assert settings.extra_dirs == ("/srv/a", "/srv/b")
    assert settings.explicit_path == "/opt/mytool/bin/mytool"
    assert settings.minimum_version == "1.2"


def test_settings_from_environ_keeps_base_values() -> None:
    base = ResolverSettings(binary_name="node", include_path_lookup=False)

    settings = settings_from_environ({}, base=base)

    assert settings == base


@pytest.mark.parametrize(
    "environ",
    [
        {"TOOLPATH_VERSION_TIMEOUT": "soon"},
        {"TOOLPATH_VERSION_TIMEOUT": "0"},
        {"TOOLPATH_MINIMUM_VERSION": "not-a-version"},
        {"TOOLPATH_BINARY": "bin/claude"},
    ],
)
def test_settings_from_environ_rejects_invalid_values(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        settings_from_environ(environ)


def test_assignment_is_validated() -> None:
    settings = ResolverSettings()

    with pytest.raises(ValidationError):
        settings.binary_name = "   "
